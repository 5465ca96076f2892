"""CLI main entry point for Carris Metropolitana route export."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from .. import __version__
from ..core import (
    CarrisRouteError,
    InvalidGeometryError,
    LineDetails,
    NotFoundError,
    Pattern,
    PatternLoadError,
    RouteResolver,
    RouteSession,
    TrajectoryFile,
    ValidationError,
)
from ..core.config import settings
from .formatters import format_line_json, format_line_table

console = Console()
error_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else settings.log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


async def _search_line(line_id: str, timeout: float) -> tuple[LineDetails, list[Pattern]]:
    async with RouteResolver(timeout=timeout) as resolver:
        session = RouteSession(resolver)
        line = await session.search(line_id)
        return line, session.patterns


async def _export_pattern(
    line_id: str, pattern_id: str | None, timeout: float
) -> TrajectoryFile:
    async with RouteResolver(timeout=timeout) as resolver:
        session = RouteSession(resolver)
        await session.search(line_id)
        patterns = session.patterns

        if pattern_id is None:
            if len(patterns) != 1:
                choices = ", ".join(
                    f"{p.id} ({p.headsign})" for p in patterns
                ) or "none"
                raise ValidationError(
                    f"Line {line_id} has {len(patterns)} patterns, choose one with "
                    f"--pattern: {choices}"
                )
            pattern_id = patterns[0].id

        await session.select(pattern_id)
        return session.export()


def _handle_error(e: Exception, verbose: bool) -> None:
    if isinstance(e, ValidationError):
        error_console.print(f"[red]Error:[/red] {e}")
    elif isinstance(e, NotFoundError):
        error_console.print(f"[yellow]Not found:[/yellow] {e}")
    elif isinstance(e, PatternLoadError):
        error_console.print(f"[red]Pattern error:[/red] {e}")
    elif isinstance(e, InvalidGeometryError):
        error_console.print(f"[red]Invalid shape:[/red] {e}")
    elif isinstance(e, CarrisRouteError):
        error_console.print(f"[red]API error:[/red] {e}")
    else:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            error_console.print_exception()
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Carris Metropolitana Routes - Look up lines and export patterns as GPX."""
    pass


@cli.command()
@click.argument("line_id")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option(
    "--timeout", "-t", default=settings.request_timeout, help="Request timeout in seconds"
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed information")
def line(line_id: str, output_format: str, timeout: float, verbose: bool) -> None:
    """Show a line and its patterns.

    Examples:
        cm-route line 3001
        cm-route line 3001 --format json
    """
    _configure_logging(verbose)
    try:
        with console.status(f"[bold green]Looking up line {line_id}..."):
            details, patterns = asyncio.run(_search_line(line_id, timeout))
    except Exception as e:
        _handle_error(e, verbose)
        return

    if output_format == "json":
        click.echo(format_line_json(details, patterns))
    else:
        format_line_table(details, patterns, verbose=verbose)


@cli.command()
@click.argument("line_id")
@click.option("--pattern", "-p", "pattern_id", help="Pattern identifier to export")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file or directory (defaults to the suggested file name)",
)
@click.option(
    "--timeout", "-t", default=settings.request_timeout, help="Request timeout in seconds"
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed information")
def export(
    line_id: str,
    pattern_id: str | None,
    output: Path | None,
    timeout: float,
    verbose: bool,
) -> None:
    """Export the trajectory of a line pattern as a GPX file.

    Examples:
        cm-route export 3001 --pattern 3001_0_1
        cm-route export 3001 -p 3001_0_1 -o tracks/
    """
    _configure_logging(verbose)
    try:
        with console.status(f"[bold green]Exporting line {line_id}..."):
            trajectory = asyncio.run(_export_pattern(line_id, pattern_id, timeout))
    except Exception as e:
        _handle_error(e, verbose)
        return

    if output is None:
        target = Path(trajectory.filename)
    elif output.is_dir():
        target = output / trajectory.filename
    else:
        target = output

    try:
        target.write_text(trajectory.content, encoding="utf-8")
    except OSError as e:
        error_console.print(f"[red]Error:[/red] Cannot write {target}: {e.strerror or e}")
        sys.exit(1)
    console.print(f"[green]Saved[/green] {target}")


@cli.group()
def config() -> None:
    """Configuration management."""
    pass


@config.command("show")
def show_config() -> None:
    """Show current configuration."""
    console.print("[bold]Current Configuration:[/bold]")
    console.print(f"• API base URL: {settings.api_base_url}")
    console.print(f"• Request timeout: {settings.request_timeout} seconds")
    console.print(f"• GPX creator: {settings.gpx_creator}")
    console.print(f"• Log level: {settings.log_level}")
    console.print("[dim]Override with CM_ROUTE_* environment variables[/dim]")


if __name__ == "__main__":
    cli()
