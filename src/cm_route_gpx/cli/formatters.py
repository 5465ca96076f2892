"""Output formatters for CLI display."""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import LineDetails, Pattern

console = Console()


def format_line_table(
    line: LineDetails, patterns: list[Pattern], verbose: bool = False
) -> None:
    """Display a line and its patterns as rich output."""
    summary_text = f"""[bold]Line:[/bold] {line.short_name}
[bold]Name:[/bold] {line.long_name or "-"}"""
    if line.municipalities:
        summary_text += f"\n[bold]Municipalities:[/bold] {', '.join(line.municipalities)}"
    if verbose and line.localities:
        summary_text += f"\n[bold]Localities:[/bold] {', '.join(line.localities)}"

    console.print(Panel(summary_text, title="Line Summary", border_style="blue"))

    if not patterns:
        console.print("[dim]No patterns available[/dim]")
        return

    table = Table(title="Patterns", show_header=True, header_style="bold magenta")
    table.add_column("Pattern", style="cyan", no_wrap=True)
    table.add_column("Origin - Destination", style="green")
    table.add_column("Route", style="yellow")
    if verbose:
        table.add_column("Shape", style="dim blue")

    for pattern in patterns:
        origin, destination = pattern.endpoints
        row_data = [
            pattern.id,
            f"{origin} - {destination}",
            pattern.route_long_name or "-",
        ]
        if verbose:
            row_data.append(pattern.shape_id)
        table.add_row(*row_data)

    console.print(table)


def format_line_json(line: LineDetails, patterns: list[Pattern]) -> str:
    """Format a line and its patterns as JSON."""
    line_data = line.model_dump()
    line_data["patterns"] = [
        {
            **pattern.model_dump(),
            "origin": pattern.endpoints.origin,
            "destination": pattern.endpoints.destination,
        }
        for pattern in patterns
    ]
    return json.dumps(line_data, ensure_ascii=False, indent=2)
