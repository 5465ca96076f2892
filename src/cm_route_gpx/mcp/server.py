"""MCP Server for Carris Metropolitana route export.

This module implements a Model Context Protocol (MCP) server that exposes
line lookup and GPX trajectory export as tools.
"""

import asyncio
import json
import logging
from typing import Any

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import (
    TextContent,
    Tool,
)

from .. import __version__
from ..core.exceptions import (
    CarrisRouteError,
    NotFoundError,
    PatternLoadError,
    ValidationError,
)
from ..core.resolver import RouteResolver
from ..core.selection import RouteSession

logger = logging.getLogger(__name__)


class RouteMCPServer:
    """MCP Server for Carris Metropolitana line lookup and GPX export."""

    def __init__(self) -> None:
        """Initialize the Route MCP Server."""
        self.server = Server("cm-route-gpx")
        self.resolver = RouteResolver()

        # Register handlers
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List available tools."""
            return [
                Tool(
                    name="get_line",
                    description="Look up a Carris Metropolitana line and list its patterns (directions)",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "line_id": {
                                "type": "string",
                                "description": "Public line number (e.g. '3001')",
                            },
                        },
                        "required": ["line_id"],
                    },
                ),
                Tool(
                    name="export_gpx",
                    description="Export the trajectory of a line pattern as a GPX 1.1 document",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "line_id": {
                                "type": "string",
                                "description": "Public line number (e.g. '3001')",
                            },
                            "pattern_id": {
                                "type": "string",
                                "description": "Pattern identifier as returned by get_line",
                            },
                        },
                        "required": ["line_id", "pattern_id"],
                    },
                ),
            ]

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: dict[str, Any]
        ) -> list[TextContent]:
            """Handle tool calls."""
            try:
                if name == "get_line":
                    return await self._get_line(arguments)
                elif name == "export_gpx":
                    return await self._export_gpx(arguments)
                else:
                    return [TextContent(type="text", text=f"Unknown tool: {name}")]

            except Exception as e:
                logger.error(f"Error in tool {name}: {e}")
                return [TextContent(type="text", text=f"Error: {str(e)}")]

    async def _get_line(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Look up a line with its enriched patterns."""
        line_id = arguments.get("line_id", "")
        session = RouteSession(self.resolver)

        try:
            line = await session.search(line_id)
        except ValidationError as e:
            return [TextContent(type="text", text=f"Validation error: {str(e)}")]
        except NotFoundError as e:
            return [TextContent(type="text", text=f"Line not found: {str(e)}")]
        except PatternLoadError as e:
            return [TextContent(type="text", text=f"Failed to load patterns: {str(e)}")]

        patterns = session.patterns

        result_text = f"**Line {line.short_name}**"
        if line.long_name:
            result_text += f": {line.long_name}"
        result_text += "\n"
        if line.municipalities:
            result_text += f"Municipalities: {', '.join(line.municipalities)}\n"
        result_text += f"\n**Patterns ({len(patterns)}):**\n\n"

        for idx, pattern in enumerate(patterns, 1):
            origin, destination = pattern.endpoints
            result_text += f"{idx}. **{origin} → {destination}** (ID: {pattern.id})\n"
            if pattern.route_long_name:
                result_text += f"   • Route: {pattern.route_long_name}\n"

        patterns_data = [pattern.model_dump(mode="json") for pattern in patterns]

        return [
            TextContent(type="text", text=result_text),
            TextContent(
                type="text",
                text=f"JSON Data:\n```json\n{json.dumps(patterns_data, ensure_ascii=False, indent=2)}\n```",
            ),
        ]

    async def _export_gpx(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Export one pattern of a line as GPX text."""
        line_id = arguments.get("line_id", "")
        pattern_id = arguments.get("pattern_id", "")
        session = RouteSession(self.resolver)

        try:
            await session.search(line_id)
            await session.select(pattern_id)
            trajectory = session.export()
        except CarrisRouteError as e:
            return [TextContent(type="text", text=f"Export failed: {str(e)}")]

        return [
            TextContent(type="text", text=f"**{trajectory.filename}**"),
            TextContent(type="text", text=trajectory.content),
        ]


async def main() -> None:
    """Main entry point for the MCP server."""
    # Configure logging
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting Carris Metropolitana Route MCP Server")

    # Create the server
    server_instance = RouteMCPServer()

    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("MCP Server running with stdio transport")
            await server_instance.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name="cm-route-gpx",
                    server_version=__version__,
                    capabilities=server_instance.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
    finally:
        await server_instance.resolver.close()


def main_sync() -> None:
    """Synchronous wrapper for the async main function - used as entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
