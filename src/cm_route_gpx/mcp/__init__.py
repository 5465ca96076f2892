"""MCP (Model Context Protocol) server module for Carris Metropolitana route export.

This module provides an MCP server implementation that exposes line lookup
and GPX export functionality through the Model Context Protocol.
"""

from .server import RouteMCPServer, main

__all__ = ["RouteMCPServer", "main"]
