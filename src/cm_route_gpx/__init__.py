"""Carris Metropolitana Route GPX Package

A Python package for looking up Carris Metropolitana lines and exporting
the trajectory of a line pattern as a GPX track, with CLI and MCP server
front ends.
"""

__version__ = "0.1.0"

from .core.models import LineDetails, Pattern, Shape, split_headsign
from .core.resolver import RouteResolver
from .export.gpx import to_gpx

__all__ = [
    "LineDetails",
    "Pattern",
    "RouteResolver",
    "Shape",
    "split_headsign",
    "to_gpx",
]
