"""Core line lookup functionality."""

from .exceptions import (
    CarrisRouteError,
    InvalidGeometryError,
    InvalidResponseError,
    NetworkError,
    NotFoundError,
    PatternLoadError,
    ValidationError,
)
from .models import (
    HeadsignEndpoints,
    LineDetails,
    Pattern,
    RouteRecord,
    Shape,
    TrajectoryFile,
    split_headsign,
)
from .resolver import RouteResolver
from .selection import RouteSession, SelectionState

__all__ = [
    "HeadsignEndpoints",
    "LineDetails",
    "Pattern",
    "RouteRecord",
    "RouteResolver",
    "RouteSession",
    "SelectionState",
    "Shape",
    "TrajectoryFile",
    "split_headsign",
    "CarrisRouteError",
    "ValidationError",
    "NotFoundError",
    "PatternLoadError",
    "InvalidGeometryError",
    "InvalidResponseError",
    "NetworkError",
]
