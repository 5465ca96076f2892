"""Data models for Carris Metropolitana lines, patterns and shapes."""

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

HEADSIGN_DELIMITER = " - "


class HeadsignEndpoints(NamedTuple):
    """Origin and destination labels derived from a headsign."""

    origin: str
    destination: str


def split_headsign(headsign: str) -> HeadsignEndpoints:
    """Split a headsign like 'Cacilhas - Lisboa' into its endpoints.

    The origin is the first segment and the destination the last one, so a
    headsign without the delimiter yields the whole string for both.
    """
    parts = headsign.split(HEADSIGN_DELIMITER)
    return HeadsignEndpoints(origin=parts[0], destination=parts[-1])


class _ApiModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class LineDetails(_ApiModel):
    """Represents a transit line as returned by the lines endpoint."""

    id: str | None = Field(None, description="Line identifier")
    short_name: str = Field(..., description="Public line number (e.g. '3001')")
    long_name: str = Field("", description="Descriptive line name")
    color: str | None = Field(None, description="Line color as hex string")
    text_color: str | None = Field(None, description="Text color as hex string")
    municipalities: list[str] = Field(
        default_factory=list, description="Municipalities served by the line"
    )
    localities: list[str] = Field(
        default_factory=list, description="Localities served by the line"
    )
    patterns: list[str] = Field(
        default_factory=list, description="Ordered pattern identifiers"
    )
    routes: list[str] = Field(default_factory=list, description="Route identifiers")

    def __str__(self) -> str:
        if self.long_name:
            return f"{self.short_name} - {self.long_name}"
        return self.short_name


class RouteRecord(_ApiModel):
    """Represents the parent route of a pattern."""

    id: str = Field(..., description="Route identifier")
    short_name: str | None = Field(None, description="Route number")
    long_name: str = Field("", description="Descriptive route name")


class Pattern(_ApiModel):
    """Represents one direction or variant of a line."""

    id: str = Field(..., description="Pattern identifier")
    headsign: str = Field("", description="'Origin - Destination' label")
    long_name: str = Field("", description="Long name of the parent route")
    route_id: str = Field(..., description="Identifier of the owning route")
    shape_id: str = Field(..., description="Identifier of the pattern's shape")
    route_long_name: str = Field("", description="Long name of the parent route")

    def __str__(self) -> str:
        return self.headsign or self.id

    @property
    def endpoints(self) -> HeadsignEndpoints:
        """Origin and destination taken from the headsign."""
        return split_headsign(self.headsign)

    def with_route(self, route: RouteRecord) -> "Pattern":
        """Return a copy enriched with the parent route's long name."""
        return self.model_copy(
            update={"route_long_name": route.long_name, "long_name": route.long_name}
        )


class Shape(_ApiModel):
    """Represents the GeoJSON path traveled by a pattern."""

    shape_id: str = Field(..., description="Shape identifier")
    geojson: dict[str, Any] | None = Field(
        None, description="GeoJSON Feature, LineString or FeatureCollection"
    )


class TrajectoryFile(BaseModel):
    """A GPX document ready to be written to disk."""

    filename: str = Field(..., description="Suggested file name")
    content: str = Field(..., description="GPX XML text")
