"""Export a pattern shape to a GPX 1.1 XML string.

Uses only xml.etree.ElementTree (stdlib).
GPX uses lat/lon attributes on elements; shapes come as GeoJSON, where
coordinates are [lng, lat] or [lng, lat, alt]. Values keep their received
digits in plain decimal notation, lon first to mirror the GeoJSON order.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from ..core.config import settings
from ..core.exceptions import InvalidGeometryError, ValidationError
from ..core.models import LineDetails, Pattern, Shape, TrajectoryFile, split_headsign

logger = logging.getLogger(__name__)

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def to_gpx(
    shape: Shape | Mapping[str, Any] | None,
    origin: str,
    destination: str,
    track_name: str,
    creator: str | None = None,
) -> str:
    """Convert a shape to a GPX document with start and end waypoints.

    A Feature or bare geometry must be a LineString. In a FeatureCollection
    every LineString feature becomes a track and other features are skipped;
    a collection without any line yields a document with no waypoints and no
    tracks.

    Args:
        shape: Shape model or its GeoJSON payload
        origin: Name of the waypoint at the first coordinate
        destination: Name of the waypoint at the last coordinate
        track_name: Track name used when a feature has no ``name`` property
        creator: Value of the ``creator`` attribute

    Returns:
        GPX XML string.

    Raises:
        InvalidGeometryError: If the geometry is absent, empty or not a line
    """
    geojson = shape.geojson if isinstance(shape, Shape) else shape
    lines = _extract_lines(geojson)

    gpx = ET.Element("gpx")
    gpx.set("version", "1.1")
    gpx.set("creator", creator or settings.gpx_creator)
    gpx.set("xmlns", GPX_NAMESPACE)

    if lines:
        _write_waypoint(gpx, lines[0][1][0], origin)
        _write_waypoint(gpx, lines[-1][1][-1], destination)
    else:
        logger.warning("Shape has no LineString features, exporting an empty track")

    for name, coordinates in lines:
        _write_track(gpx, name or track_name, coordinates)

    ET.indent(gpx, space="  ")
    return XML_DECLARATION + ET.tostring(gpx, encoding="unicode") + "\n"


def export_filename(line_short_name: str, headsign: str) -> str:
    """Suggested file name, e.g. ``rota-3001-Cacilhas-Lisboa.gpx``."""
    slug = re.sub(r"\s+", "-", headsign)
    return f"rota-{line_short_name}-{slug}.gpx"


def build_trajectory_file(
    line: LineDetails, pattern: Pattern, shape: Shape, creator: str | None = None
) -> TrajectoryFile:
    """Build the GPX export for a selected pattern.

    Raises:
        ValidationError: If the shape does not belong to the pattern
        InvalidGeometryError: If the shape has no usable coordinates
    """
    if shape.shape_id != pattern.shape_id:
        raise ValidationError(
            f"Shape '{shape.shape_id}' does not belong to pattern '{pattern.id}'"
        )

    origin, destination = split_headsign(pattern.headsign)
    content = to_gpx(
        shape,
        origin=origin,
        destination=destination,
        track_name=pattern.headsign or pattern.id,
        creator=creator,
    )
    return TrajectoryFile(
        filename=export_filename(line.short_name, pattern.headsign), content=content
    )


def _extract_lines(
    geojson: Mapping[str, Any] | None,
) -> list[tuple[str | None, list[Sequence[Any]]]]:
    """Collect (name, coordinates) for each line in the GeoJSON payload."""
    if not isinstance(geojson, Mapping):
        raise InvalidGeometryError("Shape has no GeoJSON geometry")

    geojson_type = geojson.get("type")

    if geojson_type == "FeatureCollection":
        features = geojson.get("features")
        if not isinstance(features, list) or not features:
            raise InvalidGeometryError("FeatureCollection has no features")
        lines = []
        for feature in features:
            geometry = feature.get("geometry") if isinstance(feature, Mapping) else None
            if not isinstance(geometry, Mapping) or geometry.get("type") != "LineString":
                continue
            lines.append((_feature_name(feature), _line_coordinates(geometry)))
        return lines

    if geojson_type == "Feature":
        geometry = geojson.get("geometry")
        if not isinstance(geometry, Mapping):
            raise InvalidGeometryError("Feature has no geometry")
        if geometry.get("type") != "LineString":
            raise InvalidGeometryError(
                f"Unsupported geometry type: {geometry.get('type')}"
            )
        return [(_feature_name(geojson), _line_coordinates(geometry))]

    if geojson_type == "LineString":
        return [(None, _line_coordinates(geojson))]

    raise InvalidGeometryError(f"Unsupported geometry type: {geojson_type}")


def _feature_name(feature: Mapping[str, Any]) -> str | None:
    properties = feature.get("properties") or {}
    name = properties.get("name") if isinstance(properties, Mapping) else None
    return str(name) if name else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _line_coordinates(geometry: Mapping[str, Any]) -> list[Sequence[Any]]:
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list) or not coordinates:
        raise InvalidGeometryError("LineString has no coordinates")

    for coord in coordinates:
        if (
            not isinstance(coord, (list, tuple))
            or len(coord) < 2
            or not all(_is_number(value) for value in coord)
        ):
            raise InvalidGeometryError(f"Invalid coordinate: {coord!r}")
    return coordinates


def _format_value(value: Any) -> str:
    """Plain decimal text of a coordinate value, never in exponent notation."""
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value)


def _write_waypoint(parent: ET.Element, coord: Sequence[Any], name: str) -> None:
    """Write a named <wpt> element at a coordinate."""
    wpt = ET.SubElement(parent, "wpt")
    wpt.set("lon", _format_value(coord[0]))  # lng is index 0
    wpt.set("lat", _format_value(coord[1]))  # lat is index 1

    name_elem = ET.SubElement(wpt, "name")
    name_elem.text = name


def _write_track(
    parent: ET.Element, name: str, coordinates: list[Sequence[Any]]
) -> None:
    """Write a <trk> element with one <trkseg>."""
    trk = ET.SubElement(parent, "trk")

    name_elem = ET.SubElement(trk, "name")
    name_elem.text = name

    trkseg = ET.SubElement(trk, "trkseg")

    for coord in coordinates:
        trkpt = ET.SubElement(trkseg, "trkpt")
        trkpt.set("lon", _format_value(coord[0]))
        trkpt.set("lat", _format_value(coord[1]))

        if len(coord) >= 3:
            ele = ET.SubElement(trkpt, "ele")
            ele.text = _format_value(coord[2])
