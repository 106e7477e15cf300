"""Bounding envelopes of GeoJSON documents.

Every position of every geometry in a document contributes its first two
ordinates (longitude, latitude); any altitude is ignored. The envelope is the
axis-aligned rectangle spanning the minimum and maximum of each.
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Dict, Iterator, Mapping, NamedTuple, Optional

import numpy as np

# Nesting depth of the position arrays for each geometry type.
_COORDINATE_DEPTH = {
    "Point": 0,
    "MultiPoint": 1,
    "LineString": 1,
    "MultiLineString": 2,
    "Polygon": 2,
    "MultiPolygon": 3,
}


class Bounds(NamedTuple):
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def ring(self) -> list[list[float]]:
        west, south, east, north = self
        return [
            [west, south],
            [east, south],
            [east, north],
            [west, north],
            [west, south],
        ]


def _walk_positions(coords: Any, depth: int) -> Iterator[Any]:
    if coords is None:
        return
    if depth == 0:
        yield coords
        return
    if not isinstance(coords, (list, tuple)):
        raise ValueError(f"Expected a coordinate array, got {type(coords).__name__}")
    for item in coords:
        yield from _walk_positions(item, depth - 1)


def iter_positions(obj: Any) -> Iterator[Any]:
    """Yield every raw position in a GeoJSON object, in document order."""
    if obj is None:
        return
    if not isinstance(obj, Mapping):
        raise ValueError(f"GeoJSON object must be a mapping, got {type(obj).__name__}")
    kind = obj.get("type")
    if kind == "FeatureCollection":
        for feature in obj.get("features") or []:
            yield from iter_positions(feature)
    elif kind == "Feature":
        yield from iter_positions(obj.get("geometry"))
    elif kind == "GeometryCollection":
        for geometry in obj.get("geometries") or []:
            yield from iter_positions(geometry)
    elif kind in _COORDINATE_DEPTH:
        yield from _walk_positions(obj.get("coordinates"), _COORDINATE_DEPTH[kind])
    else:
        raise ValueError(f"Unsupported GeoJSON type: {kind!r}")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def compute_bounds(document: Any) -> Bounds:
    """Return the envelope of every coordinate in ``document``.

    Raises ValueError when the document has no coordinates or a position is
    not a pair of finite numbers.
    """
    lonlat: list[tuple[float, float]] = []
    for position in iter_positions(document):
        if (
            not isinstance(position, (list, tuple))
            or len(position) < 2
            or not _is_number(position[0])
            or not _is_number(position[1])
        ):
            raise ValueError(f"Invalid position: {position!r}")
        lonlat.append((position[0], position[1]))
    if not lonlat:
        raise ValueError("Document contains no coordinates")
    points = np.asarray(lonlat, dtype=np.float64)
    if not np.isfinite(points).all():
        raise ValueError("Document contains non-finite coordinates")
    mins = points.min(axis=0)
    maxs = points.max(axis=0)
    return Bounds(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def envelope_feature(
    bounds: Bounds, properties: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Polygon feature covering ``bounds``."""
    return {
        "type": "Feature",
        "properties": dict(properties or {}),
        "geometry": {"type": "Polygon", "coordinates": [bounds.ring()]},
    }


__all__ = ["Bounds", "compute_bounds", "envelope_feature", "iter_positions"]
