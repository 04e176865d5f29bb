"""Convert GeoJSON geometry into the polygon model consumed by the map widget.

Real-world GeoJSON is of uneven quality, so the parser never raises for
malformed input.  Each nesting level is validated before it is converted; a
mismatch anywhere yields an empty result for that geometry and sibling
features in a collection are unaffected.  Logging is left to callers, with the
exception of :func:`load_feature_collection` which reports how many features
were dropped from a file.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .errors import GeoJSONLoadError
from .map_widget.geometry import is_polygon_rings
from .models import Coordinate, ParsedFeature, PolygonWithHoles, Ring

_LOGGER = logging.getLogger(__name__)


def parse_geometry(geometry: object) -> list[PolygonWithHoles]:
    """Parse a GeoJSON geometry object into polygons with holes.

    ``Polygon`` yields one shape, ``MultiPolygon`` yields one shape per
    polygon block in input order.  Positions are ``[longitude, latitude]`` and
    are swapped into :class:`~tapmap.models.Coordinate` values.  Unsupported
    types and payloads that do not match the expected nesting return ``[]``.
    """

    if not isinstance(geometry, Mapping):
        return []

    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    if coordinates is None:
        return []

    if geom_type == "Polygon":
        if not is_polygon_rings(coordinates):
            return []
        return [_polygon_from_rings(coordinates)]

    if geom_type == "MultiPolygon":
        if not isinstance(coordinates, (list, tuple)):
            return []
        if not all(is_polygon_rings(block) for block in coordinates):
            return []
        return [_polygon_from_rings(block) for block in coordinates]

    return []


def parse_feature_collection(raw: bytes | str) -> list[ParsedFeature]:
    """Parse a GeoJSON ``FeatureCollection`` document.

    Each feature must provide an integer ``properties.id``, a string
    ``properties.name`` and a ``geometry`` object that yields at least one
    shape.  Features that do not qualify are dropped while the relative order
    of the remaining ones is preserved.
    """

    return _parse_features(_raw_features(raw))


def load_feature_collection(path: Path | str) -> list[ParsedFeature]:
    """Read ``path`` from disk and parse it as a FeatureCollection.

    Raises :class:`~tapmap.errors.GeoJSONLoadError` when the file cannot be
    read.  Content problems are handled like :func:`parse_feature_collection`.
    """

    source = Path(path)
    try:
        raw = source.read_bytes()
    except OSError as exc:
        raise GeoJSONLoadError(f"Unable to read GeoJSON file '{source}'") from exc

    raw_features = _raw_features(raw)
    features = _parse_features(raw_features)
    if len(raw_features) > len(features):
        _LOGGER.debug(
            "Dropped %d of %d features from %s",
            len(raw_features) - len(features),
            len(raw_features),
            source,
        )
    return features


def _parse_feature(feature: object) -> ParsedFeature | None:
    if not isinstance(feature, Mapping):
        return None

    properties = feature.get("properties")
    if not isinstance(properties, Mapping):
        return None

    feature_id = properties.get("id")
    name = properties.get("name")
    geometry = feature.get("geometry")
    if isinstance(feature_id, bool) or not isinstance(feature_id, int):
        return None
    if not isinstance(name, str) or not isinstance(geometry, Mapping):
        return None

    shapes = parse_geometry(geometry)
    if not shapes:
        return None
    return ParsedFeature(id=feature_id, name=name, shapes=tuple(shapes))


def _raw_features(raw: bytes | str) -> list[Any]:
    try:
        document = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        return []

    if not isinstance(document, Mapping):
        return []
    features = document.get("features")
    if not isinstance(features, list):
        return []
    return features


def _parse_features(features: list[Any]) -> list[ParsedFeature]:
    parsed: list[ParsedFeature] = []
    for feature in features:
        entry = _parse_feature(feature)
        if entry is not None:
            parsed.append(entry)
    return parsed


def _polygon_from_rings(rings: Sequence[Sequence[Sequence[float]]]) -> PolygonWithHoles:
    exterior = _ring_from_positions(rings[0])
    interiors = tuple(_ring_from_positions(ring) for ring in rings[1:])
    return PolygonWithHoles(exterior=exterior, interiors=interiors)


def _ring_from_positions(positions: Sequence[Sequence[float]]) -> Ring:
    return tuple(
        Coordinate(latitude=float(position[1]), longitude=float(position[0]))
        for position in positions
    )


__all__ = ["load_feature_collection", "parse_feature_collection", "parse_geometry"]
