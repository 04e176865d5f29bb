"""Utility helpers for validating and projecting geographic geometry data."""

from __future__ import annotations

import math
from typing import Optional

from tapmap.config import MERCATOR_LAT_BOUND


def is_number(value: object) -> bool:
    """Return ``True`` for finite ints and floats.

    ``bool`` is a subclass of ``int`` but never a valid coordinate component.
    """

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_number_pair(value: object) -> bool:
    """Return ``True`` when ``value`` looks like an ``(x, y)`` position.

    GeoJSON positions may carry an altitude as a third member; only the first
    two components are inspected.
    """

    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return False
    return all(is_number(component) for component in value[:2])


def is_ring(value: object) -> bool:
    """Return ``True`` when ``value`` is a sequence of positions."""

    return isinstance(value, (list, tuple)) and all(is_number_pair(point) for point in value)


def is_polygon_rings(value: object) -> bool:
    """Return ``True`` when ``value`` is a non-empty sequence of rings."""

    return isinstance(value, (list, tuple)) and bool(value) and all(is_ring(ring) for ring in value)


def lonlat_to_world(lon: float, lat: float) -> Optional[tuple[float, float]]:
    """Project longitude/latitude into the normalised Web Mercator square.

    The result lies in ``[0, 1]`` on both axes with ``y`` growing southwards.
    Latitudes beyond the Mercator bound are clamped.
    """

    try:
        lon = float(lon)
        lat = max(min(float(lat), MERCATOR_LAT_BOUND), -MERCATOR_LAT_BOUND)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None

    x = (lon + 180.0) / 360.0
    sin_lat = math.sin(math.radians(lat))
    y = 0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)
    return x, y


def world_to_lonlat(x: float, y: float) -> Optional[tuple[float, float]]:
    """Invert :func:`lonlat_to_world`.

    ``x`` may lie outside ``[0, 1]`` when the viewport shows a wrapped copy of
    the world; the longitude is folded back into ``[-180, 180)``.  ``y`` outside
    ``[0, 1]`` has no geographic meaning and yields ``None``.
    """

    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    if y < 0.0 or y > 1.0:
        return None

    lon = (x % 1.0) * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * y))))
    return lon, lat


__all__ = [
    "is_number",
    "is_number_pair",
    "is_polygon_rings",
    "is_ring",
    "lonlat_to_world",
    "world_to_lonlat",
]
