"""Immutable value types shared by the parser, the hit tester and the widget."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable, Optional, Tuple

from PySide6.QtGui import QColor

from . import config


@dataclass(frozen=True)
class Coordinate:
    """A ``(latitude, longitude)`` pair in decimal degrees."""

    latitude: float
    longitude: float


Ring = Tuple[Coordinate, ...]
"""Ordered, implicitly closed loop of coordinates."""

GroupKey = Hashable
"""Opaque identity of a :class:`PolygonGroup` (int, str, UUID, ...)."""


@dataclass(frozen=True)
class GeoBounds:
    """Axis aligned latitude/longitude box."""

    min_latitude: float
    min_longitude: float
    max_latitude: float
    max_longitude: float

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[Coordinate]) -> Optional["GeoBounds"]:
        """Return the box enclosing *coordinates* or ``None`` when empty."""

        latitudes: list[float] = []
        longitudes: list[float] = []
        for coordinate in coordinates:
            latitudes.append(coordinate.latitude)
            longitudes.append(coordinate.longitude)
        if not latitudes:
            return None
        return cls(min(latitudes), min(longitudes), max(latitudes), max(longitudes))

    def union(self, other: Optional["GeoBounds"]) -> "GeoBounds":
        if other is None:
            return self
        return GeoBounds(
            min(self.min_latitude, other.min_latitude),
            min(self.min_longitude, other.min_longitude),
            max(self.max_latitude, other.max_latitude),
            max(self.max_longitude, other.max_longitude),
        )

    def contains(self, coordinate: Coordinate) -> bool:
        return (
            self.min_latitude <= coordinate.latitude <= self.max_latitude
            and self.min_longitude <= coordinate.longitude <= self.max_longitude
        )


@dataclass(frozen=True)
class GeoRegion:
    """Explicit viewport described by a centre and the visible span in degrees."""

    center: Coordinate
    latitude_delta: float
    longitude_delta: float

    def bounds(self) -> GeoBounds:
        half_lat = self.latitude_delta / 2.0
        half_lon = self.longitude_delta / 2.0
        return GeoBounds(
            self.center.latitude - half_lat,
            self.center.longitude - half_lon,
            self.center.latitude + half_lat,
            self.center.longitude + half_lon,
        )


@dataclass(frozen=True)
class PolygonWithHoles:
    """One exterior ring plus zero or more interior rings subtracted from it.

    Holes are not checked against the exterior; whatever geometry is supplied
    is rendered and hit-tested as given.
    """

    exterior: Ring
    interiors: Tuple[Ring, ...] = ()

    @property
    def is_degenerate(self) -> bool:
        """``True`` when the exterior ring cannot enclose any area."""

        return len(self.exterior) < 3

    def bounds(self) -> Optional[GeoBounds]:
        return GeoBounds.from_coordinates(self.exterior)


def _default_fill() -> QColor:
    return QColor(*config.DEFAULT_FILL_RGBA)


def _default_stroke() -> QColor:
    return QColor(*config.DEFAULT_STROKE_RGBA)


@dataclass(frozen=True)
class PolygonStyle:
    """Visual style shared by every shape of a group."""

    fill_color: QColor = field(default_factory=_default_fill, hash=False)
    stroke_color: QColor = field(default_factory=_default_stroke, hash=False)
    line_width: float = config.DEFAULT_LINE_WIDTH


@dataclass(frozen=True)
class ParsedFeature:
    """Feature extracted from a GeoJSON FeatureCollection."""

    id: int
    name: str
    shapes: Tuple[PolygonWithHoles, ...]


@dataclass(frozen=True)
class PolygonGroup:
    """Named collection of shapes that is rendered and tapped as one unit."""

    id: GroupKey
    shapes: Tuple[PolygonWithHoles, ...]
    style: PolygonStyle = field(default_factory=PolygonStyle, hash=False)
    title: Optional[str] = None

    def __post_init__(self) -> None:
        # Callers frequently pass lists straight from the parser.
        if not isinstance(self.shapes, tuple):
            object.__setattr__(self, "shapes", tuple(self.shapes))

    @classmethod
    def from_feature(
        cls,
        feature: ParsedFeature,
        style: Optional[PolygonStyle] = None,
    ) -> "PolygonGroup":
        """Build a group keyed by the feature id and titled with its name."""

        return cls(
            id=feature.id,
            shapes=feature.shapes,
            style=style if style is not None else PolygonStyle(),
            title=feature.name,
        )

    def bounds(self) -> Optional[GeoBounds]:
        result: Optional[GeoBounds] = None
        for shape in self.shapes:
            shape_bounds = shape.bounds()
            if shape_bounds is None:
                continue
            result = shape_bounds if result is None else result.union(shape_bounds)
        return result


@dataclass(frozen=True)
class Annotation:
    """Simple map pin with an optional title and point-of-interest category."""

    id: GroupKey
    coordinate: Coordinate
    title: Optional[str] = None
    category: Optional[str] = None


__all__ = [
    "Annotation",
    "Coordinate",
    "GeoBounds",
    "GeoRegion",
    "GroupKey",
    "ParsedFeature",
    "PolygonGroup",
    "PolygonStyle",
    "PolygonWithHoles",
    "Ring",
]
