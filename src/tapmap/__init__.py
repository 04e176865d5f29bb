"""Tappable polygon overlays for a PySide6 map surface."""

from .configuration import MapConfiguration, PointOfInterestFilter
from .geojson import load_feature_collection, parse_feature_collection, parse_geometry
from .hit_test import hit_test, hit_test_all
from .models import (
    Annotation,
    Coordinate,
    GeoBounds,
    GeoRegion,
    ParsedFeature,
    PolygonGroup,
    PolygonStyle,
    PolygonWithHoles,
)

__all__ = [
    "Annotation",
    "Coordinate",
    "GeoBounds",
    "GeoRegion",
    "MapConfiguration",
    "ParsedFeature",
    "PointOfInterestFilter",
    "PolygonGroup",
    "PolygonStyle",
    "PolygonWithHoles",
    "hit_test",
    "hit_test_all",
    "load_feature_collection",
    "parse_feature_collection",
    "parse_geometry",
]

__version__ = "0.1.0"
