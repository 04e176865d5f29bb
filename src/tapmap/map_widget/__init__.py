"""Public package interface for the map widget components."""

from .map_widget import TappableMapWidget
from .overlays import OverlaySet, ShapeKey
from .shape_renderer import ShapeRenderer
from .viewport import MapViewport

__all__ = ["MapViewport", "OverlaySet", "ShapeKey", "ShapeRenderer", "TappableMapWidget"]
