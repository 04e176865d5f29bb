"""Camera state and the screen <-> geographic transforms of the map surface."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QPointF
from PySide6.QtGui import QTransform

from tapmap import config
from tapmap.models import Coordinate, GeoBounds, GeoRegion

from .geometry import lonlat_to_world, world_to_lonlat


@dataclass(frozen=True)
class ViewState:
    """Describe the camera parameters used for the current paint pass."""

    center_x: float
    center_y: float
    zoom: float
    rotation: float
    width: int
    height: int


class MapViewport:
    """Track pan, zoom and rotation of a Web Mercator map surface.

    The camera centre is stored in normalised world units where ``(0, 0)`` is
    the north-west corner of the projected world and ``(1, 1)`` the
    south-east corner.  ``rotation`` is the clockwise heading of the map on
    screen in degrees.
    """

    def __init__(
        self,
        width: int = 640,
        height: int = 480,
        *,
        tile_size: int = config.TILE_SIZE,
        min_zoom: float = config.MIN_ZOOM,
        max_zoom: float = config.MAX_ZOOM,
    ) -> None:
        self._width = max(1, int(width))
        self._height = max(1, int(height))
        self._tile_size = tile_size
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        self._center_x = 0.5
        self._center_y = 0.5
        self._zoom = config.DEFAULT_ZOOM
        self._rotation = 0.0

    # ------------------------------------------------------------------
    @property
    def zoom(self) -> float:
        return self._zoom

    # ------------------------------------------------------------------
    @property
    def rotation(self) -> float:
        return self._rotation

    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    # ------------------------------------------------------------------
    @property
    def height(self) -> int:
        return self._height

    # ------------------------------------------------------------------
    def view_state(self) -> ViewState:
        """Return an immutable snapshot of the camera."""

        return ViewState(
            center_x=self._center_x,
            center_y=self._center_y,
            zoom=self._zoom,
            rotation=self._rotation,
            width=self._width,
            height=self._height,
        )

    # ------------------------------------------------------------------
    def world_size(self) -> float:
        """Compute the virtual map size in pixels at the current zoom level."""

        return float(self._tile_size * (2 ** self._zoom))

    # ------------------------------------------------------------------
    def resize(self, width: int, height: int) -> None:
        self._width = max(1, int(width))
        self._height = max(1, int(height))
        self._wrap_center()

    # ------------------------------------------------------------------
    def set_zoom(self, zoom: float) -> None:
        """Clamp ``zoom`` to the supported range."""

        self._zoom = self._clamp_zoom(zoom)
        self._wrap_center()

    # ------------------------------------------------------------------
    def set_rotation(self, degrees: float) -> None:
        self._rotation = float(degrees) % 360.0

    # ------------------------------------------------------------------
    def rotate_by(self, degrees: float) -> None:
        self.set_rotation(self._rotation + degrees)

    # ------------------------------------------------------------------
    def center_on(self, coordinate: Coordinate) -> bool:
        """Move the camera so *coordinate* becomes the viewport centre."""

        world = lonlat_to_world(coordinate.longitude, coordinate.latitude)
        if world is None:
            return False
        self._center_x, self._center_y = world
        self._wrap_center()
        return True

    # ------------------------------------------------------------------
    def pan_by(self, delta: QPointF) -> None:
        """Translate a screen-space drag into a camera move."""

        world_size = self.world_size()
        dx, dy = self._unrotate(delta.x(), delta.y())
        self._center_x -= dx / world_size
        self._center_y -= dy / world_size
        self._wrap_center()

    # ------------------------------------------------------------------
    def zoom_around(self, new_zoom: float, anchor: QPointF) -> None:
        """Zoom while keeping the world position under ``anchor`` fixed."""

        anchor_world = self.screen_to_world(anchor)
        self._zoom = self._clamp_zoom(new_zoom)
        dx, dy = self._unrotate(anchor.x() - self._width / 2.0, anchor.y() - self._height / 2.0)
        world_size = self.world_size()
        self._center_x = anchor_world[0] - dx / world_size
        self._center_y = anchor_world[1] - dy / world_size
        self._wrap_center()

    # ------------------------------------------------------------------
    def set_region(self, region: GeoRegion) -> None:
        """Show ``region`` verbatim: centred on its centre, spanning its deltas."""

        self.fit_bounds(region.bounds(), padding=0.0)
        self.center_on(region.center)

    # ------------------------------------------------------------------
    def fit_bounds(self, bounds: GeoBounds, padding: float = config.FIT_PADDING_PX) -> bool:
        """Centre and zoom the camera so ``bounds`` is visible.

        ``padding`` pixels are kept free on all four sides.  Returns ``False``
        when the bounds cannot be projected.
        """

        north_west = lonlat_to_world(bounds.min_longitude, bounds.max_latitude)
        south_east = lonlat_to_world(bounds.max_longitude, bounds.min_latitude)
        if north_west is None or south_east is None:
            return False

        span_x = abs(south_east[0] - north_west[0])
        span_y = abs(south_east[1] - north_west[1])

        # The box is axis aligned in world space; under rotation its on-screen
        # footprint is the bounding box of the rotated rectangle.
        theta = math.radians(self._rotation)
        cos_t = abs(math.cos(theta))
        sin_t = abs(math.sin(theta))
        screen_span_x = span_x * cos_t + span_y * sin_t
        screen_span_y = span_x * sin_t + span_y * cos_t

        available_w = max(1.0, self._width - 2.0 * padding)
        available_h = max(1.0, self._height - 2.0 * padding)

        candidates = []
        if screen_span_x > 0.0:
            candidates.append(available_w / (screen_span_x * self._tile_size))
        if screen_span_y > 0.0:
            candidates.append(available_h / (screen_span_y * self._tile_size))
        if candidates:
            self._zoom = self._clamp_zoom(math.log2(min(candidates)))
        else:
            self._zoom = self._max_zoom

        self._center_x = (north_west[0] + south_east[0]) / 2.0
        self._center_y = (north_west[1] + south_east[1]) / 2.0
        self._wrap_center()
        return True

    # ------------------------------------------------------------------
    def screen_to_world(self, point: QPointF) -> tuple[float, float]:
        """Map a widget position to normalised world units (not wrapped)."""

        world_size = self.world_size()
        dx, dy = self._unrotate(point.x() - self._width / 2.0, point.y() - self._height / 2.0)
        return self._center_x + dx / world_size, self._center_y + dy / world_size

    # ------------------------------------------------------------------
    def world_to_screen(self, world_x: float, world_y: float) -> QPointF:
        """Map normalised world units to a widget position.

        The horizontal position is wrapped to the world copy closest to the
        camera so shapes near the antimeridian stay on screen.
        """

        delta_x = world_x - self._center_x
        if delta_x > 0.5:
            delta_x -= 1.0
        elif delta_x < -0.5:
            delta_x += 1.0
        delta_y = world_y - self._center_y

        world_size = self.world_size()
        rx, ry = self._rotate(delta_x * world_size, delta_y * world_size)
        return QPointF(rx + self._width / 2.0, ry + self._height / 2.0)

    # ------------------------------------------------------------------
    def screen_to_geographic(self, point: QPointF) -> Optional[Coordinate]:
        """Return the coordinate under ``point`` or ``None`` off the world.

        When the world is narrower than the widget only the copy centred on
        the camera carries overlays; points on the repeated copies yield
        ``None``.
        """

        world_x, world_y = self.screen_to_world(point)
        if abs(world_x - self._center_x) > 0.5:
            return None
        lonlat = world_to_lonlat(world_x, world_y)
        if lonlat is None:
            return None
        lon, lat = lonlat
        return Coordinate(latitude=lat, longitude=lon)

    # ------------------------------------------------------------------
    def geographic_to_screen(self, coordinate: Coordinate) -> Optional[QPointF]:
        """Return widget-relative coordinates for ``coordinate``."""

        world = lonlat_to_world(coordinate.longitude, coordinate.latitude)
        if world is None:
            return None
        return self.world_to_screen(*world)

    # ------------------------------------------------------------------
    def local_to_screen_transform(
        self,
        origin_x: float,
        origin_y: float,
        local_scale: float,
    ) -> QTransform:
        """Build the transform from a renderer's local space to the widget.

        A renderer's local space measures world units from ``(origin_x,
        origin_y)`` multiplied by ``local_scale``.
        """

        delta_x = origin_x - self._center_x
        if delta_x > 0.5:
            delta_x -= 1.0
        elif delta_x < -0.5:
            delta_x += 1.0
        delta_y = origin_y - self._center_y

        factor = self.world_size() / local_scale
        transform = QTransform()
        transform.translate(self._width / 2.0, self._height / 2.0)
        transform.rotate(self._rotation)
        transform.scale(factor, factor)
        transform.translate(delta_x * local_scale, delta_y * local_scale)
        return transform

    # ------------------------------------------------------------------
    def _clamp_zoom(self, zoom: float) -> float:
        return max(self._min_zoom, min(self._max_zoom, float(zoom)))

    # ------------------------------------------------------------------
    def _rotate(self, x: float, y: float) -> tuple[float, float]:
        if not self._rotation:
            return x, y
        theta = math.radians(self._rotation)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return x * cos_t - y * sin_t, x * sin_t + y * cos_t

    # ------------------------------------------------------------------
    def _unrotate(self, x: float, y: float) -> tuple[float, float]:
        if not self._rotation:
            return x, y
        theta = math.radians(-self._rotation)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return x * cos_t - y * sin_t, x * sin_t + y * cos_t

    # ------------------------------------------------------------------
    def _wrap_center(self) -> None:
        """Keep the camera on the projected world."""

        self._center_x %= 1.0
        self._center_y = min(max(self._center_y, 0.0), 1.0)


__all__ = ["MapViewport", "ViewState"]
