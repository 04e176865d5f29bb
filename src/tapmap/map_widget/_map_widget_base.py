"""Controller shared by the map widget: overlays, camera, taps and painting."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Protocol, Sequence

from PySide6.QtCore import QObject, QPointF, Qt
from PySide6.QtGui import QColor, QFont, QPainter, QPen

from tapmap import config
from tapmap.configuration import MapConfiguration
from tapmap.hit_test import hit_test
from tapmap.models import Annotation, Coordinate, GroupKey, PolygonGroup

from .input_handler import InputHandler
from .overlays import OverlaySet
from .shape_renderer import ShapeRenderer
from .viewport import MapViewport

_LOGGER = logging.getLogger(__name__)


class SupportsMapViewport(Protocol):
    """Minimal interface the controller expects from the widget."""

    def update(self) -> None:  # pragma: no cover - interface definition only
        ...

    def width(self) -> int:  # pragma: no cover - interface definition only
        ...

    def height(self) -> int:  # pragma: no cover - interface definition only
        ...

    def setCursor(self, cursor) -> None:  # pragma: no cover - cursor type provided by Qt
        ...

    def unsetCursor(self) -> None:  # pragma: no cover - cursor type provided by Qt
        ...


class MapWidgetController:
    """Own the map state and translate input into hit tests and camera moves.

    Polygon groups and annotations are replaced wholesale on every update.
    The live user-location marker is stored separately so annotation updates
    never remove or re-add it.
    """

    def __init__(
        self,
        widget: SupportsMapViewport,
        *,
        configuration: MapConfiguration | None = None,
    ) -> None:
        self._widget = widget
        self._configuration = configuration or MapConfiguration()
        self._viewport = MapViewport(widget.width(), widget.height())
        self._overlays = OverlaySet()
        self._annotations: list[Annotation] = []
        self._user_location: Optional[Coordinate] = None
        self._tap_listeners: list[Callable[[PolygonGroup, QPointF], None]] = []
        self._view_listeners: list[Callable[[float, float, float], None]] = []
        # Set once the user moves the camera; resizes stop refitting from then on.
        self._camera_moved = False

        # Parenting the handler to the widget ties their lifetimes together.
        parent = widget if isinstance(widget, QObject) else None
        self._input_handler = InputHandler(
            min_zoom=config.MIN_ZOOM,
            max_zoom=config.MAX_ZOOM,
            parent=parent,
        )
        self._input_handler.pan_requested.connect(self._on_pan_requested)
        self._input_handler.zoom_requested.connect(self._on_zoom_requested)
        self._input_handler.rotate_requested.connect(self._on_rotate_requested)
        self._input_handler.tap_requested.connect(self.handle_tap)
        self._input_handler.cursor_changed.connect(self._widget.setCursor)
        self._input_handler.cursor_reset.connect(self._widget.unsetCursor)

        self._apply_interaction()
        self._apply_viewport()

    # ------------------------------------------------------------------
    @property
    def viewport(self) -> MapViewport:
        return self._viewport

    # ------------------------------------------------------------------
    @property
    def configuration(self) -> MapConfiguration:
        return self._configuration

    # ------------------------------------------------------------------
    @property
    def polygons(self) -> tuple[PolygonGroup, ...]:
        return self._overlays.groups

    # ------------------------------------------------------------------
    @property
    def annotations(self) -> tuple[Annotation, ...]:
        return tuple(self._annotations)

    # ------------------------------------------------------------------
    @property
    def user_location(self) -> Optional[Coordinate]:
        return self._user_location

    # ------------------------------------------------------------------
    @property
    def zoom(self) -> float:
        return self._viewport.zoom

    # ------------------------------------------------------------------
    def set_zoom(self, zoom: float) -> None:
        """Clamp ``zoom`` to the supported range and schedule a repaint."""

        if zoom == self._viewport.zoom:
            return
        self._camera_moved = True
        self._viewport.set_zoom(zoom)
        self._widget.update()
        self._notify_view_changed()

    # ------------------------------------------------------------------
    def center_on(self, coordinate: Coordinate) -> None:
        if self._viewport.center_on(coordinate):
            self._camera_moved = True
            self._widget.update()
            self._notify_view_changed()

    # ------------------------------------------------------------------
    def view_state(self) -> tuple[float, float, float]:
        """Return the current ``(center_x, center_y, zoom)`` tuple."""

        state = self._viewport.view_state()
        return state.center_x, state.center_y, state.zoom

    # ------------------------------------------------------------------
    def set_configuration(self, configuration: MapConfiguration) -> None:
        """Apply new display and interaction settings."""

        self._configuration = configuration
        self._apply_interaction()
        self._apply_viewport()
        self._widget.update()

    # ------------------------------------------------------------------
    def set_polygons(self, groups: Iterable[PolygonGroup]) -> None:
        """Replace every installed polygon group with ``groups``."""

        self._overlays.replace(groups)
        _LOGGER.debug("Installed %d polygon groups", len(self._overlays))
        self._apply_viewport()
        self._widget.update()

    # ------------------------------------------------------------------
    def set_annotations(self, annotations: Iterable[Annotation]) -> None:
        """Replace the point annotations; the user-location marker is kept."""

        self._annotations = list(annotations)
        self._widget.update()

    # ------------------------------------------------------------------
    def set_user_location(self, coordinate: Optional[Coordinate]) -> None:
        """Move the live user-location marker (``None`` hides it)."""

        self._user_location = coordinate
        self._widget.update()

    # ------------------------------------------------------------------
    def visible_annotations(self) -> list[Annotation]:
        """Return annotations allowed by the point-of-interest filter."""

        poi_filter = self._configuration.point_of_interest_filter
        return [annotation for annotation in self._annotations if poi_filter.allows(annotation.category)]

    # ------------------------------------------------------------------
    def screen_to_geographic(self, point: QPointF) -> Optional[Coordinate]:
        """Project a widget position through the current camera."""

        return self._viewport.screen_to_geographic(point)

    # ------------------------------------------------------------------
    def renderer_for(
        self,
        group_id: GroupKey,
        shape_index: int,
        occurrence: int = 0,
    ) -> Optional[ShapeRenderer]:
        return self._overlays.renderer_for(group_id, shape_index, occurrence)

    # ------------------------------------------------------------------
    def group_at(self, point: QPointF) -> Optional[PolygonGroup]:
        """Return the first installed group whose shapes contain ``point``."""

        return hit_test(point, self._overlays.groups, self)

    # ------------------------------------------------------------------
    def handle_tap(self, point: QPointF) -> Optional[PolygonGroup]:
        """Hit-test ``point`` and notify tap listeners on a match."""

        match = self.group_at(point)
        if match is None:
            return None

        # Listeners may install a new overlay set; the match is already final.
        for callback in list(self._tap_listeners):
            try:
                callback(match, QPointF(point))
            except Exception:
                _LOGGER.exception("Polygon tap listener failed for group %r", match.id)
        return match

    # ------------------------------------------------------------------
    def add_tap_listener(self, callback: Callable[[PolygonGroup, QPointF], None]) -> None:
        """Register *callback* for taps that land inside a polygon group."""

        if callback not in self._tap_listeners:
            self._tap_listeners.append(callback)

    # ------------------------------------------------------------------
    def add_view_listener(self, callback: Callable[[float, float, float], None]) -> None:
        """Register *callback* to receive camera updates."""

        if callback not in self._view_listeners:
            self._view_listeners.append(callback)

    # ------------------------------------------------------------------
    def resize(self, width: int, height: int) -> None:
        """Track the widget size and refit when the map follows the overlays."""

        self._viewport.resize(width, height)
        if not self._camera_moved:
            self._apply_viewport()
        self._notify_view_changed()

    # ------------------------------------------------------------------
    def render(self, painter: QPainter) -> None:
        """Draw the background, polygon overlays and annotations."""

        background, _ = config.DISPLAY_MODE_PALETTES[self._configuration.display_mode]
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(0, 0, self._viewport.width, self._viewport.height, QColor(background))

        for renderer in self._overlays.renderers():
            renderer.draw(painter, self._viewport)

        self._render_annotations(painter, self.visible_annotations())
        if self._configuration.show_user_location and self._user_location is not None:
            self._render_user_location(painter, self._user_location)

    # ------------------------------------------------------------------
    def handle_mouse_press(self, event) -> None:
        """Delegate mouse press events to the shared input handler."""

        self._input_handler.handle_mouse_press(event)

    # ------------------------------------------------------------------
    def handle_mouse_move(self, event) -> None:
        """Delegate mouse move events to the shared input handler."""

        self._input_handler.handle_mouse_move(event)

    # ------------------------------------------------------------------
    def handle_mouse_release(self, event) -> None:
        """Delegate mouse release events to the shared input handler."""

        self._input_handler.handle_mouse_release(event)

    # ------------------------------------------------------------------
    def handle_wheel_event(self, event) -> None:
        """Delegate wheel events to the shared input handler."""

        self._input_handler.handle_wheel_event(event, self._viewport.zoom)

    # ------------------------------------------------------------------
    def _apply_interaction(self) -> None:
        self._input_handler.set_interaction(
            allow_scroll=self._configuration.allow_scroll,
            allow_zoom=self._configuration.allow_zoom,
            allow_rotate=self._configuration.allow_rotate,
        )

    # ------------------------------------------------------------------
    def _apply_viewport(self) -> None:
        """Show the explicit region or fit every installed shape."""

        self._camera_moved = False
        region = self._configuration.region
        if region is not None:
            self._viewport.set_region(region)
        else:
            bounds = self._overlays.bounds()
            if bounds is None:
                return
            self._viewport.fit_bounds(bounds, config.FIT_PADDING_PX)
        self._notify_view_changed()

    # ------------------------------------------------------------------
    def _on_pan_requested(self, delta: QPointF) -> None:
        self._camera_moved = True
        self._viewport.pan_by(delta)
        self._widget.update()
        self._notify_view_changed()

    # ------------------------------------------------------------------
    def _on_zoom_requested(self, new_zoom: float, anchor: QPointF) -> None:
        """Zoom around ``anchor`` to keep the cursor position fixed."""

        self._camera_moved = True
        self._viewport.zoom_around(new_zoom, anchor)
        self._widget.update()
        self._notify_view_changed()

    # ------------------------------------------------------------------
    def _on_rotate_requested(self, degrees: float) -> None:
        self._camera_moved = True
        self._viewport.rotate_by(degrees)
        self._widget.update()
        self._notify_view_changed()

    # ------------------------------------------------------------------
    def _notify_view_changed(self) -> None:
        """Emit the current view state to registered listeners."""

        center_x, center_y, zoom = self.view_state()
        for callback in list(self._view_listeners):
            try:
                callback(center_x, center_y, zoom)
            except Exception:
                _LOGGER.exception("View listener failed")

    # ------------------------------------------------------------------
    def _render_annotations(self, painter: QPainter, annotations: Sequence[Annotation]) -> None:
        if not annotations:
            return

        _, label_color = config.DISPLAY_MODE_PALETTES[self._configuration.display_mode]
        radius = config.ANNOTATION_DOT_RADIUS
        font = QFont("Open Sans", pointSize=10)
        label_pen = QPen(QColor(label_color))
        label_pen.setCosmetic(True)

        painter.save()
        painter.setFont(font)
        for annotation in annotations:
            point = self._viewport.geographic_to_screen(annotation.coordinate)
            if point is None:
                continue
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor(config.ANNOTATION_COLOR))
            painter.drawEllipse(point, radius, radius)
            if annotation.title:
                painter.setPen(label_pen)
                painter.drawText(QPointF(point.x() + radius + 4.0, point.y() + radius), annotation.title)
        painter.restore()

    # ------------------------------------------------------------------
    def _render_user_location(self, painter: QPainter, coordinate: Coordinate) -> None:
        point = self._viewport.geographic_to_screen(coordinate)
        if point is None:
            return

        outline = QPen(QColor(255, 255, 255, 230))
        outline.setWidthF(2.0)
        outline.setCosmetic(True)
        painter.save()
        painter.setPen(outline)
        painter.setBrush(QColor(config.USER_LOCATION_COLOR))
        radius = config.ANNOTATION_DOT_RADIUS + 2.0
        painter.drawEllipse(point, radius, radius)
        painter.restore()


__all__ = ["MapWidgetController", "SupportsMapViewport"]
