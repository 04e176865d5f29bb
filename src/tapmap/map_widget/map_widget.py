"""QWidget based implementation of the tappable polygon map."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from PySide6.QtCore import QPointF, Signal
from PySide6.QtGui import QPainter, QResizeEvent
from PySide6.QtWidgets import QWidget

from tapmap.configuration import MapConfiguration
from tapmap.models import Annotation, Coordinate, PolygonGroup

from ._map_widget_base import MapWidgetController


class TappableMapWidget(QWidget):
    """Display polygon overlays and report which polygon group was tapped.

    Tapping inside any shape of a group emits :attr:`polygonTapped` with that
    group and :attr:`polygonTappedAt` with the group and the widget position.
    Taps outside every shape emit nothing.
    """

    polygonTapped = Signal(object)
    """Signal emitted with the :class:`~tapmap.models.PolygonGroup` that was tapped."""

    polygonTappedAt = Signal(object, QPointF)
    """Signal emitted with the tapped group and the tap position in widget space."""

    viewChanged = Signal(float, float, float)
    """Signal emitted whenever the map centre or zoom level changes."""

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        configuration: MapConfiguration | None = None,
        on_polygon_tapped: Optional[Callable[[PolygonGroup], None]] = None,
        on_polygon_tapped_at: Optional[Callable[[PolygonGroup, QPointF], None]] = None,
    ) -> None:
        super().__init__(parent)

        self._controller = MapWidgetController(self, configuration=configuration)
        self._controller.add_view_listener(self._emit_view_change)
        self._controller.add_tap_listener(self._emit_polygon_tapped)

        if on_polygon_tapped is not None:
            self.polygonTapped.connect(on_polygon_tapped)
        if on_polygon_tapped_at is not None:
            self.polygonTappedAt.connect(on_polygon_tapped_at)

        self.setMouseTracking(True)
        self.setMinimumSize(320, 240)

    # ------------------------------------------------------------------
    @property
    def controller(self) -> MapWidgetController:
        return self._controller

    # ------------------------------------------------------------------
    @property
    def zoom(self) -> float:
        """Expose the current zoom level for the surrounding UI."""

        return self._controller.zoom

    # ------------------------------------------------------------------
    def set_zoom(self, zoom: float) -> None:
        self._controller.set_zoom(zoom)

    # ------------------------------------------------------------------
    def center_on(self, coordinate: Coordinate) -> None:
        self._controller.center_on(coordinate)

    # ------------------------------------------------------------------
    def set_polygons(self, groups: Iterable[PolygonGroup]) -> None:
        """Replace the polygon overlays shown on the map."""

        self._controller.set_polygons(groups)

    # ------------------------------------------------------------------
    def set_annotations(self, annotations: Iterable[Annotation]) -> None:
        """Replace the point annotations shown on the map."""

        self._controller.set_annotations(annotations)

    # ------------------------------------------------------------------
    def set_configuration(self, configuration: MapConfiguration) -> None:
        self._controller.set_configuration(configuration)

    # ------------------------------------------------------------------
    def set_user_location(self, coordinate: Optional[Coordinate]) -> None:
        self._controller.set_user_location(coordinate)

    # ------------------------------------------------------------------
    def group_at(self, position: QPointF) -> Optional[PolygonGroup]:
        """Return the polygon group under ``position`` without emitting signals."""

        return self._controller.group_at(position)

    # ------------------------------------------------------------------
    def paintEvent(self, event) -> None:  # type: ignore[override]
        """Render the current scene using CPU backed ``QPainter`` drawing."""

        painter = QPainter(self)
        try:
            self._controller.render(painter)
        finally:
            painter.end()

    # ------------------------------------------------------------------
    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        """Forward mouse press events to the shared interaction handler."""

        self._controller.handle_mouse_press(event)
        super().mousePressEvent(event)

    # ------------------------------------------------------------------
    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        """Forward mouse move events to the shared interaction handler."""

        self._controller.handle_mouse_move(event)
        super().mouseMoveEvent(event)

    # ------------------------------------------------------------------
    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        """Forward mouse release events to the shared interaction handler."""

        self._controller.handle_mouse_release(event)
        super().mouseReleaseEvent(event)

    # ------------------------------------------------------------------
    def wheelEvent(self, event) -> None:  # type: ignore[override]
        """Forward wheel events to the shared interaction handler."""

        self._controller.handle_wheel_event(event)
        super().wheelEvent(event)

    # ------------------------------------------------------------------
    def resizeEvent(self, event: QResizeEvent) -> None:  # type: ignore[override]
        """Propagate the new size to the camera."""

        super().resizeEvent(event)
        size = event.size()
        self._controller.resize(size.width(), size.height())

    # ------------------------------------------------------------------
    def _emit_view_change(self, center_x: float, center_y: float, zoom: float) -> None:
        """Forward controller updates via the Qt signal for external consumers."""

        self.viewChanged.emit(float(center_x), float(center_y), float(zoom))

    # ------------------------------------------------------------------
    def _emit_polygon_tapped(self, group: PolygonGroup, position: QPointF) -> None:
        self.polygonTapped.emit(group)
        self.polygonTappedAt.emit(group, QPointF(position))


__all__ = ["TappableMapWidget"]
