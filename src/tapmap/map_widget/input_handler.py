"""Logic for translating Qt input events into map navigation and tap requests."""

from __future__ import annotations

import math

from PySide6.QtCore import QObject, QPointF, Qt, Signal

from tapmap import config


class InputHandler(QObject):
    """Handle mouse interaction for :class:`~tapmap.map_widget.TappableMapWidget`.

    A left-button press/release pair that stays within ``tap_slop`` pixels is
    reported as a tap; anything longer becomes a pan gesture and never
    produces a tap.  A right-button horizontal drag rotates the map.
    """

    pan_requested = Signal(QPointF)
    """Signal emitted for every incremental drag delta while the user pans."""

    pan_finished = Signal()
    """Signal emitted once the active drag gesture completes."""

    zoom_requested = Signal(float, QPointF)
    rotate_requested = Signal(float)

    tap_requested = Signal(QPointF)
    """Signal emitted with the widget position of a completed tap."""

    cursor_changed = Signal(Qt.CursorShape)
    cursor_reset = Signal()

    def __init__(
        self,
        *,
        min_zoom: float,
        max_zoom: float,
        tap_slop: float = config.TAP_SLOP_PX,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        self._tap_slop = tap_slop
        self._allow_scroll = True
        self._allow_zoom = True
        self._allow_rotate = True
        self._is_pressed = False
        self._is_dragging = False
        self._is_rotating = False
        self._press_pos = QPointF()
        self._last_mouse_pos = QPointF()

    # ------------------------------------------------------------------
    def set_interaction(self, *, allow_scroll: bool, allow_zoom: bool, allow_rotate: bool) -> None:
        """Enable or disable the individual navigation gestures."""

        self._allow_scroll = allow_scroll
        self._allow_zoom = allow_zoom
        self._allow_rotate = allow_rotate

    # ------------------------------------------------------------------
    def handle_mouse_press(self, event) -> None:
        """Start tracking a tap or drag gesture."""

        if event.button() == Qt.LeftButton:
            self._is_pressed = True
            self._is_dragging = False
            self._press_pos = event.position()
            self._last_mouse_pos = event.position()
        elif event.button() == Qt.RightButton and self._allow_rotate:
            self._is_rotating = True
            self._last_mouse_pos = event.position()

    # ------------------------------------------------------------------
    def handle_mouse_move(self, event) -> None:
        """Promote the gesture to a drag once it leaves the tap slop."""

        current_pos = event.position()

        if self._is_rotating and event.buttons() & Qt.RightButton:
            delta_x = current_pos.x() - self._last_mouse_pos.x()
            self._last_mouse_pos = current_pos
            if delta_x:
                self.rotate_requested.emit(delta_x * config.ROTATION_DEGREES_PER_PX)
            return

        if not (self._is_pressed and event.buttons() & Qt.LeftButton):
            return

        if not self._is_dragging:
            offset = current_pos - self._press_pos
            if math.hypot(offset.x(), offset.y()) <= self._tap_slop:
                return
            self._is_dragging = True
            if self._allow_scroll:
                self.cursor_changed.emit(Qt.ClosedHandCursor)

        delta = current_pos - self._last_mouse_pos
        self._last_mouse_pos = current_pos
        if self._allow_scroll:
            self.pan_requested.emit(delta)

    # ------------------------------------------------------------------
    def handle_mouse_release(self, event) -> None:
        """Finish the gesture, emitting a tap when the pointer barely moved."""

        if event.button() == Qt.RightButton:
            self._is_rotating = False
            return

        if event.button() != Qt.LeftButton or not self._is_pressed:
            return

        self._is_pressed = False
        if self._is_dragging:
            # ``pan_finished`` is emitted before the cursor resets so listeners
            # can perform any final bookkeeping while the drag context is still
            # active.
            self._is_dragging = False
            if self._allow_scroll:
                self.pan_finished.emit()
                self.cursor_reset.emit()
            return

        self.tap_requested.emit(QPointF(event.position()))

    # ------------------------------------------------------------------
    def handle_wheel_event(self, event, current_zoom: float) -> None:
        """Request a zoom change that keeps the cursor location stationary."""

        if not self._allow_zoom:
            return

        delta = event.angleDelta().y()
        if delta == 0:
            return

        new_zoom = max(
            self._min_zoom,
            min(self._max_zoom, current_zoom + delta * config.WHEEL_ZOOM_STEP),
        )
        if new_zoom == current_zoom:
            return

        self.zoom_requested.emit(new_zoom, event.position())


__all__ = ["InputHandler"]
