"""Per-shape painter path used for drawing and containment queries."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QPainter, QPainterPath, QPen

from tapmap import config
from tapmap.models import Coordinate, PolygonStyle, PolygonWithHoles, Ring

from .geometry import lonlat_to_world
from .viewport import MapViewport


class ShapeRenderer:
    """Own the :class:`QPainterPath` for one :class:`PolygonWithHoles`.

    Each renderer works in a private local space: normalised world units
    measured from the north-west corner of the shape's projected bounding box
    and multiplied by ``local_scale``.  The path uses the odd-even fill rule
    so interior rings punch holes into the exterior for both painting and
    :meth:`contains`.
    """

    def __init__(
        self,
        shape: PolygonWithHoles,
        style: PolygonStyle,
        *,
        local_scale: float = config.RENDERER_LOCAL_SCALE,
    ) -> None:
        self._shape = shape
        self._style = style
        self._local_scale = local_scale
        self._origin_x = 0.0
        self._origin_y = 0.0
        self._path = QPainterPath()
        self._path.setFillRule(Qt.OddEvenFill)
        self._build_path()

    # ------------------------------------------------------------------
    @property
    def shape(self) -> PolygonWithHoles:
        return self._shape

    # ------------------------------------------------------------------
    @property
    def style(self) -> PolygonStyle:
        return self._style

    # ------------------------------------------------------------------
    @property
    def path(self) -> QPainterPath:
        """Return the path expressed in this renderer's local space."""

        return self._path

    # ------------------------------------------------------------------
    @property
    def origin(self) -> tuple[float, float]:
        """World-space position of the local origin."""

        return self._origin_x, self._origin_y

    # ------------------------------------------------------------------
    def bounding_rect(self) -> QRectF:
        return self._path.boundingRect()

    # ------------------------------------------------------------------
    def point_for(self, coordinate: Coordinate) -> Optional[QPointF]:
        """Convert a geographic coordinate into this renderer's local space."""

        world = lonlat_to_world(coordinate.longitude, coordinate.latitude)
        if world is None:
            return None
        return self._world_to_local(*world)

    # ------------------------------------------------------------------
    def contains(self, local_point: QPointF) -> bool:
        """Return ``True`` when ``local_point`` lies inside the filled area."""

        if self._path.isEmpty():
            return False
        return self._path.contains(local_point)

    # ------------------------------------------------------------------
    def draw(self, painter: QPainter, viewport: MapViewport) -> None:
        """Fill and stroke the shape onto ``painter`` for the current camera."""

        if self._path.isEmpty():
            return

        painter.save()
        painter.setTransform(
            viewport.local_to_screen_transform(self._origin_x, self._origin_y, self._local_scale),
            True,
        )
        painter.setBrush(QBrush(self._style.fill_color))
        pen = QPen(self._style.stroke_color)
        pen.setWidthF(self._style.line_width)
        pen.setCosmetic(True)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        painter.setPen(pen)
        painter.drawPath(self._path)
        painter.restore()

    # ------------------------------------------------------------------
    def _build_path(self) -> None:
        exterior = self._project_ring(self._shape.exterior)
        if len(exterior) < 3:
            return

        self._origin_x = min(x for x, _ in exterior)
        self._origin_y = min(y for _, y in exterior)

        self._append_ring(exterior)
        for ring in self._shape.interiors:
            interior = self._project_ring(ring)
            if len(interior) < 3:
                continue
            self._append_ring(interior)

    # ------------------------------------------------------------------
    def _append_ring(self, ring: list[tuple[float, float]]) -> None:
        first = self._world_to_local(*ring[0])
        self._path.moveTo(first)
        for world_x, world_y in ring[1:]:
            self._path.lineTo(self._world_to_local(world_x, world_y))
        self._path.closeSubpath()

    # ------------------------------------------------------------------
    def _world_to_local(self, world_x: float, world_y: float) -> QPointF:
        return QPointF(
            (world_x - self._origin_x) * self._local_scale,
            (world_y - self._origin_y) * self._local_scale,
        )

    # ------------------------------------------------------------------
    @staticmethod
    def _project_ring(ring: Ring) -> list[tuple[float, float]]:
        projected: list[tuple[float, float]] = []
        for coordinate in ring:
            world = lonlat_to_world(coordinate.longitude, coordinate.latitude)
            if world is not None:
                projected.append(world)
        return projected


__all__ = ["ShapeRenderer"]
