"""Overlay bookkeeping: renderers per shape and the shape -> group index."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Dict, NamedTuple, Optional, Tuple

from tapmap.models import GeoBounds, GroupKey, PolygonGroup

from .shape_renderer import ShapeRenderer

_LOGGER = logging.getLogger(__name__)


class ShapeKey(NamedTuple):
    """Identify one shape of one group by value.

    ``occurrence`` counts earlier groups in the same update that carry the
    same id, so repeated ids still get distinct renderers.
    """

    group_id: GroupKey
    shape_index: int
    occurrence: int = 0


class OverlaySet:
    """Hold the polygon groups currently installed on the map.

    The set is rebuilt from scratch by :meth:`replace`; renderers are created
    once per shape and stay stable until the next replacement.  Lookups are
    keyed by group id and shape position, never by object identity.  Groups
    that repeat an id are all kept in list order; :meth:`group` resolves such
    an id to the later group.
    """

    def __init__(self) -> None:
        self._groups: list[PolygonGroup] = []
        self._renderers: Dict[ShapeKey, ShapeRenderer] = {}
        self._groups_by_id: Dict[GroupKey, PolygonGroup] = {}

    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._groups)

    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[PolygonGroup]:
        return iter(self._groups)

    # ------------------------------------------------------------------
    @property
    def groups(self) -> Tuple[PolygonGroup, ...]:
        return tuple(self._groups)

    # ------------------------------------------------------------------
    def replace(self, groups: Iterable[PolygonGroup]) -> None:
        """Tear down every installed shape and install ``groups`` instead."""

        self.clear()
        for occurrence, group in _with_occurrences(groups):
            if occurrence:
                _LOGGER.warning("Polygon group id %r is repeated; id lookups resolve to the later group", group.id)
            self._groups.append(group)
            self._groups_by_id[group.id] = group
            for index, shape in enumerate(group.shapes):
                key = ShapeKey(group.id, index, occurrence)
                self._renderers[key] = ShapeRenderer(shape, group.style)

    # ------------------------------------------------------------------
    def clear(self) -> None:
        self._groups.clear()
        self._renderers.clear()
        self._groups_by_id.clear()

    # ------------------------------------------------------------------
    def renderer_for(
        self,
        group_id: GroupKey,
        shape_index: int,
        occurrence: int = 0,
    ) -> Optional[ShapeRenderer]:
        """Return the renderer of the given shape, if it is installed."""

        return self._renderers.get(ShapeKey(group_id, shape_index, occurrence))

    # ------------------------------------------------------------------
    def group(self, group_id: GroupKey) -> Optional[PolygonGroup]:
        return self._groups_by_id.get(group_id)

    # ------------------------------------------------------------------
    def renderers(self) -> Iterator[ShapeRenderer]:
        """Yield renderers in drawing order (first group is painted first)."""

        for occurrence, group in _with_occurrences(self._groups):
            for index in range(len(group.shapes)):
                renderer = self._renderers.get(ShapeKey(group.id, index, occurrence))
                if renderer is not None:
                    yield renderer

    # ------------------------------------------------------------------
    def bounds(self) -> Optional[GeoBounds]:
        """Return the union bounding box of every shape, or ``None``."""

        result: Optional[GeoBounds] = None
        for group in self._groups:
            group_bounds = group.bounds()
            if group_bounds is None:
                continue
            result = group_bounds if result is None else result.union(group_bounds)
        return result


def _with_occurrences(groups: Iterable[PolygonGroup]) -> Iterator[tuple[int, PolygonGroup]]:
    """Pair each group with the number of earlier groups sharing its id."""

    seen: Dict[GroupKey, int] = {}
    for group in groups:
        occurrence = seen.get(group.id, 0)
        seen[group.id] = occurrence + 1
        yield occurrence, group


__all__ = ["OverlaySet", "ShapeKey"]
