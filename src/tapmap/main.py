"""Demo window that shows a GeoJSON FeatureCollection as tappable polygons."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QAction, QColor
from PySide6.QtWidgets import QFileDialog, QMainWindow, QMessageBox

from .configuration import MapConfiguration
from .errors import GeoJSONLoadError
from .geojson import load_feature_collection
from .map_widget import TappableMapWidget
from .models import ParsedFeature, PolygonGroup, PolygonStyle

_LOGGER = logging.getLogger(__name__)

# Hues cycled through so neighbouring regions stay distinguishable.
_PALETTE_HUES = (187, 28, 122, 280, 350, 55, 215)


def groups_from_features(features: Sequence[ParsedFeature]) -> list[PolygonGroup]:
    """Turn parsed features into polygon groups with alternating colours."""

    groups: list[PolygonGroup] = []
    for index, feature in enumerate(features):
        hue = _PALETTE_HUES[index % len(_PALETTE_HUES)]
        fill = QColor.fromHsv(hue, 160, 200, 70)
        stroke = QColor.fromHsv(hue, 200, 170)
        groups.append(PolygonGroup.from_feature(feature, PolygonStyle(fill, stroke, 1.5)))
    return groups


class MainWindow(QMainWindow):
    """Primary demo window hosting a :class:`TappableMapWidget`."""

    def __init__(
        self,
        geojson_path: Path | str | None = None,
        *,
        configuration: MapConfiguration | None = None,
        on_tap: Optional[Callable[[PolygonGroup, QPointF], None]] = None,
    ) -> None:
        super().__init__()
        self.resize(1024, 768)

        self._geojson_path: Optional[Path] = None
        self._map_widget = TappableMapWidget(
            configuration=configuration,
            on_polygon_tapped_at=on_tap,
        )
        self._map_widget.polygonTapped.connect(self._show_tapped)
        self.setCentralWidget(self._map_widget)

        self._create_actions()
        self._create_menus()

        if geojson_path is not None:
            self.load_geojson(geojson_path)
        self._update_window_title()

    # ------------------------------------------------------------------
    @property
    def map_widget(self) -> TappableMapWidget:
        return self._map_widget

    # ------------------------------------------------------------------
    def load_geojson(self, path: Path | str) -> int:
        """Replace the overlays with the features stored in ``path``."""

        features = load_feature_collection(path)
        self._map_widget.set_polygons(groups_from_features(features))
        self._geojson_path = Path(path)
        _LOGGER.info("Loaded %d features from %s", len(features), self._geojson_path)
        return len(features)

    # ------------------------------------------------------------------
    def _create_actions(self) -> None:
        """Assemble actions that appear in the menu bar."""

        self._action_zoom_in = QAction("Zoom In", self)
        self._action_zoom_in.setShortcut(Qt.Key_Plus)
        self._action_zoom_in.triggered.connect(self._zoom_in)

        self._action_zoom_out = QAction("Zoom Out", self)
        self._action_zoom_out.setShortcut(Qt.Key_Minus)
        self._action_zoom_out.triggered.connect(self._zoom_out)

        self._action_open = QAction("Open GeoJSON…", self)
        self._action_open.triggered.connect(self._open_geojson)

    # ------------------------------------------------------------------
    def _create_menus(self) -> None:
        """Create the menu structure shown in the window."""

        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("File")
        file_menu.addAction(self._action_open)

        view_menu = menu_bar.addMenu("View")
        view_menu.addAction(self._action_zoom_in)
        view_menu.addAction(self._action_zoom_out)

    # ------------------------------------------------------------------
    def _zoom_in(self) -> None:
        self._map_widget.set_zoom(self._map_widget.zoom + 1.0)
        self._update_window_title()

    # ------------------------------------------------------------------
    def _zoom_out(self) -> None:
        self._map_widget.set_zoom(self._map_widget.zoom - 1.0)
        self._update_window_title()

    # ------------------------------------------------------------------
    def _open_geojson(self) -> None:
        """Allow the user to pick a different FeatureCollection file."""

        start = str(self._geojson_path.parent) if self._geojson_path else ""
        path, _ = QFileDialog.getOpenFileName(self, "Select GeoJSON", start, "GeoJSON (*.geojson *.json)")
        if not path:
            return

        try:
            self.load_geojson(path)
        except GeoJSONLoadError as exc:  # pragma: no cover - best effort error reporting
            QMessageBox.critical(self, "Error", f"Unable to load the GeoJSON file:\n{exc}")
            return
        self._update_window_title()

    # ------------------------------------------------------------------
    def _show_tapped(self, group: PolygonGroup) -> None:
        self.statusBar().showMessage(f"Tapped: {group.title or group.id}")

    # ------------------------------------------------------------------
    def _update_window_title(self) -> None:
        name = self._geojson_path.name if self._geojson_path else "No data"
        self.setWindowTitle(f"Tappable Map - {name}")


__all__ = ["MainWindow", "groups_from_features"]
