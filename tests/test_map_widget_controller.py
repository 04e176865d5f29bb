from __future__ import annotations

import logging
from unittest.mock import Mock

import pytest
from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QImage, QPainter

from conftest import rectangle
from tapmap import config
from tapmap.configuration import MapConfiguration, PointOfInterestFilter
from tapmap.map_widget._map_widget_base import MapWidgetController
from tapmap.models import Annotation, Coordinate, GeoRegion, PolygonGroup, PolygonWithHoles


class _FakeWidget:
    def __init__(self, width: int = 640, height: int = 480) -> None:
        self._width = width
        self._height = height
        self.update_calls = 0
        self.cursor = None

    def update(self) -> None:
        self.update_calls += 1

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def setCursor(self, cursor) -> None:
        self.cursor = cursor

    def unsetCursor(self) -> None:
        self.cursor = None


def _mouse_event(button, position: QPointF, buttons=None) -> Mock:
    event = Mock()
    event.button.return_value = button
    event.buttons.return_value = buttons if buttons is not None else button
    event.position.return_value = position
    return event


def _centroid_point(controller: MapWidgetController) -> QPointF:
    return controller.viewport.geographic_to_screen(Coordinate(44.0, -100.025))


@pytest.fixture()
def controller(qapp) -> MapWidgetController:
    return MapWidgetController(_FakeWidget())


def test_tap_inside_group_notifies_listeners(controller, south_dakota) -> None:
    taps = []
    controller.add_tap_listener(lambda group, point: taps.append((group, point)))
    controller.set_polygons([south_dakota])
    point = _centroid_point(controller)

    assert controller.handle_tap(point) is south_dakota
    assert len(taps) == 1
    assert taps[0][0] is south_dakota
    assert taps[0][1] == point


def test_tap_outside_every_group_is_silent(controller, south_dakota) -> None:
    listener = Mock()
    controller.add_tap_listener(listener)
    controller.set_polygons([south_dakota])

    assert controller.handle_tap(QPointF(1.0, 1.0)) is None
    listener.assert_not_called()


def test_tap_with_no_polygons_is_silent(controller) -> None:
    listener = Mock()
    controller.add_tap_listener(listener)

    assert controller.handle_tap(QPointF(320.0, 240.0)) is None
    listener.assert_not_called()


def test_set_polygons_fits_the_camera_to_the_groups(controller, south_dakota) -> None:
    controller.set_polygons([south_dakota])

    point = _centroid_point(controller)
    assert point.x() == pytest.approx(320.0, abs=1e-6)
    north_west = controller.viewport.geographic_to_screen(Coordinate(45.0, -104.05))
    assert north_west.x() >= config.FIT_PADDING_PX - 1e-6
    assert north_west.y() >= config.FIT_PADDING_PX - 1e-6


def test_empty_update_leaves_the_camera_alone(controller, south_dakota) -> None:
    controller.set_polygons([south_dakota])
    before = controller.view_state()

    controller.set_polygons([])

    assert controller.view_state() == before
    assert controller.polygons == ()


def test_update_replaces_previous_groups(controller, south_dakota, framed_square) -> None:
    controller.set_polygons([south_dakota])
    controller.set_polygons([framed_square])

    assert controller.polygons == (framed_square,)
    assert controller.renderer_for(south_dakota.id, 0) is None
    assert controller.handle_tap(_centroid_point(controller)) is None


def test_explicit_region_is_applied_verbatim(qapp, south_dakota) -> None:
    region = GeoRegion(center=Coordinate(10.0, 10.0), latitude_delta=2.0, longitude_delta=2.0)
    controller = MapWidgetController(_FakeWidget(), configuration=MapConfiguration(region=region))

    controller.set_polygons([south_dakota])

    centre = controller.screen_to_geographic(QPointF(320.0, 240.0))
    assert centre.latitude == pytest.approx(10.0, abs=1e-6)
    assert centre.longitude == pytest.approx(10.0, abs=1e-6)


def test_annotation_updates_keep_the_user_location(controller) -> None:
    here = Coordinate(44.36, -100.35)
    controller.set_user_location(here)

    controller.set_annotations([Annotation(id=1, coordinate=Coordinate(44.0, -100.0), title="Pierre")])
    controller.set_annotations([])

    assert controller.annotations == ()
    assert controller.user_location == here


def test_point_of_interest_filter_hides_categorised_annotations(controller) -> None:
    plain = Annotation(id=1, coordinate=Coordinate(0.0, 0.0))
    cafe = Annotation(id=2, coordinate=Coordinate(0.0, 1.0), category="cafe")
    park = Annotation(id=3, coordinate=Coordinate(0.0, 2.0), category="park")
    controller.set_annotations([plain, cafe, park])

    assert controller.visible_annotations() == [plain]

    controller.set_configuration(MapConfiguration(point_of_interest_filter=PointOfInterestFilter.including("park")))
    assert controller.visible_annotations() == [plain, park]


def test_listener_may_replace_overlays_during_a_tap(controller, south_dakota, framed_square) -> None:
    seen = []

    def swap(group, point):
        seen.append(group)
        controller.set_polygons([framed_square])

    controller.add_tap_listener(swap)
    controller.add_tap_listener(lambda group, point: seen.append(group))
    controller.set_polygons([south_dakota])

    assert controller.handle_tap(_centroid_point(controller)) is south_dakota
    assert seen == [south_dakota, south_dakota]
    assert controller.polygons == (framed_square,)


def test_failing_listener_does_not_block_others(controller, south_dakota, caplog) -> None:
    other = Mock()
    controller.add_tap_listener(Mock(side_effect=RuntimeError("boom")))
    controller.add_tap_listener(other)
    controller.set_polygons([south_dakota])

    with caplog.at_level(logging.ERROR):
        controller.handle_tap(_centroid_point(controller))

    other.assert_called_once()
    assert "tap listener failed" in caplog.text


def test_mouse_click_taps_but_drag_does_not(controller, south_dakota) -> None:
    listener = Mock()
    controller.add_tap_listener(listener)
    controller.set_polygons([south_dakota])
    point = _centroid_point(controller)

    controller.handle_mouse_press(_mouse_event(Qt.LeftButton, point))
    controller.handle_mouse_release(_mouse_event(Qt.LeftButton, point + QPointF(2.0, 1.0), Qt.NoButton))
    assert listener.call_count == 1

    controller.handle_mouse_press(_mouse_event(Qt.LeftButton, point))
    controller.handle_mouse_move(_mouse_event(Qt.NoButton, point + QPointF(40.0, 0.0), Qt.LeftButton))
    controller.handle_mouse_release(_mouse_event(Qt.LeftButton, point + QPointF(40.0, 0.0), Qt.NoButton))
    assert listener.call_count == 1


def test_resize_refits_until_the_user_moves_the_camera(controller, south_dakota) -> None:
    controller.set_polygons([south_dakota])
    fitted_zoom = controller.zoom

    controller.resize(1280, 960)
    assert controller.zoom > fitted_zoom

    start = QPointF(300.0, 200.0)
    controller.handle_mouse_press(_mouse_event(Qt.LeftButton, start))
    controller.handle_mouse_move(_mouse_event(Qt.NoButton, start + QPointF(80.0, 0.0), Qt.LeftButton))
    controller.handle_mouse_release(_mouse_event(Qt.LeftButton, start + QPointF(80.0, 0.0), Qt.NoButton))
    panned = controller.view_state()

    controller.resize(640, 480)
    assert controller.view_state() == panned


def test_programmatic_zoom_and_centre_survive_resize(controller, south_dakota) -> None:
    controller.set_polygons([south_dakota])
    controller.set_zoom(controller.zoom + 1.0)
    zoomed = controller.view_state()

    controller.resize(1280, 960)
    assert controller.view_state() == zoomed

    controller.set_polygons([south_dakota])
    controller.center_on(Coordinate(10.0, 10.0))
    centred = controller.view_state()

    controller.resize(640, 480)
    assert controller.view_state() == centred


def test_view_listeners_receive_camera_updates(controller) -> None:
    states = []
    controller.add_view_listener(lambda x, y, zoom: states.append((x, y, zoom)))

    controller.set_zoom(5.0)

    assert states[-1][2] == 5.0


def test_render_paints_background_and_overlays(controller, south_dakota) -> None:
    controller.set_polygons([south_dakota])
    controller.set_annotations([Annotation(id="pin", coordinate=Coordinate(45.5, -100.0), title="North")])
    image = QImage(640, 480, QImage.Format_ARGB32)
    image.fill(QColor(0, 0, 0))

    painter = QPainter(image)
    try:
        controller.render(painter)
    finally:
        painter.end()

    background = QColor(config.DISPLAY_MODE_PALETTES["standard"][0])
    assert image.pixelColor(2, 2) == background
    centre = _centroid_point(controller)
    assert image.pixelColor(int(centre.x()), int(centre.y())) != background
