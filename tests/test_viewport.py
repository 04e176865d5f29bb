import pytest
from PySide6.QtCore import QPointF

from tapmap import config
from tapmap.map_widget.shape_renderer import ShapeRenderer
from tapmap.map_widget.viewport import MapViewport
from tapmap.models import Coordinate, GeoBounds, GeoRegion, PolygonStyle, PolygonWithHoles

from conftest import rectangle


def _assert_coordinate(actual, expected, tolerance=1e-6) -> None:
    assert actual is not None
    assert actual.latitude == pytest.approx(expected.latitude, abs=tolerance)
    assert actual.longitude == pytest.approx(expected.longitude, abs=tolerance)


def test_widget_centre_maps_to_camera_centre() -> None:
    viewport = MapViewport(640, 480)
    viewport.set_zoom(6.0)
    viewport.center_on(Coordinate(40.7, -74.0))

    _assert_coordinate(viewport.screen_to_geographic(QPointF(320.0, 240.0)), Coordinate(40.7, -74.0))


@pytest.mark.parametrize("rotation", [0.0, 17.0, 90.0, 245.0])
def test_screen_geographic_round_trip(rotation: float) -> None:
    viewport = MapViewport(800, 600)
    viewport.set_zoom(5.0)
    viewport.center_on(Coordinate(44.0, -100.0))
    viewport.set_rotation(rotation)

    for coordinate in (Coordinate(44.0, -100.0), Coordinate(45.2, -98.5), Coordinate(42.1, -103.9)):
        point = viewport.geographic_to_screen(coordinate)
        _assert_coordinate(viewport.screen_to_geographic(point), coordinate)


def test_rotation_turns_east_towards_the_bottom_of_the_screen() -> None:
    viewport = MapViewport(640, 480)
    viewport.set_zoom(4.0)
    viewport.center_on(Coordinate(0.0, 0.0))
    viewport.set_rotation(90.0)

    east = viewport.geographic_to_screen(Coordinate(0.0, 10.0))

    assert east.x() == pytest.approx(320.0, abs=1e-6)
    assert east.y() > 240.0


def test_screen_above_the_world_has_no_coordinate() -> None:
    viewport = MapViewport(640, 480)
    viewport.set_zoom(0.0)

    assert viewport.screen_to_geographic(QPointF(320.0, -1000.0)) is None


def test_zoom_is_clamped() -> None:
    viewport = MapViewport()

    viewport.set_zoom(99.0)
    assert viewport.zoom == config.MAX_ZOOM
    viewport.set_zoom(-3.0)
    assert viewport.zoom == config.MIN_ZOOM


@pytest.mark.parametrize("rotation", [0.0, 30.0])
def test_pan_moves_content_with_the_pointer(rotation: float) -> None:
    viewport = MapViewport(640, 480)
    viewport.set_zoom(5.0)
    viewport.set_rotation(rotation)
    viewport.center_on(Coordinate(10.0, 20.0))
    grabbed = viewport.screen_to_geographic(QPointF(320.0, 240.0))

    viewport.pan_by(QPointF(100.0, -40.0))

    moved = viewport.geographic_to_screen(grabbed)
    assert moved.x() == pytest.approx(420.0, abs=1e-6)
    assert moved.y() == pytest.approx(200.0, abs=1e-6)


def test_zoom_around_keeps_anchor_fixed() -> None:
    viewport = MapViewport(640, 480)
    viewport.set_zoom(4.0)
    viewport.set_rotation(25.0)
    viewport.center_on(Coordinate(48.0, 2.0))
    anchor = QPointF(500.0, 100.0)
    before = viewport.screen_to_geographic(anchor)

    viewport.zoom_around(7.5, anchor)

    assert viewport.zoom == 7.5
    _assert_coordinate(viewport.screen_to_geographic(anchor), before)


def _corner_points(viewport: MapViewport, bounds: GeoBounds) -> list[QPointF]:
    corners = [
        Coordinate(bounds.max_latitude, bounds.min_longitude),
        Coordinate(bounds.max_latitude, bounds.max_longitude),
        Coordinate(bounds.min_latitude, bounds.min_longitude),
        Coordinate(bounds.min_latitude, bounds.max_longitude),
    ]
    return [viewport.geographic_to_screen(corner) for corner in corners]


@pytest.mark.parametrize("rotation", [0.0, 45.0])
def test_fit_bounds_keeps_padding_on_every_side(rotation: float) -> None:
    viewport = MapViewport(640, 480)
    viewport.set_rotation(rotation)
    bounds = GeoBounds(43.0, -104.05, 45.0, -96.0)

    assert viewport.fit_bounds(bounds)

    points = _corner_points(viewport, bounds)
    padding = config.FIT_PADDING_PX
    xs = [point.x() for point in points]
    ys = [point.y() for point in points]
    assert min(xs) >= padding - 1e-6
    assert max(xs) <= 640 - padding + 1e-6
    assert min(ys) >= padding - 1e-6
    assert max(ys) <= 480 - padding + 1e-6
    # The limiting axis touches the padding.
    assert min(xs) == pytest.approx(padding, abs=1e-6) or min(ys) == pytest.approx(padding, abs=1e-6)


def test_fit_bounds_of_a_single_point_uses_maximum_zoom() -> None:
    viewport = MapViewport(640, 480)
    point = Coordinate(44.0, -100.0)

    viewport.fit_bounds(GeoBounds.from_coordinates([point]))

    assert viewport.zoom == config.MAX_ZOOM
    _assert_coordinate(viewport.screen_to_geographic(QPointF(320.0, 240.0)), point)


def test_set_region_centres_on_region_without_padding() -> None:
    viewport = MapViewport(640, 480)
    region = GeoRegion(center=Coordinate(44.0, -100.0), latitude_delta=4.0, longitude_delta=10.0)

    viewport.set_region(region)

    _assert_coordinate(viewport.screen_to_geographic(QPointF(320.0, 240.0)), region.center)
    west = viewport.geographic_to_screen(Coordinate(44.0, -105.0))
    east = viewport.geographic_to_screen(Coordinate(44.0, -95.0))
    assert west.x() >= -1e-6
    assert east.x() <= 640 + 1e-6


@pytest.mark.parametrize("rotation", [0.0, 60.0])
def test_renderer_transform_agrees_with_viewport_projection(qapp, rotation: float) -> None:
    renderer = ShapeRenderer(PolygonWithHoles(rectangle(-104.05, 43.0, -96.0, 45.0)), PolygonStyle())
    viewport = MapViewport(640, 480)
    viewport.set_rotation(rotation)
    viewport.fit_bounds(GeoBounds(43.0, -104.05, 45.0, -96.0))
    transform = viewport.local_to_screen_transform(*renderer.origin, config.RENDERER_LOCAL_SCALE)

    coordinate = Coordinate(44.5, -97.0)
    mapped = transform.map(renderer.point_for(coordinate))
    expected = viewport.geographic_to_screen(coordinate)

    assert mapped.x() == pytest.approx(expected.x(), abs=1e-3)
    assert mapped.y() == pytest.approx(expected.y(), abs=1e-3)
