import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

pytest.importorskip("PySide6", reason="PySide6 is required for the map widget tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtWidgets", reason="Qt widgets not available", exc_type=ImportError)

from PySide6.QtWidgets import QApplication  # noqa: E402

from tapmap.models import Coordinate, PolygonGroup, PolygonWithHoles  # noqa: E402


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


def rectangle(min_lon: float, min_lat: float, max_lon: float, max_lat: float) -> tuple[Coordinate, ...]:
    """Return a closed axis-aligned ring."""

    return (
        Coordinate(min_lat, min_lon),
        Coordinate(max_lat, min_lon),
        Coordinate(max_lat, max_lon),
        Coordinate(min_lat, max_lon),
        Coordinate(min_lat, min_lon),
    )


@pytest.fixture()
def south_dakota() -> PolygonGroup:
    shape = PolygonWithHoles(exterior=rectangle(-104.05, 43.0, -96.0, 45.0))
    return PolygonGroup(id=46, shapes=(shape,), title="South Dakota")


@pytest.fixture()
def framed_square() -> PolygonGroup:
    """Ten degree square with a two degree hole in the middle."""

    shape = PolygonWithHoles(
        exterior=rectangle(0.0, 0.0, 10.0, 10.0),
        interiors=(rectangle(4.0, 4.0, 6.0, 6.0),),
    )
    return PolygonGroup(id="frame", shapes=(shape,), title="Frame")
