"""Default configuration values for tapmap."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

TILE_SIZE: Final[int] = 256
MERCATOR_LAT_BOUND: Final[float] = 85.05112878

# The overlay surface has no tile set of its own, so the zoom range is only
# limited by floating point precision.  At ``MIN_ZOOM`` the world is one tile
# wide and repeats across wider widgets; overlays are drawn and hit-tested on
# the copy centred on the camera only.
MIN_ZOOM: Final[float] = 0.0
MAX_ZOOM: Final[float] = 20.0
DEFAULT_ZOOM: Final[float] = 2.0

# ---------------------------------------------------------------------------
# Overlay rendering
# ---------------------------------------------------------------------------

# Every shape renderer owns a private coordinate space: normalised Mercator
# world units measured from the shape's top-left corner, multiplied by this
# factor.  The value matches the world size at zoom 20 so that containment
# queries keep sub-pixel precision at the deepest zoom level.
RENDERER_LOCAL_SCALE: Final[float] = float(TILE_SIZE * (1 << 20))

# Padding, in widget pixels, applied on all four sides when the viewport fits
# itself to the overlay bounds.
FIT_PADDING_PX: Final[float] = 30.0

DEFAULT_FILL_RGBA: Final[tuple[int, int, int, int]] = (48, 176, 199, 64)
DEFAULT_STROKE_RGBA: Final[tuple[int, int, int, int]] = (48, 176, 199, 255)
DEFAULT_LINE_WIDTH: Final[float] = 1.5

ANNOTATION_DOT_RADIUS: Final[float] = 4.0
ANNOTATION_COLOR: Final[str] = "#30b0c7"
USER_LOCATION_COLOR: Final[str] = "#1e73ff"

# Background colour for each supported display mode.  The overlay surface
# does not draw tiles, so the display mode only changes the canvas tone and
# the default label colour.
DISPLAY_MODE_PALETTES: Final[dict[str, tuple[str, str]]] = {
    "standard": ("#88a8c2", "#2b2b2b"),
    "muted": ("#d9dde2", "#4a4a4a"),
    "satellite": ("#1f2a33", "#f2f2f2"),
    "hybrid": ("#33424d", "#ffffff"),
}
DEFAULT_DISPLAY_MODE: Final[str] = "standard"

# ---------------------------------------------------------------------------
# Interaction
# ---------------------------------------------------------------------------

# A press/release pair that travels less than this many pixels counts as a tap
# rather than the start of a pan gesture.
TAP_SLOP_PX: Final[float] = 6.0
# One wheel notch reports 120 units of angle delta.
WHEEL_ZOOM_STEP: Final[float] = 0.5 / 120.0
ROTATION_DEGREES_PER_PX: Final[float] = 0.5
