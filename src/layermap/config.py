"""Default configuration values for layermap."""

from __future__ import annotations

from typing import Final

# Name of the synthetic group that wraps the configured layer tree.  It is
# never indexed nor exposed as a real node.
ROOT_GROUP_NAME: Final[str] = "root"

# Geometry types that mark a layer as non-spatial (tables, empty layers).
NO_GEOMETRY_TYPES: Final[frozenset[str]] = frozenset({"", "none", "unknown"})

# Scale denominators used by the project configuration to say "no bound".
UNBOUNDED_MIN_SCALE: Final[float] = 1
UNBOUNDED_MAX_SCALE: Final[float] = 1_000_000_000_000

DOTS_PER_INCH: Final[int] = 96
INCHES_PER_METER: Final[float] = 1000 / 25.4

# ---------------------------------------------------------------------------
# Base layer tile grids
# ---------------------------------------------------------------------------

TILE_SIZE: Final[int] = 256
WEB_MERCATOR: Final[str] = "EPSG:3857"
WEB_MERCATOR_ORIGIN: Final[tuple[float, float]] = (-20037508, 20037508)
WEB_MERCATOR_WIDTH: Final[float] = 2 * 20037508.342789244

# ``{key}`` placeholders in WMTS base layer URLs are replaced by the API key.
API_KEY_PLACEHOLDER: Final[str] = "{key}"

# Request parameters for overlay layers served by the project WMS.
WMS_SERVER_TYPE: Final[str] = "qgis"
WMS_DPI: Final[int] = 96

EMPTY_BASE_LAYER_TYPE: Final[str] = "empty"
BASE_LAYER_SELECTION_TYPE: Final[str] = "baselayer"
