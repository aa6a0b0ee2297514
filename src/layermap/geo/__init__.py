"""Geometry, projection and OGC capabilities helpers."""

from .capabilities import WMTSCapabilities, tile_grid_for
from .projection import projection_extent, resolution_from_scale, same_crs, transform_extent

__all__ = [
    "WMTSCapabilities",
    "projection_extent",
    "resolution_from_scale",
    "same_crs",
    "tile_grid_for",
    "transform_extent",
]
