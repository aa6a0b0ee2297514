"""Data models used by layermap."""

from .config import BaseLayerConfig, Extent, LayerMetadata, LayerTreeConfig, ProjectConfig
from .sources import (
    BingSource,
    ImageWMSSource,
    LayerSourceSpec,
    SourceType,
    TileGrid,
    WMTSSource,
    XYZSource,
)

__all__ = [
    "BaseLayerConfig",
    "BingSource",
    "Extent",
    "ImageWMSSource",
    "LayerMetadata",
    "LayerSourceSpec",
    "LayerTreeConfig",
    "ProjectConfig",
    "SourceType",
    "TileGrid",
    "WMTSSource",
    "XYZSource",
]
