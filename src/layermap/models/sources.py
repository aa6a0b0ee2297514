"""Immutable descriptions of the protocol level sources behind map layers.

The rendering engine owns the actual tile and image fetching.  The classes in
this module only capture what it needs to know: which protocol to speak, the
endpoint, the coordinate reference system and the protocol specific knobs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Union


class SourceType(str, Enum):
    """Protocol types supported for base and overlay layers."""

    XYZ = "xyz"
    WMS = "wms"
    WMTS = "wmts"
    BING = "bing"


@dataclass(frozen=True)
class TileGrid:
    """Resolution pyramid of a tiled matrix set."""

    origin: tuple[float, float]
    resolutions: tuple[float, ...]
    matrix_ids: tuple[str, ...]
    tile_size: int = 256

    def __post_init__(self) -> None:
        if len(self.resolutions) != len(self.matrix_ids):
            raise ValueError("A tile grid needs one matrix id per resolution")


@dataclass(frozen=True)
class XYZSource:
    """URL templated tiles (``{z}/{x}/{y}``)."""

    url: str
    crs: str
    min_zoom: int = 0
    max_zoom: Optional[int] = None

    source_type = SourceType.XYZ

    @property
    def layer_identifier(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class ImageWMSSource:
    """A single image rendered on demand by a WMS server."""

    url: str
    crs: Optional[str]
    params: Mapping[str, object] = field(default_factory=dict)
    server_type: Optional[str] = None

    source_type = SourceType.WMS

    @property
    def layer_identifier(self) -> Optional[str]:
        value = self.params.get("LAYERS")
        return None if value is None else str(value)

    @property
    def format(self) -> Optional[str]:
        value = self.params.get("FORMAT")
        return None if value is None else str(value)


@dataclass(frozen=True)
class WMTSSource:
    """Pre-tiled multi resolution pyramid addressed through a matrix set."""

    url: str
    layer: str
    matrix_set: str
    format: str
    crs: str
    tile_grid: TileGrid
    style: str = ""
    request_encoding: str = "KVP"

    source_type = SourceType.WMTS

    @property
    def layer_identifier(self) -> Optional[str]:
        return self.layer


@dataclass(frozen=True)
class BingSource:
    """Commercial Bing Maps imagery."""

    key: str
    imagery_set: str
    crs: str = "EPSG:3857"

    source_type = SourceType.BING

    @property
    def layer_identifier(self) -> Optional[str]:
        return None


LayerSourceSpec = Union[XYZSource, ImageWMSSource, WMTSSource, BingSource]


__all__ = [
    "BingSource",
    "ImageWMSSource",
    "LayerSourceSpec",
    "SourceType",
    "TileGrid",
    "WMTSSource",
    "XYZSource",
]
