"""Structured records for the parsed project configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..config import ROOT_GROUP_NAME

Extent = tuple[float, float, float, float]


def parse_flag(value: object) -> bool:
    """Return ``True`` for the ``"True"`` string flags used by project files."""

    if isinstance(value, bool):
        return value
    return value == "True"


def _optional_float(value: object) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)  # type: ignore[arg-type]


def _optional_extent(value: object) -> Optional[Extent]:
    if value is None:
        return None
    values = tuple(float(item) for item in value)  # type: ignore[union-attr]
    if len(values) != 4:
        raise ValueError(f"An extent needs four values, got {len(values)}")
    return values  # type: ignore[return-value]


@dataclass(slots=True)
class LayerTreeConfig:
    """One node of the configured layer hierarchy."""

    type: str
    name: str
    children: list["LayerTreeConfig"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LayerTreeConfig":
        return cls(
            type=payload["type"],
            name=payload["name"],
            children=[cls.from_dict(child) for child in payload.get("children", [])],
        )

    @classmethod
    def empty_root(cls) -> "LayerTreeConfig":
        return cls(type="group", name=ROOT_GROUP_NAME)


@dataclass(frozen=True, slots=True)
class LayerMetadata:
    """Per-name flags and layer settings from the project side table.

    Every field is optional here: which ones are required depends on the
    kind of node and is enforced by the tree builder.
    """

    name: str
    type: Optional[str] = None
    title: Optional[str] = None
    geometry_type: Optional[str] = None
    toggled: bool = False
    mutually_exclusive: bool = False
    group_as_layer: bool = False
    cached: object = None
    crs: Optional[str] = None
    extent: Optional[Extent] = None
    min_scale: Optional[float] = None
    max_scale: Optional[float] = None
    shortname: Optional[str] = None
    image_format: Optional[str] = None
    style: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, payload: Mapping[str, Any]) -> "LayerMetadata":
        return cls(
            name=payload.get("name", name),
            type=payload.get("type"),
            title=payload.get("title"),
            geometry_type=payload.get("geometryType"),
            toggled=parse_flag(payload.get("toggled")),
            mutually_exclusive=parse_flag(payload.get("mutuallyExclusive")),
            group_as_layer=parse_flag(payload.get("groupAsLayer")),
            cached=payload.get("cached"),
            crs=payload.get("crs"),
            extent=_optional_extent(payload.get("extent")),
            min_scale=_optional_float(payload.get("minScale")),
            max_scale=_optional_float(payload.get("maxScale")),
            shortname=payload.get("shortname") or None,
            image_format=payload.get("imageFormat"),
            style=payload.get("style"),
        )


@dataclass(frozen=True, slots=True)
class BaseLayerConfig:
    """One entry of the ordered base layer list."""

    type: str
    name: str
    title: Optional[str] = None
    url: Optional[str] = None
    crs: Optional[str] = None
    layer: Optional[str] = None
    format: Optional[str] = None
    num_zoom_levels: Optional[int] = None
    matrix_set: Optional[str] = None
    style: Optional[str] = None
    key: Optional[str] = None
    imagery_set: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BaseLayerConfig":
        zoom_levels = payload.get("numZoomLevels")
        return cls(
            type=payload["type"],
            name=payload["name"],
            title=payload.get("title"),
            url=payload.get("url"),
            crs=payload.get("crs"),
            layer=payload.get("layer"),
            format=payload.get("format"),
            num_zoom_levels=None if zoom_levels is None else int(zoom_levels),
            matrix_set=payload.get("matrixSet"),
            style=payload.get("style"),
            key=payload.get("key"),
            imagery_set=payload.get("imagerySet"),
        )


@dataclass(slots=True)
class ProjectConfig:
    """Everything needed to build the map at startup."""

    projection: str
    restricted_extent: Extent
    center: tuple[float, float]
    zoom: int = 0
    resolutions: tuple[float, ...] = ()
    service_url: str = ""
    startup_base_layer: Optional[str] = None
    base_layers: list[BaseLayerConfig] = field(default_factory=list)
    layers_tree: LayerTreeConfig = field(default_factory=LayerTreeConfig.empty_root)
    layers: dict[str, LayerMetadata] = field(default_factory=dict)
    wmts_capabilities: Optional[str] = None
    repository: str = ""
    project: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProjectConfig":
        """Build a configuration from an already validated JSON payload."""

        tree = payload.get("layersTree")
        center = payload["center"]
        return cls(
            projection=payload["projection"],
            restricted_extent=_optional_extent(payload["restrictedExtent"]),  # type: ignore[arg-type]
            center=(float(center[0]), float(center[1])),
            zoom=int(payload.get("zoom", 0)),
            resolutions=tuple(float(value) for value in payload.get("resolutions", [])),
            service_url=payload.get("serviceUrl", ""),
            startup_base_layer=payload.get("startupBaselayer"),
            base_layers=[BaseLayerConfig.from_dict(item) for item in payload.get("baseLayers", [])],
            layers_tree=LayerTreeConfig.from_dict(tree) if tree else LayerTreeConfig.empty_root(),
            layers={
                name: LayerMetadata.from_dict(name, item)
                for name, item in payload.get("layers", {}).items()
            },
            wmts_capabilities=payload.get("wmtsCapabilities"),
            repository=payload.get("repository", ""),
            project=payload.get("project", ""),
        )


__all__ = [
    "BaseLayerConfig",
    "Extent",
    "LayerMetadata",
    "LayerTreeConfig",
    "ProjectConfig",
    "parse_flag",
]
