"""Turn the configured layer hierarchy into overlay tree nodes."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..config import (
    NO_GEOMETRY_TYPES,
    ROOT_GROUP_NAME,
    UNBOUNDED_MAX_SCALE,
    UNBOUNDED_MIN_SCALE,
    WMS_DPI,
    WMS_SERVER_TYPE,
)
from ..errors import CapabilitiesUnavailableError, ConfigurationError, MissingLayerFieldError
from ..geo.capabilities import WMTSCapabilities
from ..geo.projection import resolution_from_scale, same_crs, transform_extent
from ..models.config import LayerMetadata, LayerTreeConfig
from ..models.sources import ImageWMSSource, LayerSourceSpec
from .nodes import GroupNode, LayerNode, Node
from .overlay_tree import OverlayTree

_LOGGER = logging.getLogger(__name__)

_NOT_CACHED = object()


def _cached_flag(value: object) -> object:
    """Return ``True``/``False`` for known cache flags, a sentinel otherwise."""

    if value is True or value == "True":
        return True
    if value is False or value == "False":
        return False
    return _NOT_CACHED


class TreeBuilder:
    """Build an :class:`OverlayTree` from the project layer configuration.

    Parameters
    ----------
    metadata:
        Per-name layer and group settings.
    projection:
        Working projection of the map; layer extents are reprojected into it.
    service_url:
        Endpoint of the project WMS used by layers that are not cached.
    capabilities:
        Pre-fetched WMTS capabilities, either raw XML or already parsed.
        Required as soon as one cached layer is configured.
    """

    def __init__(
        self,
        metadata: Mapping[str, LayerMetadata],
        *,
        projection: str,
        service_url: str = "",
        capabilities: WMTSCapabilities | str | bytes | None = None,
    ) -> None:
        self._metadata = metadata
        self._projection = projection
        self._service_url = service_url
        self._raw_capabilities = capabilities
        self._capabilities: Optional[WMTSCapabilities] = (
            capabilities if isinstance(capabilities, WMTSCapabilities) else None
        )
        self._nodes: list[Node] = []
        self._names: set[str] = set()

    # ------------------------------------------------------------------
    def build(self, config_root: LayerTreeConfig) -> OverlayTree:
        """Return the overlay tree described by *config_root*."""

        self._nodes = []
        self._names = set()
        if config_root.children:
            root = self._build_group(config_root, None)
        else:
            root = GroupNode(name=ROOT_GROUP_NAME, visible=True)
        tree = OverlayTree(root, self._nodes)
        tree.enforce_invariants()
        _LOGGER.debug("Built overlay tree with %d nodes", len(self._nodes))
        return tree

    def _build_node(self, config: LayerTreeConfig, parent_name: Optional[str]) -> Optional[Node]:
        if config.type == "group":
            return self._build_group(config, parent_name)
        if config.type == "layer":
            return self._build_layer(config, parent_name)
        _LOGGER.warning("Skipping node %s with unknown type %s", config.name, config.type)
        return None

    def _build_group(self, config: LayerTreeConfig, parent_name: Optional[str]) -> GroupNode:
        # Reversed so that the first configured child is painted last, on top.
        children = []
        for child_config in reversed(config.children):
            child = self._build_node(child_config, config.name)
            if child is not None:
                children.append(child)

        if config.name == ROOT_GROUP_NAME:
            return GroupNode(name=config.name, children=children, visible=True)

        metadata = self._metadata.get(config.name)
        group = GroupNode(
            name=config.name,
            parent_name=parent_name,
            children=children,
            visible=metadata.toggled if metadata else False,
            mutually_exclusive=metadata.mutually_exclusive if metadata else False,
            group_as_layer=metadata.group_as_layer if metadata else False,
        )
        self._register(group)
        return group

    def _build_layer(self, config: LayerTreeConfig, parent_name: Optional[str]) -> Optional[LayerNode]:
        metadata = self._metadata.get(config.name)
        if metadata is None or metadata.type != "layer":
            _LOGGER.debug("Skipping %s: no layer metadata", config.name)
            return None
        if (metadata.geometry_type or "") in NO_GEOMETRY_TYPES:
            _LOGGER.debug("Skipping %s: geometry type %r", config.name, metadata.geometry_type)
            return None

        for field_name in ("crs", "extent", "min_scale", "max_scale", "cached"):
            if getattr(metadata, field_name) is None:
                raise MissingLayerFieldError(metadata.name, field_name)

        cached = _cached_flag(metadata.cached)
        if cached is _NOT_CACHED:
            _LOGGER.warning("Skipping %s: unrecognized cache flag %r", metadata.name, metadata.cached)
            return None

        source = self._wmts_source(metadata) if cached else self._wms_source(metadata)

        extent = metadata.extent
        if metadata.crs and not same_crs(metadata.crs, self._projection):
            extent = transform_extent(extent, metadata.crs, self._projection)

        parent = self._metadata.get(parent_name) if parent_name else None
        layer = LayerNode(
            name=metadata.name,
            parent_name=parent_name,
            title=metadata.title,
            source=source,
            extent=extent,
            min_resolution=(
                None if metadata.min_scale == UNBOUNDED_MIN_SCALE
                else resolution_from_scale(metadata.min_scale)
            ),
            max_resolution=(
                None if metadata.max_scale == UNBOUNDED_MAX_SCALE
                else resolution_from_scale(metadata.max_scale)
            ),
            # Layers of a group acting as a single layer are always shown,
            # the group toggle decides.
            visible=True if parent is not None and parent.group_as_layer else metadata.toggled,
        )
        self._register(layer)
        return layer

    # ------------------------------------------------------------------
    def _wms_source(self, metadata: LayerMetadata) -> LayerSourceSpec:
        if metadata.image_format is None:
            raise MissingLayerFieldError(metadata.name, "image_format")
        return ImageWMSSource(
            url=self._service_url,
            crs=None,
            server_type=WMS_SERVER_TYPE,
            params={
                "LAYERS": metadata.shortname or metadata.name,
                "FORMAT": metadata.image_format,
                "DPI": WMS_DPI,
            },
        )

    def _wmts_source(self, metadata: LayerMetadata) -> LayerSourceSpec:
        return self._parsed_capabilities().source_options(
            metadata.shortname or metadata.name,
            metadata.crs,
        )

    def _parsed_capabilities(self) -> WMTSCapabilities:
        if self._capabilities is None:
            if not self._raw_capabilities:
                raise CapabilitiesUnavailableError(
                    "Cached layers need the WMTS capabilities document at construction time"
                )
            self._capabilities = WMTSCapabilities.parse(self._raw_capabilities)
        return self._capabilities

    def _register(self, node: Node) -> None:
        if node.name in self._names:
            raise ConfigurationError(f"Duplicate layer or group name '{node.name}'")
        self._names.add(node.name)
        self._nodes.append(node)


def build_overlay_tree(
    config_root: LayerTreeConfig,
    metadata: Mapping[str, LayerMetadata],
    *,
    projection: str,
    service_url: str = "",
    capabilities: WMTSCapabilities | str | bytes | None = None,
) -> OverlayTree:
    """Convenience wrapper around :class:`TreeBuilder`."""

    builder = TreeBuilder(
        metadata,
        projection=projection,
        service_url=service_url,
        capabilities=capabilities,
    )
    return builder.build(config_root)


__all__ = ["TreeBuilder", "build_overlay_tree"]
