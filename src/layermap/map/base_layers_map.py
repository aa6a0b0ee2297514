"""Top level map object tying the view, base layers and overlay tree together."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import BASE_LAYER_SELECTION_TYPE
from ..events import (
    BaseLayerChangedEvent,
    BaseLayersChangedEvent,
    EventBus,
    OverlayVisibilityChangedEvent,
    SwitcherItemSelectedEvent,
)
from ..geo.capabilities import WMTSCapabilities
from ..geo.projection import same_crs
from ..layers.base_layers import BaseLayer, BaseLayerSet
from ..layers.builder import build_overlay_tree
from ..layers.nodes import GroupNode, LayerNode, Node
from ..layers.overlay_tree import OverlayTree
from ..models.config import ProjectConfig
from .view import MapView

_LOGGER = logging.getLogger(__name__)


class BaseLayersMap:
    """Build every layer of a project and expose the hooks collaborators use.

    Parameters
    ----------
    config:
        Parsed project configuration.
    event_bus:
        Bus receiving the outbound notifications.  A private bus is created
        when omitted.
    details_panel_visible:
        Probe telling whether the layer details panel is displayed; when it
        is, switching base layer also announces the selection to it.
    capabilities:
        Already parsed WMTS capabilities, overriding the raw document stored
        in *config*.
    """

    def __init__(
        self,
        config: ProjectConfig,
        *,
        event_bus: EventBus | None = None,
        details_panel_visible: Callable[[], bool] | None = None,
        capabilities: WMTSCapabilities | None = None,
    ) -> None:
        self._config = config
        self._events = event_bus or EventBus()
        self._details_panel_visible = details_panel_visible or (lambda: False)

        self._view = MapView(
            projection=config.projection,
            restricted_extent=config.restricted_extent,
            center=config.center,
            zoom=config.zoom,
            resolutions=config.resolutions,
        )

        self._base_layers = BaseLayerSet.from_configs(config.base_layers, config.startup_base_layer)
        active = self._base_layers.active()
        if active is not None and not self._shares_projection(active):
            self._view.widen_to_restricted_extent()
        self._base_layers.changed.connect(self._on_base_layers_changed)

        self._overlay_tree = build_overlay_tree(
            config.layers_tree,
            config.layers,
            projection=config.projection,
            service_url=config.service_url,
            capabilities=capabilities if capabilities is not None else config.wmts_capabilities,
        )
        self._overlay_tree.visibilityChanged.connect(self._on_overlay_visibility_changed)

        _LOGGER.info(
            "Map ready: %d base layers, %d overlay nodes",
            len(self._base_layers),
            len(self._overlay_tree),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def view(self) -> MapView:
        return self._view

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def has_empty_base_layer(self) -> bool:
        return self._base_layers.has_empty_base_layer

    @property
    def base_layers_group(self) -> BaseLayerSet:
        return self._base_layers

    @property
    def overlay_layers_group(self) -> GroupNode:
        return self._overlay_tree.root

    @property
    def overlay_tree(self) -> OverlayTree:
        return self._overlay_tree

    @property
    def overlay_layers(self) -> list[LayerNode]:
        return self._overlay_tree.layers

    @property
    def overlay_layers_and_groups(self) -> list[Node]:
        return self._overlay_tree.layers_and_groups

    # ------------------------------------------------------------------
    # Base layers
    # ------------------------------------------------------------------
    def change_base_layer(self, name: Optional[str]) -> Optional[BaseLayer]:
        """Show base layer *name*, hide the others and adjust the view extent."""

        selected = self._base_layers.select(name)

        # A base layer in another CRS is reprojected on the fly; the view
        # needs the project extent to do that correctly.
        if selected is not None and self._shares_projection(selected):
            self._view.reset_navigation_extent()
        else:
            self._view.widen_to_restricted_extent()

        self._events.publish(BaseLayerChangedEvent(name=name or ""))
        if self._details_panel_visible():
            self._events.publish(
                SwitcherItemSelectedEvent(name=name or "", type=BASE_LAYER_SELECTION_TYPE, selected=True)
            )
        return selected

    def get_active_base_layer(self) -> Optional[BaseLayer]:
        return self._base_layers.active()

    # ------------------------------------------------------------------
    # Overlays
    # ------------------------------------------------------------------
    def get_layer_by_name(self, name: str) -> Optional[LayerNode]:
        return self._overlay_tree.get_layer_by_name(name)

    def get_layer_or_group_by_name(self, name: str) -> Optional[Node]:
        return self._overlay_tree.get_layer_or_group_by_name(name)

    def get_layer_by_type_name(self, type_name: str) -> Optional[LayerNode]:
        return self._overlay_tree.get_layer_by_type_name(type_name)

    def set_layer_visibility(self, name: str, visible: bool) -> bool:
        return self._overlay_tree.set_visible(name, visible)

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------
    def sync_view(self, center: tuple[float, float], zoom: int) -> None:
        """Align the view with the camera of the hosting viewer."""

        self._view.move_to(center, zoom)

    # ------------------------------------------------------------------
    def _shares_projection(self, layer: BaseLayer) -> bool:
        # Sources without an explicit CRS are requested in the view projection.
        return layer.crs is None or same_crs(layer.crs, self._config.projection)

    def _on_base_layers_changed(self) -> None:
        self._events.publish(BaseLayersChangedEvent())

    def _on_overlay_visibility_changed(self, changes: dict) -> None:
        self._events.publish(OverlayVisibilityChangedEvent(changes=dict(changes)))


__all__ = ["BaseLayersMap"]
