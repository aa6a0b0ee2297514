"""Mutually exclusive background layers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from PySide6.QtCore import QObject, Signal

from ..config import (
    API_KEY_PLACEHOLDER,
    EMPTY_BASE_LAYER_TYPE,
    TILE_SIZE,
    WEB_MERCATOR,
    WEB_MERCATOR_ORIGIN,
    WEB_MERCATOR_WIDTH,
)
from ..errors import MissingLayerFieldError
from ..models.config import BaseLayerConfig
from ..models.sources import (
    BingSource,
    ImageWMSSource,
    LayerSourceSpec,
    TileGrid,
    WMTSSource,
    XYZSource,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BaseLayer:
    """A base render layer tagged with its configured name and title."""

    name: str
    title: Optional[str]
    source: LayerSourceSpec
    visible: bool = False

    @property
    def crs(self) -> Optional[str]:
        return self.source.crs


def _require(config: BaseLayerConfig, field_name: str) -> object:
    value = getattr(config, field_name)
    if value is None:
        raise MissingLayerFieldError(config.name, field_name)
    return value


def _xyz_source(config: BaseLayerConfig) -> LayerSourceSpec:
    return XYZSource(
        url=_require(config, "url"),
        crs=config.crs or WEB_MERCATOR,
        min_zoom=0,
        max_zoom=config.num_zoom_levels,
    )


def _wms_source(config: BaseLayerConfig) -> LayerSourceSpec:
    return ImageWMSSource(
        url=_require(config, "url"),
        crs=config.crs,
        params={"LAYERS": _require(config, "layer"), "FORMAT": config.format},
    )


def web_mercator_tile_grid(zoom_levels: int) -> TileGrid:
    """Return the standard Web Mercator pyramid with *zoom_levels* levels."""

    max_resolution = WEB_MERCATOR_WIDTH / TILE_SIZE
    return TileGrid(
        origin=WEB_MERCATOR_ORIGIN,
        resolutions=tuple(max_resolution / 2 ** level for level in range(zoom_levels)),
        matrix_ids=tuple(str(level) for level in range(zoom_levels)),
        tile_size=TILE_SIZE,
    )


def _wmts_source(config: BaseLayerConfig) -> LayerSourceSpec:
    url = _require(config, "url")
    if config.key and API_KEY_PLACEHOLDER in url:
        url = url.replace(API_KEY_PLACEHOLDER, config.key)
    return WMTSSource(
        url=url,
        layer=_require(config, "layer"),
        matrix_set=_require(config, "matrix_set"),
        format=config.format or "image/png",
        crs=config.crs or WEB_MERCATOR,
        tile_grid=web_mercator_tile_grid(_require(config, "num_zoom_levels")),
        style=config.style or "",
    )


def _bing_source(config: BaseLayerConfig) -> LayerSourceSpec:
    return BingSource(
        key=_require(config, "key"),
        imagery_set=_require(config, "imagery_set"),
    )


_SOURCE_FACTORIES: dict[str, Callable[[BaseLayerConfig], LayerSourceSpec]] = {
    "xyz": _xyz_source,
    "wms": _wms_source,
    "wmts": _wmts_source,
    "bing": _bing_source,
}


class BaseLayerSet(QObject):
    """Ordered base layers of which at most one is visible.

    ``changed`` fires once per selection, however many layers flipped.
    """

    changed = Signal()

    def __init__(
        self,
        layers: Iterable[BaseLayer] = (),
        *,
        has_empty_base_layer: bool = False,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._layers: list[BaseLayer] = list(layers)
        self._has_empty_base_layer = has_empty_base_layer

    @classmethod
    def from_configs(
        cls,
        configs: Iterable[BaseLayerConfig],
        startup_name: Optional[str] = None,
        parent: QObject | None = None,
    ) -> "BaseLayerSet":
        """Build the set from the ordered base layer configuration.

        Entries of an unsupported type or lacking a field their source needs
        are left out; the remaining base layers are still usable.
        """

        layers: list[BaseLayer] = []
        has_empty = False
        for config in configs:
            if config.type == EMPTY_BASE_LAYER_TYPE:
                has_empty = True
                continue
            factory = _SOURCE_FACTORIES.get(config.type)
            if factory is None:
                _LOGGER.debug("Skipping base layer %s with unsupported type %s", config.name, config.type)
                continue
            try:
                source = factory(config)
            except MissingLayerFieldError as exc:
                _LOGGER.warning("Skipping base layer %s: %s", config.name, exc)
                continue
            layers.append(
                BaseLayer(
                    name=config.name,
                    title=config.title,
                    source=source,
                    visible=config.name == startup_name,
                )
            )
        return cls(layers, has_empty_base_layer=has_empty, parent=parent)

    # ------------------------------------------------------------------
    @property
    def has_empty_base_layer(self) -> bool:
        return self._has_empty_base_layer

    @property
    def layers(self) -> list[BaseLayer]:
        return list(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self):
        return iter(list(self._layers))

    def get(self, name: str) -> Optional[BaseLayer]:
        for layer in self._layers:
            if layer.name == name:
                return layer
        return None

    def active(self) -> Optional[BaseLayer]:
        """Return the visible base layer, if any."""

        for layer in self._layers:
            if layer.visible:
                return layer
        return None

    def select(self, name: Optional[str]) -> Optional[BaseLayer]:
        """Show the layer called *name* and hide every other one.

        An unknown name (the "empty" base layer for instance) simply hides
        everything.  Returns the selected layer.
        """

        selected = None
        for layer in self._layers:
            if layer.name == name and selected is None:
                selected = layer
                layer.visible = True
            else:
                layer.visible = False
        self.changed.emit()
        return selected


__all__ = ["BaseLayer", "BaseLayerSet", "web_mercator_tile_grid"]
