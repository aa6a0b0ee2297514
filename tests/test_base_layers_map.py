from __future__ import annotations

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for map tests", exc_type=ImportError)

from layermap.events import (
    BaseLayerChangedEvent,
    BaseLayersChangedEvent,
    EventBus,
    OverlayVisibilityChangedEvent,
    SwitcherItemSelectedEvent,
)
from layermap.geo.projection import projection_extent
from layermap.map import BaseLayersMap
from layermap.models.config import ProjectConfig

RESTRICTED_EXTENT = [200000.0, 6000000.0, 300000.0, 6100000.0]


class _Recorder:
    def __init__(self, bus: EventBus) -> None:
        self.events = []
        for event_type in (
            BaseLayersChangedEvent,
            BaseLayerChangedEvent,
            SwitcherItemSelectedEvent,
            OverlayVisibilityChangedEvent,
        ):
            bus.subscribe(event_type, self.events.append)

    def of(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


def _map(payload: dict, **kwargs) -> BaseLayersMap:
    return BaseLayersMap(ProjectConfig.from_dict(payload), **kwargs)


def test_startup_in_working_projection_keeps_natural_extent(qapp, project_payload) -> None:
    layer_map = _map(project_payload)

    assert layer_map.get_active_base_layer().name == "osm-mapnik"
    assert layer_map.view.navigation_extent == projection_extent("EPSG:3857")


def test_startup_in_other_crs_widens_to_restricted_extent(qapp, project_payload) -> None:
    project_payload["startupBaselayer"] = "ortho"

    layer_map = _map(project_payload)

    assert layer_map.view.navigation_extent == tuple(RESTRICTED_EXTENT)


def test_change_base_layer_switches_and_adjusts_extent(qapp, project_payload) -> None:
    bus = EventBus()
    recorder = _Recorder(bus)
    layer_map = _map(project_payload, event_bus=bus)

    layer_map.change_base_layer("ortho")
    assert layer_map.view.navigation_extent == tuple(RESTRICTED_EXTENT)

    layer_map.change_base_layer("ign-plan")
    assert layer_map.view.navigation_extent == projection_extent("EPSG:3857")

    visible = [layer.name for layer in layer_map.base_layers_group if layer.visible]
    assert visible == ["ign-plan"]
    assert len(recorder.of(BaseLayersChangedEvent)) == 2
    assert [event.name for event in recorder.of(BaseLayerChangedEvent)] == ["ortho", "ign-plan"]
    assert recorder.of(SwitcherItemSelectedEvent) == []


def test_change_to_unknown_base_layer_deselects_all(qapp, project_payload) -> None:
    bus = EventBus()
    recorder = _Recorder(bus)
    layer_map = _map(project_payload, event_bus=bus)

    assert layer_map.change_base_layer("empty") is None

    assert layer_map.get_active_base_layer() is None
    assert layer_map.has_empty_base_layer
    assert layer_map.view.navigation_extent == tuple(RESTRICTED_EXTENT)
    assert [event.name for event in recorder.of(BaseLayerChangedEvent)] == ["empty"]


def test_details_panel_receives_selection(qapp, project_payload) -> None:
    bus = EventBus()
    recorder = _Recorder(bus)
    layer_map = _map(project_payload, event_bus=bus, details_panel_visible=lambda: True)

    layer_map.change_base_layer("bing-road")

    selected = recorder.of(SwitcherItemSelectedEvent)
    assert len(selected) == 1
    assert selected[0].name == "bing-road"
    assert selected[0].type == "baselayer"
    assert selected[0].selected is True


def test_overlay_queries(qapp, project_payload) -> None:
    layer_map = _map(project_payload)

    assert [layer.name for layer in layer_map.overlay_layers] == [
        "tiles",
        "streams",
        "roofs",
        "walls",
        "railways",
        "roads",
    ]
    assert len(layer_map.overlay_layers_and_groups) == 10
    assert layer_map.get_layer_by_name("Transport") is None
    assert layer_map.get_layer_or_group_by_name("Transport").mutually_exclusive
    assert layer_map.get_layer_by_type_name("roads_sn").name == "roads"
    assert layer_map.overlay_layers_group is layer_map.overlay_tree.root


def test_overlay_toggles_are_published(qapp, project_payload) -> None:
    bus = EventBus()
    recorder = _Recorder(bus)
    layer_map = _map(project_payload, event_bus=bus)

    assert layer_map.set_layer_visibility("streams", True)
    assert layer_map.set_layer_visibility("railways", True)
    assert not layer_map.set_layer_visibility("no_meta", True)

    changes = [event.changes for event in recorder.of(OverlayVisibilityChangedEvent)]
    assert changes == [
        {"streams": True, "Rivers": True, "Hydro": True},
        {"railways": True, "roads": False},
    ]


def test_sync_view_clamps_zoom(qapp, project_payload) -> None:
    layer_map = _map(project_payload)

    layer_map.sync_view((251000.0, 6051000.0), 12)

    assert layer_map.view.center == (251000.0, 6051000.0)
    assert layer_map.view.zoom == 4
    assert layer_map.view.resolution == pytest.approx(9.78)


def test_incomplete_base_layer_does_not_block_startup(qapp, project_payload) -> None:
    project_payload["baseLayers"].append(
        {
            "type": "wmts",
            "name": "partial",
            "url": "https://wmts.example.org/wmts",
            "layer": "PARTIAL",
            "matrixSet": "PM",
        }
    )

    layer_map = _map(project_payload)

    assert layer_map.get_active_base_layer().name == "osm-mapnik"
    assert layer_map.base_layers_group.get("partial") is None
    assert layer_map.change_base_layer("partial") is None
