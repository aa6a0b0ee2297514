import json
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
DATA = Path(__file__).resolve().parent / "data"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

RESTRICTED_EXTENT = [200000.0, 6000000.0, 300000.0, 6100000.0]


def _layer(name: str, **overrides):
    payload = {
        "name": name,
        "type": "layer",
        "geometryType": "polygon",
        "toggled": "False",
        "cached": "False",
        "crs": "EPSG:3857",
        "extent": [210000.0, 6010000.0, 290000.0, 6090000.0],
        "minScale": 1,
        "maxScale": 1000000000000,
        "imageFormat": "image/png",
    }
    payload.update(overrides)
    return payload


def _group(name: str, **overrides):
    payload = {"name": name, "type": "group", "toggled": "False"}
    payload.update(overrides)
    return payload


@pytest.fixture(scope="session")
def qapp():
    pytest.importorskip("PySide6", reason="PySide6 is required for layer tests", exc_type=ImportError)
    from PySide6.QtCore import QCoreApplication

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture()
def capabilities_xml() -> str:
    return (DATA / "wmts_capabilities.xml").read_text(encoding="utf-8")


@pytest.fixture()
def project_payload(capabilities_xml: str) -> dict:
    """A project exercising every node kind and base layer type."""

    return {
        "projection": "EPSG:3857",
        "restrictedExtent": list(RESTRICTED_EXTENT),
        "center": [250000.0, 6050000.0],
        "zoom": 2,
        "resolutions": [156.54, 78.27, 39.13, 19.56, 9.78],
        "serviceUrl": "https://maps.example.org/index.php/lizmap/service",
        "repository": "demo",
        "project": "city",
        "startupBaselayer": "osm-mapnik",
        "wmtsCapabilities": capabilities_xml,
        "baseLayers": [
            {
                "type": "xyz",
                "name": "osm-mapnik",
                "title": "OpenStreetMap",
                "url": "https://tile.openstreetmap.org/{z}/{x}/{y}.png",
                "crs": "EPSG:3857",
                "numZoomLevels": 19,
            },
            {
                "type": "wmts",
                "name": "ign-plan",
                "title": "IGN Plan",
                "url": "https://wxs.example.org/{key}/geoportail/wmts",
                "crs": "EPSG:3857",
                "layer": "PLAN",
                "format": "image/png",
                "matrixSet": "PM",
                "style": "normal",
                "numZoomLevels": 20,
                "key": "secret",
            },
            {
                "type": "wms",
                "name": "ortho",
                "title": "Orthophoto",
                "url": "https://ortho.example.org/wms",
                "crs": "EPSG:2154",
                "layer": "ORTHO",
                "format": "image/jpeg",
            },
            {
                "type": "bing",
                "name": "bing-road",
                "title": "Bing Road",
                "key": "bingkey",
                "imagerySet": "RoadOnDemand",
            },
            {"type": "empty", "name": "empty", "title": "No base layer"},
            {"type": "google", "name": "google-sat", "title": "Unsupported"},
        ],
        "layersTree": {
            "type": "group",
            "name": "root",
            "children": [
                {
                    "type": "group",
                    "name": "Transport",
                    "children": [
                        {"type": "layer", "name": "roads"},
                        {"type": "layer", "name": "railways"},
                    ],
                },
                {
                    "type": "group",
                    "name": "Buildings",
                    "children": [
                        {"type": "layer", "name": "walls"},
                        {"type": "layer", "name": "roofs"},
                    ],
                },
                {
                    "type": "group",
                    "name": "Hydro",
                    "children": [
                        {
                            "type": "group",
                            "name": "Rivers",
                            "children": [{"type": "layer", "name": "streams"}],
                        }
                    ],
                },
                {"type": "layer", "name": "table_only"},
                {"type": "layer", "name": "tiles"},
                {"type": "layer", "name": "no_meta"},
            ],
        },
        "layers": {
            "Transport": _group("Transport", toggled="True", mutuallyExclusive="True"),
            "roads": _layer("roads", toggled="True", shortname="roads_sn"),
            "railways": _layer("railways", minScale=1000, maxScale=50000),
            "Buildings": _group("Buildings", groupAsLayer="True"),
            "walls": _layer("walls"),
            "roofs": _layer("roofs"),
            "Hydro": _group("Hydro"),
            "streams": _layer("streams", crs="EPSG:4326", extent=[0.0, 0.0, 1.0, 1.0]),
            "table_only": _layer("table_only", geometryType="none"),
            "tiles": _layer("tiles", cached="True", shortname="cached_tiles"),
        },
    }


@pytest.fixture()
def project_file(tmp_path: Path, project_payload: dict) -> Path:
    path = tmp_path / "project.json"
    path.write_text(json.dumps(project_payload), encoding="utf-8")
    return path
