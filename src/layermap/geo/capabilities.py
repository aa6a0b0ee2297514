"""Read WMTS GetCapabilities documents and derive tile source options.

Only the parts of the document needed to address tiles are extracted: the
GetTile endpoints, the advertised layers (identifier, formats, styles, tile
matrix set links and REST templates) and the tile matrix sets themselves.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional
import xml.etree.ElementTree as ET

from pyproj import CRS
from pyproj.exceptions import CRSError

from ..errors import CapabilitiesParseError, CapabilitiesUnavailableError
from ..models.sources import TileGrid, WMTSSource
from .projection import normalise_crs_code, same_crs

_LOGGER = logging.getLogger(__name__)

_NS = {
    "wmts": "http://www.opengis.net/wmts/1.0",
    "ows": "http://www.opengis.net/ows/1.1",
    "xlink": "http://www.w3.org/1999/xlink",
}
_XLINK_HREF = "{http://www.w3.org/1999/xlink}href"

# OGC "standardized rendering pixel size" of 0.28 mm.
_PIXEL_SIZE_METERS = 0.28e-3
_METERS_PER_DEGREE = 2 * math.pi * 6370997 / 360


@dataclass(frozen=True)
class TileMatrix:
    identifier: str
    scale_denominator: float
    top_left_corner: tuple[float, float]
    tile_width: int
    tile_height: int
    matrix_width: int
    matrix_height: int


@dataclass(frozen=True)
class TileMatrixSet:
    identifier: str
    crs: str
    matrices: tuple[TileMatrix, ...]


@dataclass(frozen=True)
class CapabilitiesLayer:
    identifier: str
    formats: tuple[str, ...] = ()
    styles: tuple[str, ...] = ()
    default_style: Optional[str] = None
    matrix_set_links: tuple[str, ...] = ()
    resource_templates: dict[str, str] = field(default_factory=dict)


def crs_from_urn(value: str) -> str:
    """Return ``EPSG:3857`` for ``urn:ogc:def:crs:EPSG::3857`` style values."""

    text = value.strip()
    if text.lower().startswith("urn:"):
        parts = text.split(":")
        if len(parts) >= 6:
            return normalise_crs_code(f"{parts[4]}:{parts[-1]}")
    return normalise_crs_code(text)


def _text(element: ET.Element, path: str) -> Optional[str]:
    found = element.find(path, _NS)
    if found is None or found.text is None:
        return None
    return found.text.strip()


def _required_text(element: ET.Element, path: str) -> str:
    value = _text(element, path)
    if value is None:
        raise CapabilitiesParseError(f"Missing element '{path}' in WMTS capabilities")
    return value


def _parse_matrix(element: ET.Element) -> TileMatrix:
    try:
        corner = tuple(float(part) for part in _required_text(element, "wmts:TopLeftCorner").split())
        return TileMatrix(
            identifier=_required_text(element, "ows:Identifier"),
            scale_denominator=float(_required_text(element, "wmts:ScaleDenominator")),
            top_left_corner=(corner[0], corner[1]),
            tile_width=int(_required_text(element, "wmts:TileWidth")),
            tile_height=int(_required_text(element, "wmts:TileHeight")),
            matrix_width=int(_required_text(element, "wmts:MatrixWidth")),
            matrix_height=int(_required_text(element, "wmts:MatrixHeight")),
        )
    except (IndexError, ValueError) as exc:
        raise CapabilitiesParseError(f"Invalid TileMatrix definition: {exc}") from exc


def _parse_layer(element: ET.Element) -> CapabilitiesLayer:
    styles: list[str] = []
    default_style = None
    for style in element.findall("wmts:Style", _NS):
        identifier = _text(style, "ows:Identifier")
        if identifier is None:
            continue
        styles.append(identifier)
        if style.get("isDefault", "").lower() == "true":
            default_style = identifier

    templates = {}
    for resource in element.findall("wmts:ResourceURL", _NS):
        if resource.get("resourceType") == "tile" and resource.get("template"):
            templates[resource.get("format", "")] = resource.get("template")

    return CapabilitiesLayer(
        identifier=_required_text(element, "ows:Identifier"),
        formats=tuple(item.text.strip() for item in element.findall("wmts:Format", _NS) if item.text),
        styles=tuple(styles),
        default_style=default_style,
        matrix_set_links=tuple(
            link.text.strip()
            for link in element.findall("wmts:TileMatrixSetLink/wmts:TileMatrixSet", _NS)
            if link.text
        ),
        resource_templates=templates,
    )


class WMTSCapabilities:
    """Parsed view over a WMTS ``GetCapabilities`` response."""

    def __init__(
        self,
        layers: dict[str, CapabilitiesLayer],
        matrix_sets: dict[str, TileMatrixSet],
        kvp_url: Optional[str] = None,
    ) -> None:
        self.layers = layers
        self.matrix_sets = matrix_sets
        self.kvp_url = kvp_url

    @classmethod
    def parse(cls, document: str | bytes) -> "WMTSCapabilities":
        """Parse the XML *document*."""

        try:
            root = ET.fromstring(document)
        except ET.ParseError as exc:
            raise CapabilitiesParseError(f"WMTS capabilities are not valid XML: {exc}") from exc

        contents = root.find("wmts:Contents", _NS)
        if contents is None:
            raise CapabilitiesParseError("WMTS capabilities have no Contents section")

        layers = {}
        for element in contents.findall("wmts:Layer", _NS):
            layer = _parse_layer(element)
            layers[layer.identifier] = layer

        matrix_sets = {}
        for element in contents.findall("wmts:TileMatrixSet", _NS):
            identifier = _required_text(element, "ows:Identifier")
            matrix_sets[identifier] = TileMatrixSet(
                identifier=identifier,
                crs=crs_from_urn(_required_text(element, "ows:SupportedCRS")),
                matrices=tuple(_parse_matrix(item) for item in element.findall("wmts:TileMatrix", _NS)),
            )

        return cls(layers, matrix_sets, cls._find_kvp_url(root))

    @staticmethod
    def _find_kvp_url(root: ET.Element) -> Optional[str]:
        for operation in root.findall("ows:OperationsMetadata/ows:Operation", _NS):
            if operation.get("name") != "GetTile":
                continue
            for get in operation.findall("ows:DCP/ows:HTTP/ows:Get", _NS):
                encodings = [value.text for value in get.findall(".//ows:AllowedValues/ows:Value", _NS)]
                if encodings and "KVP" not in encodings:
                    continue
                href = get.get(_XLINK_HREF)
                if href:
                    return href
        return None

    # ------------------------------------------------------------------
    def _resolve_matrix_set(self, layer: CapabilitiesLayer, matrix_set: str) -> TileMatrixSet:
        for identifier in layer.matrix_set_links:
            if identifier == matrix_set and identifier in self.matrix_sets:
                return self.matrix_sets[identifier]
        # Fall back to a linked matrix set advertised in the requested CRS.
        for identifier in layer.matrix_set_links:
            candidate = self.matrix_sets.get(identifier)
            if candidate is not None and same_crs(candidate.crs, matrix_set):
                return candidate
        raise CapabilitiesUnavailableError(
            f"Layer '{layer.identifier}' has no tile matrix set matching '{matrix_set}'"
        )

    def source_options(self, layer: str, matrix_set: str) -> WMTSSource:
        """Return the tile source addressing *layer* through *matrix_set*."""

        capabilities_layer = self.layers.get(layer)
        if capabilities_layer is None:
            raise CapabilitiesUnavailableError(f"Layer '{layer}' is not advertised by the WMTS service")

        tile_matrix_set = self._resolve_matrix_set(capabilities_layer, matrix_set)
        image_format = capabilities_layer.formats[0] if capabilities_layer.formats else "image/png"
        style = capabilities_layer.default_style or (
            capabilities_layer.styles[0] if capabilities_layer.styles else ""
        )

        if self.kvp_url:
            url, encoding = self.kvp_url, "KVP"
        elif capabilities_layer.resource_templates:
            url = capabilities_layer.resource_templates.get(
                image_format, next(iter(capabilities_layer.resource_templates.values()))
            )
            encoding = "REST"
        else:
            raise CapabilitiesUnavailableError(f"No GetTile endpoint is advertised for layer '{layer}'")

        return WMTSSource(
            url=url,
            layer=capabilities_layer.identifier,
            matrix_set=tile_matrix_set.identifier,
            format=image_format,
            crs=tile_matrix_set.crs,
            tile_grid=tile_grid_for(tile_matrix_set),
            style=style,
            request_encoding=encoding,
        )


def _crs_axis_details(code: str) -> tuple[float, bool]:
    """Return meters per unit and whether the first axis points north."""

    try:
        crs = CRS.from_user_input(code)
    except CRSError:
        _LOGGER.warning("Unknown CRS %s in WMTS capabilities, assuming metres", code)
        return 1.0, False
    axes = crs.axis_info
    if not axes:
        return 1.0, False
    first = axes[0]
    if first.unit_name.lower().startswith("degree"):
        meters_per_unit = _METERS_PER_DEGREE
    else:
        meters_per_unit = first.unit_conversion_factor or 1.0
    return meters_per_unit, first.direction.lower() == "north"


def tile_grid_for(matrix_set: TileMatrixSet) -> TileGrid:
    """Build the resolution pyramid described by *matrix_set*."""

    if not matrix_set.matrices:
        raise CapabilitiesParseError(f"Tile matrix set '{matrix_set.identifier}' is empty")

    meters_per_unit, northing_first = _crs_axis_details(matrix_set.crs)
    first = matrix_set.matrices[0]
    origin = first.top_left_corner
    if northing_first:
        origin = (origin[1], origin[0])
    return TileGrid(
        origin=origin,
        resolutions=tuple(
            matrix.scale_denominator * _PIXEL_SIZE_METERS / meters_per_unit
            for matrix in matrix_set.matrices
        ),
        matrix_ids=tuple(matrix.identifier for matrix in matrix_set.matrices),
        tile_size=first.tile_width,
    )


__all__ = [
    "CapabilitiesLayer",
    "TileMatrix",
    "TileMatrixSet",
    "WMTSCapabilities",
    "crs_from_urn",
    "tile_grid_for",
]
