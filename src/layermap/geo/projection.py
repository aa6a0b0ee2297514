"""Projection helpers backed by :mod:`pyproj`."""

from __future__ import annotations

from functools import lru_cache

from pyproj import CRS, Transformer

from ..config import DOTS_PER_INCH, INCHES_PER_METER, WEB_MERCATOR, WEB_MERCATOR_WIDTH
from ..models.config import Extent

# Natural extents that differ from the CRS area of use.  Web Mercator is the
# square world used by every tile grid rather than the +/-85.06 degree band.
_KNOWN_EXTENTS: dict[str, Extent] = {
    WEB_MERCATOR: (
        -WEB_MERCATOR_WIDTH / 2,
        -WEB_MERCATOR_WIDTH / 2,
        WEB_MERCATOR_WIDTH / 2,
        WEB_MERCATOR_WIDTH / 2,
    ),
    "EPSG:4326": (-180.0, -90.0, 180.0, 90.0),
}


def normalise_crs_code(code: str | None) -> str:
    """Return *code* in the ``AUTHORITY:CODE`` upper case form."""

    return (code or "").strip().upper()


def same_crs(first: str | None, second: str | None) -> bool:
    """Return ``True`` when both codes name the same reference system."""

    return normalise_crs_code(first) == normalise_crs_code(second)


@lru_cache(maxsize=32)
def _transformer(source: str, target: str) -> Transformer:
    return Transformer.from_crs(CRS.from_user_input(source), CRS.from_user_input(target), always_xy=True)


def transform_extent(extent: Extent, source: str, target: str) -> Extent:
    """Reproject *extent* from *source* to *target*, densifying the edges."""

    if same_crs(source, target):
        return extent
    min_x, min_y, max_x, max_y = _transformer(
        normalise_crs_code(source), normalise_crs_code(target)
    ).transform_bounds(*extent)
    return (min_x, min_y, max_x, max_y)


@lru_cache(maxsize=32)
def projection_extent(code: str) -> Extent:
    """Return the natural extent of the projection *code* in its own units."""

    normalised = normalise_crs_code(code)
    known = _KNOWN_EXTENTS.get(normalised)
    if known is not None:
        return known

    crs = CRS.from_user_input(normalised)
    area = crs.area_of_use
    if area is None:
        raise ValueError(f"Projection '{code}' does not declare an area of use")
    return transform_extent(area.bounds, "EPSG:4326", normalised)


def resolution_from_scale(scale: float, meters_per_unit: float = 1.0) -> float:
    """Convert a scale denominator to map units per pixel."""

    return scale / (meters_per_unit * INCHES_PER_METER * DOTS_PER_INCH)


__all__ = [
    "normalise_crs_code",
    "projection_extent",
    "resolution_from_scale",
    "same_crs",
    "transform_extent",
]
