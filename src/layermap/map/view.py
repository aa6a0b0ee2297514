"""Camera state of the map."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..geo.projection import projection_extent
from ..models.config import Extent


@dataclass
class MapView:
    """Projection, resolutions and camera parameters of the map.

    ``navigation_extent`` is the extent currently attached to the view
    projection.  It starts as the natural extent of the projection and is
    widened to ``restricted_extent`` when a base layer in another CRS is
    shown.  Only the centre is constrained to the restricted extent, so users
    may zoom out past it.
    """

    projection: str
    restricted_extent: Extent
    center: tuple[float, float]
    zoom: int = 0
    resolutions: tuple[float, ...] = ()
    enable_rotation: bool = False
    constrain_only_center: bool = True
    navigation_extent: Optional[Extent] = field(default=None)

    def __post_init__(self) -> None:
        if self.navigation_extent is None:
            self.navigation_extent = projection_extent(self.projection)

    @property
    def resolution(self) -> Optional[float]:
        """Resolution of the current zoom level, when resolutions are known."""

        if not self.resolutions:
            return None
        index = max(0, min(self.zoom, len(self.resolutions) - 1))
        return self.resolutions[index]

    def reset_navigation_extent(self) -> None:
        """Restore the natural extent of the view projection."""

        self.navigation_extent = projection_extent(self.projection)

    def widen_to_restricted_extent(self) -> None:
        self.navigation_extent = self.restricted_extent

    def move_to(self, center: tuple[float, float], zoom: int) -> None:
        """Jump to *center* and *zoom*, clamping the zoom to the known resolutions."""

        self.center = (float(center[0]), float(center[1]))
        if self.resolutions:
            zoom = max(0, min(int(zoom), len(self.resolutions) - 1))
        self.zoom = int(zoom)
