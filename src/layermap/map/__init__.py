"""Public package interface for the map object and its view."""

from .base_layers_map import BaseLayersMap
from .view import MapView

__all__ = ["BaseLayersMap", "MapView"]
