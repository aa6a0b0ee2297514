"""Custom exception hierarchy for layermap."""

from __future__ import annotations


class LayerMapError(Exception):
    """Base class for all custom errors raised by layermap."""


# --- Construction errors ---

class ConfigurationError(LayerMapError):
    """Raised when the layer configuration is inconsistent and the map cannot be built."""


class MissingLayerFieldError(ConfigurationError):
    """Raised when a layer that passed the geometry filter lacks a required field."""

    def __init__(self, layer_name: str, field_name: str) -> None:
        super().__init__(f"Layer '{layer_name}' is missing required field '{field_name}'")
        self.layer_name = layer_name
        self.field_name = field_name


class CapabilitiesUnavailableError(ConfigurationError):
    """Raised when a cached layer cannot be resolved from the WMTS capabilities."""


class CapabilitiesParseError(LayerMapError):
    """Raised when a WMTS capabilities document cannot be parsed."""


# --- Project file errors ---

class ProjectError(LayerMapError):
    """Base class for project file failures."""


class ProjectLoadError(ProjectError):
    """Raised when the project file cannot be read or parsed."""


class ProjectValidationError(ProjectError):
    """Raised when project data fails schema validation."""
