"""Schema helpers for project configuration files."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator

_FLAG = {"type": ["string", "boolean"]}
_EXTENT = {
    "type": "array",
    "items": {"type": "number"},
    "minItems": 4,
    "maxItems": 4,
}

_TREE_NODE: dict[str, Any] = {
    "type": "object",
    "required": ["type", "name"],
    "properties": {
        "type": {"enum": ["group", "layer"]},
        "name": {"type": "string"},
        "children": {"type": "array", "items": {"$ref": "#/$defs/treeNode"}},
    },
}

PROJECT_SCHEMA: dict[str, Any] = {
    "$id": "layermap/project.schema.json",
    "type": "object",
    "required": ["projection", "restrictedExtent", "center"],
    "$defs": {"treeNode": _TREE_NODE},
    "properties": {
        "projection": {"type": "string", "minLength": 1},
        "restrictedExtent": _EXTENT,
        "center": {
            "type": "array",
            "items": {"type": "number"},
            "minItems": 2,
            "maxItems": 2,
        },
        "zoom": {"type": "integer", "minimum": 0},
        "resolutions": {"type": "array", "items": {"type": "number", "exclusiveMinimum": 0}},
        "serviceUrl": {"type": "string"},
        "startupBaselayer": {"type": ["string", "null"]},
        "repository": {"type": "string"},
        "project": {"type": "string"},
        "wmtsCapabilities": {"type": ["string", "null"]},
        "wmtsCapabilitiesPath": {"type": ["string", "null"]},
        "baseLayers": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["type", "name"],
                "properties": {
                    "type": {"type": "string"},
                    "name": {"type": "string"},
                    "title": {"type": ["string", "null"]},
                    "url": {"type": ["string", "null"]},
                    "crs": {"type": ["string", "null"]},
                    "numZoomLevels": {"type": ["integer", "null"], "minimum": 0},
                },
                "additionalProperties": True,
            },
        },
        "layersTree": {"$ref": "#/$defs/treeNode"},
        "layers": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "type": {"type": "string"},
                    "geometryType": {"type": "string"},
                    "toggled": _FLAG,
                    "mutuallyExclusive": _FLAG,
                    "groupAsLayer": _FLAG,
                    "cached": _FLAG,
                    "crs": {"type": "string"},
                    "extent": _EXTENT,
                    "minScale": {"type": "number"},
                    "maxScale": {"type": "number"},
                },
                "additionalProperties": True,
            },
        },
    },
    "additionalProperties": True,
}

_validator = Draft202012Validator(PROJECT_SCHEMA)


def validate_project(data: dict[str, Any]) -> None:
    """Validate *data* against the project schema."""

    _validator.validate(data)


def iter_project_errors(data: dict[str, Any]) -> list[str]:
    """Return human readable messages for every schema violation in *data*."""

    messages = []
    for error in sorted(_validator.iter_errors(data), key=lambda item: [str(part) for part in item.path]):
        location = "/".join(str(part) for part in error.path) or "<root>"
        messages.append(f"{location}: {error.message}")
    return messages


__all__ = ["PROJECT_SCHEMA", "iter_project_errors", "validate_project"]
