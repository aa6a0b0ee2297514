"""Load project configuration files from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..errors import ProjectLoadError, ProjectValidationError
from ..models.config import ProjectConfig
from .schema import iter_project_errors

_LOGGER = logging.getLogger(__name__)


def read_project_payload(path: Path | str) -> dict[str, Any]:
    """Return the raw JSON payload stored at *path*."""

    project_path = Path(path)
    try:
        raw_data = project_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProjectLoadError(f"Unable to read project file '{project_path}'") from exc
    try:
        payload = json.loads(raw_data)
    except json.JSONDecodeError as exc:
        raise ProjectLoadError(f"Project file '{project_path}' is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise ProjectLoadError(f"Project file '{project_path}' must contain a JSON object")
    return payload


def load_project(path: Path | str) -> ProjectConfig:
    """Read, validate and convert the project file at *path*.

    A ``wmtsCapabilitiesPath`` entry is resolved relative to the project file
    and its content is inlined so that cached layers can be built
    synchronously.
    """

    project_path = Path(path)
    payload = read_project_payload(project_path)

    errors = iter_project_errors(payload)
    if errors:
        raise ProjectValidationError("; ".join(errors))

    capabilities_path = payload.get("wmtsCapabilitiesPath")
    if capabilities_path and not payload.get("wmtsCapabilities"):
        resolved = Path(capabilities_path)
        if not resolved.is_absolute():
            resolved = project_path.parent / resolved
        try:
            payload["wmtsCapabilities"] = resolved.read_text(encoding="utf-8")
        except OSError as exc:
            raise ProjectLoadError(f"Unable to read WMTS capabilities '{resolved}'") from exc

    try:
        config = ProjectConfig.from_dict(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise ProjectValidationError(str(exc)) from exc

    _LOGGER.debug(
        "Loaded project %s: %d base layers, %d layer entries",
        project_path,
        len(config.base_layers),
        len(config.layers),
    )
    return config


__all__ = ["load_project", "read_project_payload"]
