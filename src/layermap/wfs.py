"""Build WFS requests against the project's OGC endpoint.

The transport is injected: the core only prepares the parameters, the
hosting application performs the HTTP ``POST`` and decodes the JSON answer.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

# ``transport(url, form)`` posts ``form`` url-encoded and returns decoded JSON.
Transport = Callable[[str, dict[str, str]], Any]


class WFSClient:
    """Issue ``GetFeature`` and ``DescribeFeatureType`` requests."""

    VERSION = "1.0.0"

    def __init__(self, url: str, transport: Transport, *, repository: str = "", project: str = "") -> None:
        self._url = url
        self._transport = transport
        common = {
            "repository": repository,
            "project": project,
            "SERVICE": "WFS",
            "VERSION": self.VERSION,
        }
        self._get_feature_defaults = {**common, "REQUEST": "GetFeature", "OUTPUTFORMAT": "GeoJSON"}
        self._describe_defaults = {**common, "REQUEST": "DescribeFeatureType", "OUTPUTFORMAT": "JSON"}

    @property
    def url(self) -> str:
        return self._url

    def get_feature_params(self, options: Mapping[str, object] | None = None) -> dict[str, str]:
        """Return the form for a ``GetFeature`` request; *options* win over defaults."""

        return _merge(self._get_feature_defaults, options)

    def describe_feature_type_params(self, options: Mapping[str, object] | None = None) -> dict[str, str]:
        return _merge(self._describe_defaults, options)

    def get_feature(self, options: Mapping[str, object] | None = None) -> Any:
        return self._transport(self._url, self.get_feature_params(options))

    def describe_feature_type(self, options: Mapping[str, object] | None = None) -> Any:
        return self._transport(self._url, self.describe_feature_type_params(options))


def _merge(defaults: Mapping[str, str], options: Mapping[str, object] | None) -> dict[str, str]:
    merged = dict(defaults)
    for key, value in (options or {}).items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = str(value)
    return merged


__all__ = ["Transport", "WFSClient"]
