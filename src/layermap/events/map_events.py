"""Notifications emitted by the map for application level collaborators."""

from dataclasses import dataclass, field

from .bus import Event


@dataclass(kw_only=True)
class BaseLayersChangedEvent(Event):
    """The base layer collection changed (selection or membership)."""


@dataclass(kw_only=True)
class BaseLayerChangedEvent(Event):
    name: str = ""


@dataclass(kw_only=True)
class SwitcherItemSelectedEvent(Event):
    name: str = ""
    type: str = ""
    selected: bool = True


@dataclass(kw_only=True)
class OverlayVisibilityChangedEvent(Event):
    changes: dict[str, bool] = field(default_factory=dict)
