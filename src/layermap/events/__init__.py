from .bus import Event, EventBus, Subscription
from .map_events import (
    BaseLayerChangedEvent,
    BaseLayersChangedEvent,
    OverlayVisibilityChangedEvent,
    SwitcherItemSelectedEvent,
)

__all__ = [
    "BaseLayerChangedEvent",
    "BaseLayersChangedEvent",
    "Event",
    "EventBus",
    "OverlayVisibilityChangedEvent",
    "Subscription",
    "SwitcherItemSelectedEvent",
]
