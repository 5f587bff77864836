"""
Session-scoped services.

The instance registry, the named-event bus, the surface-to-node event
bridge, and the EditorSession that owns them.
"""

from .instance_registry import PluginInstanceRegistry
from .event_bus import EditorEvent, EditorEventBus
from .event_bridge import EventBridge
from .session import EditorSession

__all__ = [
    "PluginInstanceRegistry",
    "EditorEvent",
    "EditorEventBus",
    "EventBridge",
    "EditorSession",
]
