"""
Editor event bus.

Named, session-wide notifications such as ``"<type>:create"`` (an authoring
action asks for a new instance) and ``"object:modified"`` (property panels
should refresh). Listeners are called synchronously in registration
order; Qt observers can connect to ``event_dispatched`` instead.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorEvent:
    """Event object handed to listeners as their first argument."""
    type: str


EventListener = Callable[[EditorEvent, Any], Any]


class EditorEventBus(QObject):
    """Synchronous named-event dispatcher for one editing session."""

    # (event name, payload)
    event_dispatched = pyqtSignal(str, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._listeners: Dict[str, List[EventListener]] = {}

    def add_event_listener(self, name: str, listener: EventListener) -> None:
        self._listeners.setdefault(name, []).append(listener)

    def remove_event_listener(self, name: str, listener: EventListener) -> None:
        listeners = self._listeners.get(name, [])
        if listener in listeners:
            listeners.remove(listener)

    def has_listeners(self, name: str) -> bool:
        return bool(self._listeners.get(name))

    def dispatch_event(self, name: str, data: Any = None) -> None:
        """Call every listener for ``name`` with (EditorEvent, data), then emit the Qt signal."""
        event = EditorEvent(type=name)
        listeners = list(self._listeners.get(name, ()))
        logger.debug(f"Dispatching '{name}' to {len(listeners)} listener(s)")
        for listener in listeners:
            listener(event, data)
        self.event_dispatched.emit(name, data)
