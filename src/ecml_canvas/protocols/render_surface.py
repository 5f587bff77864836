"""Rendering surface protocols.

The core never draws. It only needs a handle per live object that can
store a few properties, report the nine object events, and be removed from
a display list. Applications plug in a concrete surface (see
``ecml_canvas.surface.QtRenderSurface``).
"""

from typing import Any, Callable, Dict, Mapping, Optional, Protocol

# Object events a handle reports, in subscription order
OBJECT_EVENTS = (
    "added",
    "removed",
    "selected",
    "deselected",
    "modified",
    "rotating",
    "scaling",
    "moving",
    "skewing",
)

# Callback receives (handle, options, event)
HandleCallback = Callable[[Any, Any, Any], None]


class RenderHandle(Protocol):
    """A live object on the rendering surface."""

    has_rotating_point: bool

    def set(self, **props: Any) -> None:
        """Set one or more surface properties (``left``, ``angle``, ``id``...)."""
        ...

    def get(self, name: str, default: Any = None) -> Any:
        """Read a surface property."""
        ...

    def set_visible(self, visible: bool) -> None:
        ...

    def on(self, handlers: Mapping[str, HandleCallback]) -> None:
        """Subscribe callbacks by object event name."""
        ...

    def remove(self) -> None:
        """Remove from the owning surface; fires ``removed``."""
        ...


class RenderSurface(Protocol):
    """Display list that owns render handles."""

    def create_handle(self, props: Optional[Dict[str, Any]] = None) -> RenderHandle:
        ...

    def add(self, handle: RenderHandle) -> None:
        """Add to the display list; fires ``added``."""
        ...

    def remove(self, handle: RenderHandle) -> None:
        ...

    def render(self) -> None:
        ...
