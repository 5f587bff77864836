"""
Event bridge between the rendering surface and plugin nodes.

Each render handle reports nine object events. The bridge subscribes to
all of them once per node and, when one fires, looks the handle's ``id``
up in the session's instance registry and calls the matching hook on the
owning node. Resolving through the registry (rather than closing over the
node) means a handle only ever reaches a node that is still registered.

Special cases:
- added / modified: after the hook, geometry is synced from the handle and
  percent dimensions are cached on the node.
- removed: after the hook, every child's render handle is removed from the
  surface, still-registered descendants are removed when
  ``cascade_logical_removal`` is on, then the node removes itself.
- selected / deselected: track the session's current object.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from ecml_canvas.protocols.render_surface import OBJECT_EVENTS, RenderHandle

if TYPE_CHECKING:
    from ecml_canvas.core.node import PluginNode
    from ecml_canvas.services.session import EditorSession

logger = logging.getLogger(__name__)


class EventBridge:
    """Routes render handle callbacks to PluginNode hooks."""

    def __init__(self, session: "EditorSession"):
        self._session = session

    def attach(self, node: "PluginNode") -> bool:
        """Subscribe to the node's render handle events.

        Returns:
            False if the node has no render handle (nothing to subscribe)
        """
        handle = node.render_handle
        if handle is None:
            return False
        handle.on({name: self._make_callback(name) for name in OBJECT_EVENTS})
        logger.debug(f"Attached surface events for {node.id}")
        return True

    def _make_callback(self, event_name: str) -> Callable[[RenderHandle, Any, Any], None]:
        dispatch = getattr(self, f"_on_{event_name}")

        def callback(handle: RenderHandle, options: Any = None, event: Any = None) -> None:
            node = self.resolve(handle)
            if node is None:
                logger.warning(f"Surface event '{event_name}' for unregistered id {handle.get('id')!r}")
                return
            if self._session.config.log_bridge_events:
                logger.debug(f"Bridge: {event_name} -> {node!r}")
            dispatch(node, options, event)

        return callback

    def resolve(self, handle: RenderHandle) -> Optional["PluginNode"]:
        """Owning node of a render handle, via the instance registry."""
        return self._session.registry.get(handle.get("id"))

    # ========== HANDLERS ==========

    def _on_added(self, node: "PluginNode", options: Any, event: Any) -> None:
        node.added(node, options, event)
        if node.render_handle is not None:
            node.sync_dimensions()

    def _on_removed(self, node: "PluginNode", options: Any, event: Any) -> None:
        node.removed(node, options, event)
        self._cascade(node)
        node.remove()
        if self._session.current_object is node:
            self._session.current_object = None

    def _on_selected(self, node: "PluginNode", options: Any, event: Any) -> None:
        self._session.current_object = node
        node.selected(node, options, event)

    def _on_deselected(self, node: "PluginNode", options: Any, event: Any) -> None:
        if self._session.current_object is node:
            self._session.current_object = None
        node.deselected(node, options, event)

    def _on_modified(self, node: "PluginNode", options: Any, event: Any) -> None:
        node.changed(node, options, event)
        if node.render_handle is not None:
            node.sync_dimensions()

    def _on_rotating(self, node: "PluginNode", options: Any, event: Any) -> None:
        node.rotating(node, options, event)

    def _on_scaling(self, node: "PluginNode", options: Any, event: Any) -> None:
        node.scaling(node, options, event)

    def _on_moving(self, node: "PluginNode", options: Any, event: Any) -> None:
        node.moving(node, options, event)

    def _on_skewing(self, node: "PluginNode", options: Any, event: Any) -> None:
        node.skewing(node, options, event)

    def _cascade(self, node: "PluginNode") -> None:
        """Remove children's render handles; optionally deregister what is left."""
        registry = self._session.registry
        for child in list(node.children):
            if child.render_handle is not None:
                # Fires the child's own "removed" event when it is on the surface
                child.render_handle.remove()
            if self._session.config.cascade_logical_removal and child.id in registry:
                self._cascade(child)
                child.remove()
