"""
Plugin instance registry.

Maps node id -> live PluginNode for one editing session. The event bridge
uses it to resolve a surface callback back to the owning node.

Lifecycle ownership:
- EditorSession.instantiate_plugin: registers right after construction
- PluginNode.remove: unregisters

Thread safety: Not thread-safe (all operations expected on main thread).
"""

import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional

if TYPE_CHECKING:
    from ecml_canvas.core.node import PluginNode

logger = logging.getLogger(__name__)

RegistryCallback = Callable[[str, "PluginNode"], None]


class PluginInstanceRegistry:
    """Session-owned id -> node mapping with registration callbacks."""

    def __init__(self):
        self._instances: Dict[str, "PluginNode"] = {}
        self._on_register_callbacks: List[RegistryCallback] = []
        self._on_unregister_callbacks: List[RegistryCallback] = []

    def add_register_callback(self, callback: RegistryCallback) -> None:
        """Subscribe to node registration."""
        if callback not in self._on_register_callbacks:
            self._on_register_callbacks.append(callback)

    def add_unregister_callback(self, callback: RegistryCallback) -> None:
        """Subscribe to node removal."""
        if callback not in self._on_unregister_callbacks:
            self._on_unregister_callbacks.append(callback)

    def register(self, node: "PluginNode") -> None:
        """Add a node under its id.

        Raises:
            ValueError: If the node has no id (type prototypes are never registered)
        """
        if node.id is None:
            raise ValueError(f"Cannot register {node!r}: node has no id")
        existing = self._instances.get(node.id)
        if existing is not None and existing is not node:
            logger.warning(f"Instance id '{node.id}' already registered to {existing!r}; replacing")
        self._instances[node.id] = node
        logger.debug(f"Registered instance {node.id} (total: {len(self._instances)})")
        for callback in list(self._on_register_callbacks):
            callback(node.id, node)

    def unregister(self, node_id: Optional[str]) -> Optional["PluginNode"]:
        """Remove and return the node for ``node_id``; missing ids are a no-op."""
        node = self._instances.pop(node_id, None)
        if node is None:
            return None
        logger.debug(f"Unregistered instance {node_id} (total: {len(self._instances)})")
        for callback in list(self._on_unregister_callbacks):
            callback(node_id, node)
        return node

    def get(self, node_id: Optional[str]) -> Optional["PluginNode"]:
        return self._instances.get(node_id)

    def all(self) -> List["PluginNode"]:
        return list(self._instances.values())

    def clear(self) -> None:
        for node_id in list(self._instances):
            self.unregister(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._instances))
