"""
Editing session context.

EditorSession owns everything a plugin node talks to at runtime: the
instance registry, the event bus, the event bridge and the rendering
surface, plus the table of registered plugin types. Nodes hold a
reference to their session instead of reaching for process-wide globals,
so two sessions never see each other's nodes.

Example:
    session = EditorSession(QtRenderSurface())
    session.register_plugin(StageNode, {"id": "stage"})
    session.register_plugin(ShapeNode, {"id": "shape"})
    stage = session.instantiate_plugin("stage")
    rect = session.instantiate_plugin("shape", {"x": 10, "y": 10, "w": 20, "h": 20}, stage)
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple, Type

from ecml_canvas.core.errors import PluginNotRegisteredError
from ecml_canvas.core.manifest import PluginManifest, as_manifest
from ecml_canvas.core.node import PluginNode
from ecml_canvas.protocols.editor_config import EditorConfig, get_editor_config
from ecml_canvas.protocols.media import MediaRegistryProtocol, get_media_registry
from ecml_canvas.protocols.registries import MenuRegistryProtocol, get_menu_registry
from ecml_canvas.protocols.render_surface import RenderSurface
from ecml_canvas.protocols.resources import ResourceLoaderProtocol, get_resource_loader
from ecml_canvas.services.event_bridge import EventBridge
from ecml_canvas.services.event_bus import EditorEventBus, EventListener
from ecml_canvas.services.instance_registry import PluginInstanceRegistry

logger = logging.getLogger(__name__)


class EditorSession:
    """Context object for one editing session.

    Collaborators not passed explicitly fall back to the globally registered
    implementations (``register_menu_registry`` etc.), or to None.
    """

    def __init__(
        self,
        surface: Optional[RenderSurface] = None,
        *,
        config: Optional[EditorConfig] = None,
        menu_registry: Optional[MenuRegistryProtocol] = None,
        media_registry: Optional[MediaRegistryProtocol] = None,
        resource_loader: Optional[ResourceLoaderProtocol] = None,
    ):
        self.config = config if config is not None else get_editor_config()
        self.surface = surface
        self.menu_registry = menu_registry if menu_registry is not None else get_menu_registry()
        self.media_registry = media_registry if media_registry is not None else get_media_registry()
        self.resource_loader = resource_loader if resource_loader is not None else get_resource_loader()

        self.registry = PluginInstanceRegistry()
        self.events = EditorEventBus()
        self.event_bridge = EventBridge(self)

        self.plugin_types: Dict[str, Tuple[Type[PluginNode], PluginManifest]] = {}
        self.prototypes: Dict[str, PluginNode] = {}
        self.current_stage: Optional[PluginNode] = None
        self.current_object: Optional[PluginNode] = None

    # ========== PLUGIN TYPES / INSTANCES ==========

    def register_plugin(self, plugin_class: Type[PluginNode], manifest: Any) -> PluginNode:
        """Register a plugin type and return its prototype.

        Args:
            plugin_class: PluginNode subclass implementing the type
            manifest: PluginManifest or raw manifest mapping

        Returns:
            The type prototype (menus registered, listening for "<id>:create")
        """
        manifest = as_manifest(manifest)
        previous = self.prototypes.get(manifest.id)
        if previous is not None:
            logger.warning(f"Plugin type '{manifest.id}' already registered; replacing")
            self.remove_event_listener(f"{manifest.id}:create", previous.create)
        self.plugin_types[manifest.id] = (plugin_class, manifest)
        prototype = plugin_class(self, manifest)
        self.prototypes[manifest.id] = prototype
        return prototype

    def instantiate_plugin(self, plugin_id: str, data: Optional[Dict[str, Any]] = None,
                           parent: Optional[PluginNode] = None, render: bool = True) -> PluginNode:
        """
        Create, register and initialize a live instance.

        Args:
            plugin_id: Registered plugin type id
            data: ECML attribute tree to hydrate from (percent space)
            parent: Composing node, usually the current stage
            render: Add the new render handle to the session surface

        Returns:
            The initialized node

        Raises:
            PluginNotRegisteredError: If ``plugin_id`` was never registered
            Exception: Whatever initialization raised; the node is removed first
        """
        try:
            plugin_class, manifest = self.plugin_types[plugin_id]
        except KeyError:
            raise PluginNotRegisteredError(plugin_id) from None

        node = plugin_class(self, manifest, data or {}, parent)
        self.registry.register(node)
        try:
            node.init_plugin()
        except Exception:
            logger.warning(f"Initialization of {node!r} failed; discarding it")
            node.remove()
            raise
        if render and self.surface is not None and node.id in self.registry:
            node.render(self.surface)
        logger.debug(f"Instantiated {node!r}")
        return node

    def get_plugin_instance(self, node_id: str) -> Optional[PluginNode]:
        return self.registry.get(node_id)

    # ========== EVENTS ==========

    def add_event_listener(self, name: str, listener: EventListener) -> None:
        self.events.add_event_listener(name, listener)

    def remove_event_listener(self, name: str, listener: EventListener) -> None:
        self.events.remove_event_listener(name, listener)

    def dispatch_event(self, name: str, data: Any = None) -> None:
        self.events.dispatch_event(name, data)

    def render(self) -> None:
        if self.surface is not None:
            self.surface.render()

    # ========== COLLABORATORS ==========

    def get_media(self, asset_id: str) -> Optional[Dict[str, Any]]:
        if self.media_registry is None:
            return None
        return self.media_registry.get_media(asset_id)

    def resolve_plugin_resource(self, plugin_id: str, plugin_ver: str, src: str) -> str:
        """Resolve a plugin-relative path; unchanged when no loader is registered."""
        if self.resource_loader is None:
            return src
        return self.resource_loader.resolve_plugin_resource(plugin_id, plugin_ver, src)

    def load_plugin_resource(self, plugin_id: str, plugin_ver: str, src: str, data_type: str,
                             callback: Callable[[Optional[Exception], Any], None]) -> None:
        if self.resource_loader is None:
            callback(LookupError(f"No resource loader registered for {plugin_id}"), None)
            return
        self.resource_loader.load_plugin_resource(plugin_id, plugin_ver, src, data_type, callback)
