"""
Plugin node base type.

Every element on the editing canvas is a PluginNode subclass. The base
class handles the whole lifecycle, ECML marshalling and event routing;
subclasses only override the hooks they care about:

    initialize, new_instance, added, removed, selected, deselected,
    changed, rotating, scaling, moving, skewing, do_copy, get_meta,
    get_summary, get_pragma_value, render, update_context_menu, re_config

A blank subclass (or PluginNode itself) is a working node.

Two construction modes, chosen by arity:

    PluginNode(session, manifest)                 type prototype
    PluginNode(session, manifest, data, parent)   live instance

A prototype registers the type's menus and listens for
``"<type>:create"``. An instance is normally built through
``EditorSession.instantiate_plugin``, which registers it and then runs
``init_plugin``: ECML hydration -> ``new_instance`` -> ``post_init``.
"""

import copy
import logging
import math
import uuid
import weakref
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

from ecml_canvas.core.config_manifest import base_config_manifest, merge_config_manifests
from ecml_canvas.core.coordinates import pixel_to_percent
from ecml_canvas.core import ecml
from ecml_canvas.core.manifest import PluginManifest, as_manifest

if TYPE_CHECKING:
    from ecml_canvas.protocols.render_surface import RenderHandle, RenderSurface
    from ecml_canvas.services.session import EditorSession

logger = logging.getLogger(__name__)

# Marks a prototype construction (manifest only)
_TYPE_ONLY = object()

# Render-native keys kept out of ECML attributes
_RENDER_ONLY_ATTRIBUTES = ("top", "left", "width", "height")


def _deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


class PluginNode:
    """Base class for all canvas plugin nodes."""

    # Set to the configured stage type by root container nodes
    node_type: Optional[str] = None

    def __init__(self, session: "EditorSession", manifest: Any, data: Any = _TYPE_ONLY,
                 parent: Optional["PluginNode"] = None):
        self.session = session
        self.manifest: PluginManifest = as_manifest(manifest).clone()
        self._reset_state()

        if data is _TYPE_ONLY:
            self.is_prototype = True
            self.attributes = {"x": 0, "y": 0, "w": 0, "h": 0, "visible": True, "editable": True}
            self.register_menu()
            self.initialize()
            session.add_event_listener(f"{self.manifest.id}:create", self.create)
            logger.debug(f"Registered plugin type {self.manifest.id}")
        else:
            self.is_prototype = False
            self.editor_data: Dict[str, Any] = dict(data) if data else {}
            self._id = self.editor_data.get("id") or str(uuid.uuid4())
            self.parent = parent
            self.config = dict(session.config.default_node_config)

        self.config_manifest: List[Dict[str, Any]] = base_config_manifest()

    def _reset_state(self) -> None:
        self._id: Optional[str] = None
        self._parent_ref: Optional[weakref.ref] = None
        self.children: List["PluginNode"] = []
        self.render_handle: Optional["RenderHandle"] = None
        self.editor_data = {}
        self.attributes: Dict[str, Any] = {"x": 0, "y": 0, "w": 0, "h": 0, "visible": True}
        self.config: Optional[Dict[str, Any]] = None
        self.data: Any = None
        self.events: Optional[List[Any]] = None
        self.params: Optional[Dict[str, Any]] = None
        self.media: Optional[Dict[str, Any]] = None
        self.dimensions: Optional[Dict[str, Any]] = None
        self.ecml_report: Optional[ecml.ECMLReport] = None

    # ========== IDENTITY ==========

    @property
    def id(self) -> Optional[str]:
        """Registry key; fixed once assigned."""
        return self._id

    @property
    def parent(self) -> Optional["PluginNode"]:
        """Composing node, held weakly. Children own nothing upward."""
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, node: Optional["PluginNode"]) -> None:
        self._parent_ref = weakref.ref(node) if node is not None else None

    def get_type(self) -> str:
        return self.manifest.id

    def get_version(self) -> str:
        return self.manifest.ver

    def get_manifest_id(self) -> str:
        return self.manifest.short_id or self.manifest.id

    def get_display_name(self) -> str:
        return self.manifest.display_name or self.manifest.id

    def __repr__(self) -> str:
        kind = "prototype" if self.is_prototype else self._id
        return f"<{type(self).__name__} {self.manifest.id} {kind}>"

    # ========== LIFECYCLE ==========

    def init_plugin(self) -> None:
        """Hydrate from ECML, create the render object, then wire everything up."""
        self.from_ecml(self.editor_data)
        self.new_instance()
        self.post_init()

    def post_init(self) -> None:
        """Subscribe surface events, tag the handle and attach to the parent."""
        self.session.event_bridge.attach(self)
        handle = self.render_handle
        if handle is not None:
            handle.set(id=self.id)
            handle.set_visible(True)
            if self.manifest.editor.rotatable:
                handle.has_rotating_point = True

        parent = self.parent
        if parent is not None:
            parent.add_child(self)
            if parent.node_type != self.session.config.stage_type:
                self.session.dispatch_event("object:modified", {"id": self.id})
        logger.debug(f"Post-init complete for {self!r}")

    def register_menu(self) -> None:
        """Register toolbar, sidebar and header entries declared by the manifest.

        Subclasses can override this to register additional menu items.
        """
        editor = self.manifest.editor
        for menu in editor.menu:
            if menu.get("iconImage"):
                menu["iconImage"] = self.relative_url(menu["iconImage"])
            for item in menu.get("submenu") or []:
                if item.get("iconImage"):
                    item["iconImage"] = self.relative_url(item["iconImage"])
                item["pluginId"] = self.manifest.id
                item["pluginVer"] = self.manifest.ver

        registry = self.session.menu_registry
        if registry is None:
            logger.debug(f"No menu registry; skipping menu registration for {self.manifest.id}")
            return

        for menu in editor.menu:
            if menu.get("category") == "main":
                registry.register_menu(menu, self.manifest)
            elif menu.get("category") == "context":
                registry.register_context_menu(menu, self.manifest)
        for sidebar_menu in editor.sidebar_menu:
            registry.register_sidebar_menu(sidebar_menu, self.manifest)
        registry.load_custom_template(self.manifest.id)
        for header in editor.header:
            registry.register_header(header, self.manifest)

    def create(self, event: Any, data: Any = None) -> "PluginNode":
        """Instantiate this type under the current stage (``<type>:create`` handler)."""
        return self.session.instantiate_plugin(
            self.manifest.id, copy.copy(data), self.session.current_stage
        )

    def remove(self) -> None:
        """Detach from the parent and drop out of the instance registry.

        If called from new_instance(), the node is never added to its parent.
        """
        parent = self.parent
        if parent is not None:
            parent.remove_child(self)
            self.parent = None
        self.session.registry.unregister(self.id)

    def add_child(self, node: "PluginNode") -> None:
        self.children.append(node)

    def remove_child(self, node: "PluginNode") -> None:
        self.children = [child for child in self.children if child.id != node.id]

    # ========== OVERRIDABLE HOOKS ==========

    def initialize(self) -> None:
        """Called once when the plugin type is registered."""

    def new_instance(self) -> None:
        """Create the render handle for a new instance. Runs after ECML hydration."""

    def added(self, instance: "PluginNode", options: Any, event: Any) -> None:
        """Called when the object is added to the surface."""

    def removed(self, instance: "PluginNode", options: Any, event: Any) -> None:
        """Called when the object is removed from the surface."""

    def selected(self, instance: "PluginNode", options: Any, event: Any) -> None:
        """Called when the object is selected."""

    def deselected(self, instance: "PluginNode", options: Any, event: Any) -> None:
        """Called when the object loses selection."""

    def changed(self, instance: "PluginNode", options: Any, event: Any) -> None:
        """Called when the object was dragged, resized or rotated."""

    def rotating(self, instance: "PluginNode", options: Any, event: Any) -> None:
        pass

    def scaling(self, instance: "PluginNode", options: Any, event: Any) -> None:
        pass

    def moving(self, instance: "PluginNode", options: Any, event: Any) -> None:
        pass

    def skewing(self, instance: "PluginNode", options: Any, event: Any) -> None:
        pass

    def do_copy(self) -> Any:
        """In-canvas copy. Default returns the live render handle."""
        return self.render_handle

    def get_copy(self) -> Dict[str, Any]:
        """Deep copy as ECML, for duplication across sessions."""
        return self.to_ecml()

    def render(self, surface: "RenderSurface") -> None:
        """Add the render handle to the surface. Composites may override."""
        if self.render_handle is not None:
            surface.add(self.render_handle)

    def get_meta(self) -> Any:
        return None

    def get_summary(self) -> Any:
        return None

    def get_pragma_value(self) -> Any:
        return None

    def update_context_menu(self) -> None:
        """Adjust custom context menu actions when this instance is selected."""

    def re_config(self) -> None:
        """Reset configuration."""

    def render_config(self) -> None:
        pass

    # ========== CONFIG / DATA ==========

    def set_config(self, config: Optional[Dict[str, Any]]) -> None:
        """Override to parse the config if necessary."""
        self.config = config

    def add_config(self, key: str, value: Any) -> None:
        if self.config is None:
            self.config = {}
        self.config[key] = value

    def get_config(self) -> Optional[Dict[str, Any]]:
        return self.config

    def set_data(self, data: Any) -> None:
        self.data = data

    def get_data(self) -> Any:
        """Type-specific payload, e.g. the questions of a quiz."""
        return self.data

    def get_config_manifest(self) -> List[Dict[str, Any]]:
        """Editable config properties for this node (type + instance, filtered)."""
        editor = self.manifest.editor
        return merge_config_manifests(editor.config_manifest, self.config_manifest, editor.playable)

    def on_config_change(self, key: str, value: Any) -> None:
        """
        Record a config change and apply it to the current object.

        Gives WYSIWYG feedback on the surface for the base config
        properties, then re-renders and notifies observers.

        Args:
            key: Config property name
            value: New value from the config panel
        """
        try:
            if key == "opacity":
                value = float(value)
            elif key == "strokeWidth":
                value = int(float(value))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric {key} value {value!r} for {self.manifest.id}")
            return

        self.add_config(key, value)
        current = self.session.current_object
        if current is None:
            return
        if current.config is None:
            current.config = {}
        handle = current.render_handle

        if key == "opacity":
            if handle is not None:
                handle.set(opacity=value / 100)
            current.attributes["opacity"] = value / 100
            current.config["opacity"] = value
        elif key == "strokeWidth":
            if handle is not None:
                handle.set(strokeWidth=value)
            current.attributes["stroke-width"] = value
            current.attributes["strokeWidth"] = value
            current.config["strokeWidth"] = value
        elif key == "stroke":
            if handle is not None:
                handle.set(stroke=value)
            current.attributes["stroke"] = value
            current.config["stroke"] = value
        elif key in ("autoplay", "visible"):
            current.attributes[key] = value
            current.config[key] = value

        self.session.render()
        self.session.dispatch_event("object:modified", {"target": handle})

    # ========== ATTRIBUTES ==========

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Deep-merge into the current attributes."""
        _deep_merge(self.attributes, attributes)

    def get_attributes(self) -> Dict[str, Any]:
        return {k: v for k, v in self.attributes.items() if k not in _RENDER_ONLY_ATTRIBUTES}

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def get_attribute(self, key: str) -> Any:
        return self.attributes.get(key)

    def get_renderer_dimensions(self) -> Dict[str, Any]:
        """Bounding box and rotation in percent space."""
        attr = self.get_attributes()
        dims = {key: attr[key] for key in ("x", "y", "w", "h", "rotate") if key in attr}
        pixel_to_percent(dims)
        return dims

    def get_properties(self) -> Dict[str, Any]:
        """Scalar attributes in percent space, for property panels."""
        props = {
            key: value for key, value in self.attributes.items()
            if not isinstance(value, (Mapping, list, tuple)) and not _is_nan(value)
        }
        pixel_to_percent(props)
        return props

    def sync_dimensions(self) -> Optional[Dict[str, Any]]:
        """Copy live geometry from the render handle and cache percent dimensions."""
        handle = self.render_handle
        if handle is None:
            return None
        self.attributes["x"] = handle.get("left", 0)
        self.attributes["y"] = handle.get("top", 0)
        self.attributes["w"] = handle.get("width", 0) * handle.get("scaleX", 1)
        self.attributes["h"] = handle.get("height", 0) * handle.get("scaleY", 1)
        angle = handle.get("angle", 0)
        if angle or "rotate" in self.attributes:
            self.attributes["rotate"] = angle
        self.dimensions = self.get_renderer_dimensions()
        return self.dimensions

    # ========== EVENTS / PARAMS / MEDIA ==========

    def add_event(self, event: Any) -> None:
        """Attach a runtime event (stage entry, evaluation result...)."""
        if isinstance(self.events, list):
            self.events.append(event)
        else:
            self.events = [event]

    def get_events(self) -> Optional[List[Any]]:
        return self.events

    def add_param(self, key: str, value: Any) -> None:
        """Add a runtime param, shared across stages for evaluation."""
        if self.params is None:
            self.params = {}
        self.params[key] = value

    def delete_param(self, key: str) -> None:
        if self.params:
            self.params.pop(key, None)

    def get_params(self) -> Optional[Dict[str, Any]]:
        return self.params

    def get_param(self, key: str) -> Any:
        return self.params.get(key) if self.params else None

    def add_media(self, media: Mapping[str, Any]) -> None:
        """Declare media to bundle with the content. Undeclared media is not packaged."""
        if self.media is None:
            self.media = {}
        self.media[media.get("id")] = media

    def get_media(self) -> Optional[Dict[str, Any]]:
        return self.media

    def lookup_media(self, asset_id: str) -> Optional[Dict[str, Any]]:
        return self.session.get_media(asset_id)

    # ========== ECML ==========

    def to_ecml(self) -> Dict[str, Any]:
        return ecml.to_ecml(self)

    def from_ecml(self, tree: Mapping[str, Any], strict: Optional[bool] = None) -> ecml.ECMLReport:
        if strict is None:
            strict = self.session.config.strict_ecml
        self.ecml_report = ecml.from_ecml(self, tree, strict=strict)
        return self.ecml_report

    # ========== RESOURCES ==========

    def relative_url(self, src: str) -> str:
        """Resolve a plugin-relative asset URL. Use this instead of hard-coding URLs."""
        return self.session.resolve_plugin_resource(self.manifest.id, self.manifest.ver, src)

    def load_resource(self, src: str, data_type: str,
                      callback: Callable[[Optional[Exception], Any], None]) -> None:
        self.session.load_plugin_resource(self.manifest.id, self.manifest.ver, src, data_type, callback)

    def get_help(self, callback: Callable[[str], None]) -> None:
        """Deliver the plugin's help text, or a fixed fallback if it cannot be loaded."""
        fallback = self.session.config.help_unavailable_text

        def _on_loaded(err: Optional[Exception], content: Any) -> None:
            if err is not None:
                logger.error(f"Help for {self.manifest.id} failed to load: {err}")
                callback(fallback)
            else:
                callback(content)

        help_spec = self.manifest.editor.help
        if not help_spec:
            logger.debug(f"No help declared for {self.manifest.id}")
            callback(fallback)
            return
        try:
            self.load_resource(help_spec["src"], help_spec["dataType"], _on_loaded)
        except Exception as e:
            logger.error(f"Cannot load help for {self.manifest.id}: {e}")
            callback(fallback)
