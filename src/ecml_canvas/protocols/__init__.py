"""
Collaborator protocols and configuration.

Contracts for the pieces the core talks to but does not own: the rendering
surface, menu/sidebar/header managers, the media registry and the plugin
resource loader. Applications register implementations globally or pass
them to an EditorSession directly.
"""

from .editor_config import EditorConfig, set_editor_config, get_editor_config
from .render_surface import OBJECT_EVENTS, HandleCallback, RenderHandle, RenderSurface
from .registries import MenuRegistryProtocol, register_menu_registry, get_menu_registry
from .media import MediaRegistryProtocol, register_media_registry, get_media_registry
from .resources import (
    ResourceCallback,
    ResourceLoaderProtocol,
    register_resource_loader,
    get_resource_loader,
)

__all__ = [
    "EditorConfig",
    "set_editor_config",
    "get_editor_config",
    "OBJECT_EVENTS",
    "HandleCallback",
    "RenderHandle",
    "RenderSurface",
    "MenuRegistryProtocol",
    "register_menu_registry",
    "get_menu_registry",
    "MediaRegistryProtocol",
    "register_media_registry",
    "get_media_registry",
    "ResourceCallback",
    "ResourceLoaderProtocol",
    "register_resource_loader",
    "get_resource_loader",
]
