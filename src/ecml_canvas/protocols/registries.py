"""Menu registry protocol for toolbar, sidebar and header contributions.

Allows applications to provide their own menu managers without the core
depending on specific UI implementations.

Example:
    from ecml_canvas.protocols import register_menu_registry
    from myapp.toolbar import MyMenuRegistry

    register_menu_registry(MyMenuRegistry())
"""

from typing import Any, Dict, Optional, Protocol

from ecml_canvas.core.manifest import PluginManifest


class MenuRegistryProtocol(Protocol):
    """Receives manifest-scoped menu registrations during type registration."""

    def register_menu(self, menu: Dict[str, Any], manifest: PluginManifest) -> None:
        """Register a main toolbar menu entry."""
        ...

    def register_context_menu(self, menu: Dict[str, Any], manifest: PluginManifest) -> None:
        """Register a context menu entry."""
        ...

    def register_sidebar_menu(self, menu: Dict[str, Any], manifest: PluginManifest) -> None:
        ...

    def load_custom_template(self, plugin_id: str) -> None:
        """Load the sidebar template a plugin may ship."""
        ...

    def register_header(self, header: Dict[str, Any], manifest: PluginManifest) -> None:
        ...


# Global registry instance (set by application)
_menu_registry: Optional[MenuRegistryProtocol] = None


def register_menu_registry(registry: Optional[MenuRegistryProtocol]) -> None:
    """Register a menu registry implementation.

    Args:
        registry: Object implementing MenuRegistryProtocol, or None to clear
    """
    global _menu_registry
    _menu_registry = registry


def get_menu_registry() -> Optional[MenuRegistryProtocol]:
    """Get the registered menu registry, or None."""
    return _menu_registry
