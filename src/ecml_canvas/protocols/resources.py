"""Plugin resource loader protocol.

Plugins reference icons, help text and templates relative to their own
package. The loader turns those into usable URLs or content.
"""

from typing import Any, Callable, Optional, Protocol

# Callback receives (error, content); error is None on success
ResourceCallback = Callable[[Optional[Exception], Any], None]


class ResourceLoaderProtocol(Protocol):
    """Protocol for resolving and loading plugin-relative resources."""

    def resolve_plugin_resource(self, plugin_id: str, plugin_ver: str, src: str) -> str:
        """Return the absolute URL/path for a plugin-relative resource."""
        ...

    def load_plugin_resource(
        self,
        plugin_id: str,
        plugin_ver: str,
        src: str,
        data_type: str,
        callback: ResourceCallback,
    ) -> None:
        """Load a plugin-relative resource and deliver it through ``callback``."""
        ...


_resource_loader: Optional[ResourceLoaderProtocol] = None


def register_resource_loader(loader: Optional[ResourceLoaderProtocol]) -> None:
    """Register a resource loader implementation.

    Args:
        loader: Object implementing ResourceLoaderProtocol, or None to clear
    """
    global _resource_loader
    _resource_loader = loader


def get_resource_loader() -> Optional[ResourceLoaderProtocol]:
    """Get the registered resource loader, or None."""
    return _resource_loader
