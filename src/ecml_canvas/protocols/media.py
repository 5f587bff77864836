"""Media registry protocol for resolving ECML asset references."""

from typing import Any, Dict, Optional, Protocol


class MediaRegistryProtocol(Protocol):
    """Resolves an asset id to a media descriptor."""

    def get_media(self, asset_id: str) -> Optional[Dict[str, Any]]:
        """Get the media descriptor for an asset.

        Args:
            asset_id: Value of an ECML ``asset`` attribute

        Returns:
            Media descriptor with at least an ``id`` key, or None if unknown
        """
        ...


_media_registry: Optional[MediaRegistryProtocol] = None


def register_media_registry(registry: Optional[MediaRegistryProtocol]) -> None:
    global _media_registry
    _media_registry = registry


def get_media_registry() -> Optional[MediaRegistryProtocol]:
    return _media_registry
