"""
Plugin manifest model.

One manifest describes a plugin type: its identity, the editor menus it
contributes, behaviour flags and the configuration schema it exposes.
Every node receives its own deep copy, so nodes never mutate the shared
source manifest.

Manifests arrive as plain JSON mappings using camelCase keys
(``displayName``, ``sidebarMenu``, ``configManifest``); ``from_dict``
maps them onto the dataclasses below. Missing sections fall back to
empty defaults rather than raising.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class EditorManifest:
    """Editor section of a plugin manifest.

    Attributes:
        menu: Toolbar/context menu entries (``category`` is "main" or "context")
        sidebar_menu: Sidebar menu entries
        header: Header entries
        behaviour: Behaviour flags such as ``rotatable``
        playable: Whether the type supports autoplay
        config_manifest: Ordered property descriptors for the config panel
        help: Help resource descriptor (``src`` and ``dataType``)
    """

    menu: List[Dict[str, Any]] = field(default_factory=list)
    sidebar_menu: List[Dict[str, Any]] = field(default_factory=list)
    header: List[Dict[str, Any]] = field(default_factory=list)
    behaviour: Dict[str, Any] = field(default_factory=dict)
    playable: bool = False
    config_manifest: List[Dict[str, Any]] = field(default_factory=list)
    help: Optional[Dict[str, Any]] = None

    @property
    def rotatable(self) -> bool:
        return self.behaviour.get("rotatable") is True

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "EditorManifest":
        raw = raw or {}
        return cls(
            menu=list(raw.get("menu") or []),
            sidebar_menu=list(raw.get("sidebarMenu") or []),
            header=list(raw.get("header") or []),
            behaviour=dict(raw.get("behaviour") or {}),
            playable=raw.get("playable") is True,
            config_manifest=list(raw.get("configManifest") or []),
            help=raw.get("help"),
        )


@dataclass
class PluginManifest:
    """Immutable-per-type plugin descriptor."""

    id: str
    ver: str = "1.0"
    display_name: Optional[str] = None
    short_id: Optional[str] = None
    editor: EditorManifest = field(default_factory=EditorManifest)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "PluginManifest":
        """Build a manifest from its JSON mapping.

        Args:
            raw: Manifest mapping; only ``id`` is required

        Returns:
            PluginManifest with a deep-copied editor section
        """
        raw = copy.deepcopy(dict(raw))
        manifest = cls(
            id=raw["id"],
            ver=str(raw.get("ver", raw.get("version", "1.0"))),
            display_name=raw.get("displayName"),
            short_id=raw.get("shortId"),
            editor=EditorManifest.from_dict(raw.get("editor")),
        )
        logger.debug(f"Loaded manifest {manifest.id}@{manifest.ver}")
        return manifest

    def clone(self) -> "PluginManifest":
        """Return a deep copy safe for per-node mutation."""
        return copy.deepcopy(self)


def as_manifest(manifest: Any) -> PluginManifest:
    """Accept either a PluginManifest or its raw mapping."""
    if isinstance(manifest, PluginManifest):
        return manifest
    return PluginManifest.from_dict(manifest)
