"""
ecml-canvas: plugin node lifecycle and ECML marshalling for canvas editors.

Every element on an editing canvas is a plugin node that mediates between
its persisted ECML attribute tree (percent space) and a live object on a
rendering surface (pixel space).

Architecture:
- Tier 1 (Core): Pure-Python node model, coordinates, manifests, ECML codec
- Tier 2 (Protocols): Collaborator contracts and EditorConfig
- Tier 3 (Services): Instance registry, event bus, event bridge, EditorSession
- Tier 4 (Surface): QGraphicsScene-backed rendering surface
- Plugins: Stage and Shape reference plugin types
"""

__version__ = "0.1.0"

from .core import (
    PluginNode,
    PluginManifest,
    ECMLReport,
    FieldStatus,
    ECMLDecodeError,
    PluginNotRegisteredError,
    pixel_to_percent,
    percent_to_pixel,
)
from .protocols import EditorConfig, set_editor_config, get_editor_config
from .services import EditorSession

__all__ = [
    "__version__",
    "PluginNode",
    "PluginManifest",
    "ECMLReport",
    "FieldStatus",
    "ECMLDecodeError",
    "PluginNotRegisteredError",
    "pixel_to_percent",
    "percent_to_pixel",
    "EditorConfig",
    "set_editor_config",
    "get_editor_config",
    "EditorSession",
]
