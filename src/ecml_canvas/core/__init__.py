"""
Core object model.

Pure-Python plugin node model with no Qt dependency: coordinate
conversion, manifests, config manifest merging and ECML marshalling.
"""

from .coordinates import VIRTUAL_WIDTH, VIRTUAL_HEIGHT, pixel_to_percent, percent_to_pixel, to_render_props
from .manifest import PluginManifest, EditorManifest
from .config_manifest import BASE_CONFIG_MANIFEST, merge_config_manifests
from .ecml import ECMLReport, FieldOutcome, FieldStatus, to_ecml, from_ecml, wrap_text_block
from .errors import ECMLError, ECMLDecodeError, PluginNotRegisteredError
from .node import PluginNode

__all__ = [
    "VIRTUAL_WIDTH",
    "VIRTUAL_HEIGHT",
    "pixel_to_percent",
    "percent_to_pixel",
    "to_render_props",
    "PluginManifest",
    "EditorManifest",
    "BASE_CONFIG_MANIFEST",
    "merge_config_manifests",
    "ECMLReport",
    "FieldOutcome",
    "FieldStatus",
    "to_ecml",
    "from_ecml",
    "wrap_text_block",
    "ECMLError",
    "ECMLDecodeError",
    "PluginNotRegisteredError",
    "PluginNode",
]
