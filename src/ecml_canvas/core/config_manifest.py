"""
Config manifest merging.

A config manifest is an ordered list of property descriptors that tells a
configuration panel which properties of a node are user-editable. The type
manifest contributes one list; each node carries an instance-level list
seeded from BASE_CONFIG_MANIFEST. Merging de-duplicates by property name
and strips ``autoplay`` for types that are not playable.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

AUTOPLAY_PROPERTY = "autoplay"

BASE_CONFIG_MANIFEST: List[Dict[str, Any]] = [
    {
        "propertyName": "opacity",
        "title": "Opacity",
        "description": "Set the transparency of the element",
        "dataType": "slider",
        "required": True,
        "minimumValue": 0,
        "maximumValue": 100,
        "defaultValue": 100,
    },
    {
        "propertyName": "strokeWidth",
        "title": "Border",
        "description": "Set the border width of the element",
        "dataType": "rangeslider",
        "required": True,
        "minimumValue": 0,
        "maximumValue": 20,
        "defaultValue": 1,
    },
    {
        "propertyName": "stroke",
        "title": "Border Colour",
        "description": "Set the border colour of the element",
        "dataType": "colorpicker",
        "required": True,
        "defaultValue": "rgba(255, 255, 255, 0)",
    },
    {
        "propertyName": AUTOPLAY_PROPERTY,
        "title": "Autoplay",
        "description": "Play automatically when the stage loads",
        "dataType": "boolean",
        "required": False,
        "defaultValue": False,
    },
    {
        "propertyName": "visible",
        "title": "Visible",
        "description": "Show the element when the stage loads",
        "dataType": "boolean",
        "required": False,
        "defaultValue": True,
    },
]


def base_config_manifest() -> List[Dict[str, Any]]:
    """Fresh copy of the base descriptors for a new node."""
    return copy.deepcopy(BASE_CONFIG_MANIFEST)


def property_name(descriptor: Dict[str, Any]) -> Optional[str]:
    """Descriptor key; ``propertyName`` with ``name`` accepted as an alias."""
    return descriptor.get("propertyName", descriptor.get("name"))


def merge_config_manifests(
    type_entries: Iterable[Dict[str, Any]],
    instance_entries: Optional[Iterable[Dict[str, Any]]],
    playable: bool,
) -> List[Dict[str, Any]]:
    """
    Merge type-level and instance-level descriptors.

    Order follows first appearance (type entries, then new instance entries).
    When both sides describe the same property the instance descriptor wins.
    Descriptors without a name are kept as-is.

    Args:
        type_entries: Descriptors from the plugin manifest
        instance_entries: Per-node descriptors, or None
        playable: Whether the plugin type declares itself playable

    Returns:
        New list of deep-copied descriptors
    """
    merged: List[Dict[str, Any]] = []
    positions: Dict[str, int] = {}

    for source in (type_entries, instance_entries or ()):
        for descriptor in source:
            name = property_name(descriptor)
            entry = copy.deepcopy(descriptor)
            if name is None:
                merged.append(entry)
            elif name in positions:
                merged[positions[name]] = entry
            else:
                positions[name] = len(merged)
                merged.append(entry)

    if not playable:
        merged = [d for d in merged if property_name(d) != AUTOPLAY_PROPERTY]

    logger.debug(f"Merged config manifest: {[property_name(d) for d in merged]}")
    return merged
