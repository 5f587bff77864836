"""Editor configuration.

Provides hooks for applications to customize node lifecycle behavior.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, field


def _default_node_config() -> Dict[str, Any]:
    return {
        "opacity": 100,
        "strokeWidth": 1,
        "stroke": "rgba(255, 255, 255, 0)",
        "autoplay": False,
        "visible": True,
    }


@dataclass
class EditorConfig:
    """Configuration for plugin node lifecycle behavior.

    Attributes:
        stage_type: node_type of root containers; children of a stage do not
            emit "object:modified" on creation
        default_node_config: Config seeded into every new instance
        help_unavailable_text: Fallback delivered when help cannot be loaded
        strict_ecml: Raise on undecodable ECML text blocks instead of ignoring them
        cascade_logical_removal: Deregister every descendant when a parent is removed
        log_bridge_events: Verbose debug logging for every bridged surface event
    """

    stage_type: str = "stage"
    default_node_config: Dict[str, Any] = field(default_factory=_default_node_config)
    help_unavailable_text: str = "Help is not available."
    strict_ecml: bool = False
    cascade_logical_removal: bool = True
    log_bridge_events: bool = False


# Global config instance (set by application)
_editor_config: Optional[EditorConfig] = None


def set_editor_config(config: Optional[EditorConfig]) -> None:
    """Set the global editor configuration.

    Args:
        config: EditorConfig instance, or None to restore defaults
    """
    global _editor_config
    _editor_config = config


def get_editor_config() -> EditorConfig:
    """Get the current editor configuration.

    Returns:
        Current EditorConfig or default if not set
    """
    if _editor_config is None:
        return EditorConfig()
    return _editor_config
