"""
Concrete plugin types.

Reference implementations of the PluginNode contract used by the editor
shell and the test suite.
"""

from .stage import StageNode
from .shape import ShapeNode

__all__ = ["StageNode", "ShapeNode"]
