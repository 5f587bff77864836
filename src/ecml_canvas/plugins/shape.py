"""Rectangle shape plugin."""

from typing import Any, Dict

from ecml_canvas.core.coordinates import to_render_props
from ecml_canvas.core.node import PluginNode


class ShapeNode(PluginNode):
    """Filled rectangle backed by one render handle.

    Extra attributes: ``type`` (shape kind, default "rect"), ``fill``,
    ``radius`` and ``color``.
    """

    def new_instance(self) -> None:
        surface = self.session.surface
        if surface is None:
            return
        props = to_render_props(self.attributes)
        props.setdefault("fill", self.attributes.get("fill", "#ffffff"))
        self.render_handle = surface.create_handle(props)

    def get_meta(self) -> Dict[str, Any]:
        return {
            "type": self.attributes.get("type", "rect"),
            "fill": self.attributes.get("fill"),
        }

    def do_copy(self) -> Dict[str, Any]:
        """Duplicate as ECML with a fresh id, offset by 5% so the copy is visible."""
        copy = self.to_ecml()
        copy.pop("id", None)
        copy["x"] = round(copy.get("x", 0) + 5, 2)
        copy["y"] = round(copy.get("y", 0) + 5, 2)
        return copy
