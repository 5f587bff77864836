"""Stage: the root container every canvas element is parented under."""

import logging
from collections import Counter
from typing import Any, Dict

from ecml_canvas.core.node import PluginNode

logger = logging.getLogger(__name__)


class StageNode(PluginNode):
    """Logical root node. Owns no render handle; renders its children."""

    def __init__(self, session, manifest, *args):
        super().__init__(session, manifest, *args)
        self.node_type = session.config.stage_type

    def new_instance(self) -> None:
        if self.session.current_stage is None:
            self.session.current_stage = self
            logger.debug(f"Stage {self.id} is now the current stage")

    def render(self, surface) -> None:
        for child in self.children:
            child.render(surface)

    def get_summary(self) -> Dict[str, Any]:
        """Element count per plugin type."""
        return dict(Counter(child.get_type() for child in self.children))

    def remove(self) -> None:
        super().remove()
        if self.session.current_stage is self:
            self.session.current_stage = None
