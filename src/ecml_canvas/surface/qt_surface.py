"""
QGraphicsScene-backed rendering surface.

QtRenderHandle pairs a QGraphicsRectItem with a QObject carrying one
signal per object event, so the event bridge can subscribe with
``handle.on({...})``. QtRenderSurface is the display list: adding,
removing, selecting and transforming handles goes through it and emits
the matching handle signals.

Surface properties use render-native names (``left``, ``top``, ``width``,
``height``, ``scaleX``, ``scaleY``, ``angle``, ``opacity``...); anything
else (``id``, ``fill``...) is stored and returned untouched.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtGui import QPen
from PyQt6.QtWidgets import QGraphicsRectItem, QGraphicsScene

from ecml_canvas.core.coordinates import VIRTUAL_HEIGHT, VIRTUAL_WIDTH
from ecml_canvas.protocols.render_surface import OBJECT_EVENTS, HandleCallback

logger = logging.getLogger(__name__)


def _number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class QtRenderHandle(QObject):
    """One live object on a QtRenderSurface."""

    # (options, event)
    added = pyqtSignal(object, object)
    removed = pyqtSignal(object, object)
    selected = pyqtSignal(object, object)
    deselected = pyqtSignal(object, object)
    modified = pyqtSignal(object, object)
    rotating = pyqtSignal(object, object)
    scaling = pyqtSignal(object, object)
    moving = pyqtSignal(object, object)
    skewing = pyqtSignal(object, object)

    def __init__(self, props: Optional[Mapping[str, Any]] = None, surface: Optional["QtRenderSurface"] = None):
        super().__init__()
        self._props: Dict[str, Any] = {
            "left": 0, "top": 0, "width": 0, "height": 0,
            "scaleX": 1, "scaleY": 1, "angle": 0, "skewX": 0, "skewY": 0,
            "opacity": 1, "strokeWidth": 1, "visible": True,
        }
        self.item = QGraphicsRectItem()
        self.has_rotating_point = False
        self._surface = surface
        self.set(**dict(props or {}))

    def set(self, **props: Any) -> None:
        self._props.update(props)
        self._apply()

    def get(self, name: str, default: Any = None) -> Any:
        return self._props.get(name, default)

    def set_visible(self, visible: bool) -> None:
        self.set(visible=bool(visible))

    def on(self, handlers: Mapping[str, HandleCallback]) -> None:
        """Connect callbacks by event name; each receives (handle, options, event)."""
        for name, callback in handlers.items():
            if name not in OBJECT_EVENTS:
                raise ValueError(f"Unknown object event '{name}'. Expected one of {OBJECT_EVENTS}")
            getattr(self, name).connect(self._bind(callback))

    def _bind(self, callback: HandleCallback):
        def slot(options: Any, event: Any) -> None:
            callback(self, options, event)
        return slot

    def remove(self) -> None:
        """Remove from the owning surface. No-op when not on a surface."""
        if self._surface is not None:
            self._surface.remove(self)

    @property
    def on_surface(self) -> bool:
        return self._surface is not None and self._surface.contains(self)

    def _apply(self) -> None:
        p = self._props
        width = _number(p.get("width")) * _number(p.get("scaleX"), 1.0)
        height = _number(p.get("height")) * _number(p.get("scaleY"), 1.0)
        self.item.setRect(0.0, 0.0, width, height)
        self.item.setPos(_number(p.get("left")), _number(p.get("top")))
        self.item.setRotation(_number(p.get("angle")))
        self.item.setOpacity(_number(p.get("opacity"), 1.0))
        self.item.setVisible(bool(p.get("visible", True)))
        pen = QPen(self.item.pen())
        pen.setWidthF(_number(p.get("strokeWidth"), 1.0))
        self.item.setPen(pen)


class QtRenderSurface(QObject):
    """Display list of QtRenderHandles on a QGraphicsScene."""

    def __init__(self, width: int = VIRTUAL_WIDTH, height: int = VIRTUAL_HEIGHT, parent=None):
        super().__init__(parent)
        self.scene = QGraphicsScene(0, 0, width, height)
        self._handles: List[QtRenderHandle] = []
        self._active: Optional[QtRenderHandle] = None

    def create_handle(self, props: Optional[Dict[str, Any]] = None) -> QtRenderHandle:
        return QtRenderHandle(props, surface=self)

    @property
    def handles(self) -> List[QtRenderHandle]:
        return list(self._handles)

    @property
    def active_object(self) -> Optional[QtRenderHandle]:
        return self._active

    def contains(self, handle: QtRenderHandle) -> bool:
        return any(h is handle for h in self._handles)

    def add(self, handle: QtRenderHandle) -> None:
        if self.contains(handle):
            return
        handle._surface = self
        self.scene.addItem(handle.item)
        self._handles.append(handle)
        handle.added.emit({"target": handle}, None)

    def remove(self, handle: QtRenderHandle) -> None:
        if not self.contains(handle):
            return
        if self._active is handle:
            self.deselect()
        self.scene.removeItem(handle.item)
        self._handles = [h for h in self._handles if h is not handle]
        handle.removed.emit({"target": handle}, None)

    def clear(self) -> None:
        for handle in list(self._handles):
            self.remove(handle)

    def select(self, handle: QtRenderHandle) -> None:
        if self._active is handle or not self.contains(handle):
            return
        self.deselect()
        self._active = handle
        handle.selected.emit({"target": handle}, None)

    def deselect(self) -> None:
        handle, self._active = self._active, None
        if handle is not None:
            handle.deselected.emit({"target": handle}, None)

    # ========== TRANSFORMS ==========

    def move(self, handle: QtRenderHandle, left: float, top: float) -> None:
        handle.set(left=left, top=top)
        handle.moving.emit({"target": handle}, None)

    def scale(self, handle: QtRenderHandle, scale_x: float, scale_y: float) -> None:
        handle.set(scaleX=scale_x, scaleY=scale_y)
        handle.scaling.emit({"target": handle}, None)

    def rotate(self, handle: QtRenderHandle, angle: float) -> None:
        handle.set(angle=angle)
        handle.rotating.emit({"target": handle}, None)

    def skew(self, handle: QtRenderHandle, skew_x: float, skew_y: float) -> None:
        handle.set(skewX=skew_x, skewY=skew_y)
        handle.skewing.emit({"target": handle}, None)

    def modify(self, handle: QtRenderHandle, **props: Any) -> None:
        """Commit a change (end of drag/resize/rotate) and emit ``modified``."""
        if props:
            handle.set(**props)
        handle.modified.emit({"target": handle}, None)

    def render(self) -> None:
        self.scene.update()
