"""pytest configuration and fixtures for ecml-canvas tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402


SHAPE_MANIFEST = {
    "id": "shape",
    "ver": "1.0",
    "displayName": "Shape",
    "editor": {"playable": False},
}

STAGE_MANIFEST = {"id": "stage", "ver": "1.0"}

BLANK_MANIFEST = {"id": "blank", "ver": "1.0"}


class FakeMenuRegistry:
    """Records every registration call as (kind, payload, manifest id)."""

    def __init__(self):
        self.calls = []

    def register_menu(self, menu, manifest):
        self.calls.append(("menu", menu, manifest.id))

    def register_context_menu(self, menu, manifest):
        self.calls.append(("context", menu, manifest.id))

    def register_sidebar_menu(self, menu, manifest):
        self.calls.append(("sidebar", menu, manifest.id))

    def load_custom_template(self, plugin_id):
        self.calls.append(("template", None, plugin_id))

    def register_header(self, header, manifest):
        self.calls.append(("header", header, manifest.id))

    def kinds(self):
        return [kind for kind, _, _ in self.calls]


class FakeMediaRegistry:
    def __init__(self, media=None):
        self.media = media or {}

    def get_media(self, asset_id):
        return self.media.get(asset_id)


class FakeResourceLoader:
    def __init__(self, resources=None):
        self.resources = resources or {}

    def resolve_plugin_resource(self, plugin_id, plugin_ver, src):
        return f"/plugins/{plugin_id}-{plugin_ver}/{src}"

    def load_plugin_resource(self, plugin_id, plugin_ver, src, data_type, callback):
        if src in self.resources:
            callback(None, self.resources[src])
        else:
            callback(FileNotFoundError(src), None)


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


def _register_defaults(session):
    from ecml_canvas.core import PluginNode
    from ecml_canvas.plugins import ShapeNode, StageNode

    session.register_plugin(StageNode, STAGE_MANIFEST)
    session.register_plugin(ShapeNode, SHAPE_MANIFEST)
    session.register_plugin(PluginNode, BLANK_MANIFEST)
    return session


@pytest.fixture
def media_registry():
    return FakeMediaRegistry({"img2": {"id": "img2", "src": "/assets/img2.png", "type": "image"}})


@pytest.fixture
def logical_session(qapp, media_registry):
    """Session without a rendering surface (nodes stay purely logical)."""
    from ecml_canvas.services import EditorSession

    return _register_defaults(EditorSession(media_registry=media_registry))


@pytest.fixture
def qt_session(qapp, media_registry):
    """Session backed by a QGraphicsScene surface."""
    from ecml_canvas.services import EditorSession
    from ecml_canvas.surface import QtRenderSurface

    return _register_defaults(EditorSession(QtRenderSurface(), media_registry=media_registry))


@pytest.fixture
def stage(qt_session):
    return qt_session.instantiate_plugin("stage")
