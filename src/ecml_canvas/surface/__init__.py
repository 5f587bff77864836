"""Concrete rendering surfaces."""

from .qt_surface import QtRenderHandle, QtRenderSurface

__all__ = ["QtRenderHandle", "QtRenderSurface"]
