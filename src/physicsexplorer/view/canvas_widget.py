"""
Simulation Canvas Widget
========================
QWidget that paints the current topic frame through a `PainterCanvas`.

The widget keeps references to the session's animation controller and asks
for a repaint on every emitted frame; painting itself calls the renderer with
the controller's current state, parameters and result.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from physicsexplorer.config import DEFAULT_CANVAS_SIZE
from physicsexplorer.view.canvas import PainterCanvas
from physicsexplorer.view.renderers.registry import create_renderer

if TYPE_CHECKING:
    from physicsexplorer.controller.animation import AnimationController
    from physicsexplorer.controller.session import TopicSession
    from physicsexplorer.view.renderers.base import TopicRenderer

logger = logging.getLogger(__name__)


class SimulationCanvas(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(400, 300)
        self._renderer: TopicRenderer | None = None
        self._animation: AnimationController | None = None

    def sizeHint(self) -> QSize:
        return QSize(*DEFAULT_CANVAS_SIZE)

    def bind(self, session: TopicSession | None) -> None:
        """Follow the animation of ``session`` (None to clear)."""
        if self._animation is not None:
            self._animation.frame_advanced.disconnect(self._on_frame)
            self._animation.state_changed.disconnect(self._on_frame)
        if session is None:
            self._renderer = None
            self._animation = None
        else:
            self._renderer = create_renderer(session.key)
            self._animation = session.animation
            self._animation.frame_advanced.connect(self._on_frame)
            self._animation.state_changed.connect(self._on_frame)
        self.update()

    def _on_frame(self, *_args) -> None:
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor("#ffffff"))
        if self._renderer is None or self._animation is None:
            painter.setPen(QColor("#9e9e9e"))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Select a topic")
            painter.end()
            return

        # Fit the renderer's logical canvas into the widget, keeping aspect
        geometry = self._renderer.GEOMETRY
        scale = min(self.width() / geometry.width, self.height() / geometry.height)
        painter.translate((self.width() - geometry.width * scale) / 2,
                          (self.height() - geometry.height * scale) / 2)
        painter.scale(scale, scale)
        painter.setClipRect(0, 0, int(geometry.width), int(geometry.height))
        painter.setWindow(0, 0, int(geometry.width), int(geometry.height))
        painter.setViewport(0, 0, int(geometry.width), int(geometry.height))

        self._renderer.render(
            PainterCanvas(painter),
            self._animation.state,
            self._animation.params,
            self._animation.result,
        )
        painter.end()
