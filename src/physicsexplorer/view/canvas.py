"""
Canvas
======
The drawing surface renderers talk to.

Classes:
    Canvas: Abstract primitives (lines, shapes, text, arrows).
    DrawCommand: One recorded primitive call.
    RecordingCanvas: Keeps the calls as a list of `DrawCommand` (one
        `CanvasFrame`); used by tests and for comparing frames.
    PainterCanvas: Forwards the calls to a `QPainter`.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen, QPolygonF

from physicsexplorer.view.mapping import Point

Color = str


class Canvas(ABC):
    """Drawing primitives in canvas pixels (origin top-left, y down)."""

    @abstractmethod
    def clear(self, color: Color) -> None:
        pass

    @abstractmethod
    def line(self, start: Point, end: Point, color: Color, width: float = 1.0) -> None:
        pass

    @abstractmethod
    def polyline(self, points: Sequence[Point], color: Color, width: float = 1.0,
                 closed: bool = False) -> None:
        pass

    @abstractmethod
    def ellipse(self, center: Point, rx: float, ry: float, fill: Optional[Color] = None,
                stroke: Optional[Color] = None, width: float = 1.0) -> None:
        pass

    @abstractmethod
    def rect(self, top_left: Point, size: tuple[float, float], fill: Optional[Color] = None,
             stroke: Optional[Color] = None, width: float = 1.0) -> None:
        pass

    @abstractmethod
    def polygon(self, points: Sequence[Point], fill: Optional[Color] = None,
                stroke: Optional[Color] = None, width: float = 1.0) -> None:
        pass

    @abstractmethod
    def arc(self, center: Point, radius: float, start_deg: float, span_deg: float,
            color: Color, width: float = 1.0) -> None:
        """Arc with angles in degrees, counter-clockwise on screen."""
        pass

    @abstractmethod
    def text(self, position: Point, text: str, color: Color = "#000000", size: int = 10,
             align: str = "center") -> None:
        """``align`` is one of "left", "center", "right" around ``position``."""
        pass

    # ---- composite shapes ----

    def circle(self, center: Point, radius: float, fill: Optional[Color] = None,
               stroke: Optional[Color] = None, width: float = 1.0) -> None:
        self.ellipse(center, radius, radius, fill=fill, stroke=stroke, width=width)

    def arrow(self, start: Point, end: Point, color: Color, width: float = 2.0,
              head: float = 10.0) -> None:
        """Line with a filled triangular head at ``end``."""
        dx, dy = end[0] - start[0], end[1] - start[1]
        length = math.hypot(dx, dy)
        self.line(start, end, color, width)
        if length == 0:
            return
        ux, uy = dx / length, dy / length
        size = min(head, length)
        base = (end[0] - ux * size, end[1] - uy * size)
        half = size * 0.6
        self.polygon(
            [end, (base[0] - uy * half, base[1] + ux * half), (base[0] + uy * half, base[1] - ux * half)],
            fill=color,
        )


@dataclass(frozen=True)
class DrawCommand:
    kind: str
    args: tuple[Any, ...]


def _freeze(value: Any) -> Any:
    """Make nested point lists hashable and comparable."""
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, float):
        return float(value)
    return value


class RecordingCanvas(Canvas):
    def __init__(self) -> None:
        self.commands: list[DrawCommand] = []

    def _record(self, kind: str, *args: Any) -> None:
        self.commands.append(DrawCommand(kind, tuple(_freeze(a) for a in args)))

    def kinds(self) -> list[str]:
        return [c.kind for c in self.commands]

    def of_kind(self, kind: str) -> list[DrawCommand]:
        return [c for c in self.commands if c.kind == kind]

    def texts(self) -> list[str]:
        return [c.args[1] for c in self.of_kind("text")]

    def clear(self, color: Color) -> None:
        self._record("clear", color)

    def line(self, start: Point, end: Point, color: Color, width: float = 1.0) -> None:
        self._record("line", start, end, color, width)

    def polyline(self, points: Sequence[Point], color: Color, width: float = 1.0,
                 closed: bool = False) -> None:
        self._record("polyline", list(points), color, width, closed)

    def ellipse(self, center: Point, rx: float, ry: float, fill: Optional[Color] = None,
                stroke: Optional[Color] = None, width: float = 1.0) -> None:
        self._record("ellipse", center, rx, ry, fill, stroke, width)

    def rect(self, top_left: Point, size: tuple[float, float], fill: Optional[Color] = None,
             stroke: Optional[Color] = None, width: float = 1.0) -> None:
        self._record("rect", top_left, size, fill, stroke, width)

    def polygon(self, points: Sequence[Point], fill: Optional[Color] = None,
                stroke: Optional[Color] = None, width: float = 1.0) -> None:
        self._record("polygon", list(points), fill, stroke, width)

    def arc(self, center: Point, radius: float, start_deg: float, span_deg: float,
            color: Color, width: float = 1.0) -> None:
        self._record("arc", center, radius, start_deg, span_deg, color, width)

    def text(self, position: Point, text: str, color: Color = "#000000", size: int = 10,
             align: str = "center") -> None:
        self._record("text", position, text, color, size, align)


_ALIGN = {
    "left": Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter,
    "center": Qt.AlignmentFlag.AlignCenter,
    "right": Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter,
}
_TEXT_BOX = 400.0


def _points(points: Iterable[Point]) -> QPolygonF:
    return QPolygonF([QPointF(x, y) for x, y in points])


class PainterCanvas(Canvas):
    """Draws onto an active `QPainter` (the widget sets up the scaling)."""

    def __init__(self, painter: QPainter) -> None:
        self._painter = painter

    def _pen(self, color: Optional[Color], width: float) -> QPen:
        if color is None:
            return QPen(Qt.PenStyle.NoPen)
        pen = QPen(QColor(color))
        pen.setWidthF(width)
        return pen

    def _brush(self, color: Optional[Color]) -> QBrush:
        return QBrush(QColor(color)) if color is not None else QBrush(Qt.BrushStyle.NoBrush)

    def clear(self, color: Color) -> None:
        window = self._painter.window()
        self._painter.fillRect(window, QColor(color))

    def line(self, start: Point, end: Point, color: Color, width: float = 1.0) -> None:
        self._painter.setPen(self._pen(color, width))
        self._painter.drawLine(QPointF(*start), QPointF(*end))

    def polyline(self, points: Sequence[Point], color: Color, width: float = 1.0,
                 closed: bool = False) -> None:
        self._painter.setPen(self._pen(color, width))
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        if closed:
            self._painter.drawPolygon(_points(points))
        else:
            self._painter.drawPolyline(_points(points))

    def ellipse(self, center: Point, rx: float, ry: float, fill: Optional[Color] = None,
                stroke: Optional[Color] = None, width: float = 1.0) -> None:
        self._painter.setPen(self._pen(stroke, width))
        self._painter.setBrush(self._brush(fill))
        self._painter.drawEllipse(QPointF(*center), rx, ry)

    def rect(self, top_left: Point, size: tuple[float, float], fill: Optional[Color] = None,
             stroke: Optional[Color] = None, width: float = 1.0) -> None:
        self._painter.setPen(self._pen(stroke, width))
        self._painter.setBrush(self._brush(fill))
        self._painter.drawRect(QRectF(top_left[0], top_left[1], size[0], size[1]))

    def polygon(self, points: Sequence[Point], fill: Optional[Color] = None,
                stroke: Optional[Color] = None, width: float = 1.0) -> None:
        self._painter.setPen(self._pen(stroke, width))
        self._painter.setBrush(self._brush(fill))
        self._painter.drawPolygon(_points(points))

    def arc(self, center: Point, radius: float, start_deg: float, span_deg: float,
            color: Color, width: float = 1.0) -> None:
        self._painter.setPen(self._pen(color, width))
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        box = QRectF(center[0] - radius, center[1] - radius, 2 * radius, 2 * radius)
        # Qt angles are in 1/16 degree
        self._painter.drawArc(box, int(start_deg * 16), int(span_deg * 16))

    def text(self, position: Point, text: str, color: Color = "#000000", size: int = 10,
             align: str = "center") -> None:
        font = QFont(self._painter.font())
        font.setPointSize(size)
        self._painter.setFont(font)
        self._painter.setPen(QColor(color))
        x, y = position
        match align:
            case "left":
                box = QRectF(x, y - _TEXT_BOX / 2, _TEXT_BOX, _TEXT_BOX)
            case "right":
                box = QRectF(x - _TEXT_BOX, y - _TEXT_BOX / 2, _TEXT_BOX, _TEXT_BOX)
            case _:
                box = QRectF(x - _TEXT_BOX / 2, y - _TEXT_BOX / 2, _TEXT_BOX, _TEXT_BOX)
        self._painter.drawText(box, int(_ALIGN.get(align, _ALIGN["center"]).value), text)
