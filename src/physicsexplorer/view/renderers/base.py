"""
Renderer Base
=============
A renderer turns ``(SimulationState, ParameterSet, CalculationResult)`` into
draw calls on a `Canvas`. It holds no state between frames: the derived
quantities are recomputed from the topic's pure ``derive`` at
``state.elapsed_time``, so drawing the same arguments twice gives the same
commands.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Optional

from physicsexplorer.model.kinematics import DerivedQuantities
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import CalculationResult, CalculationSuccess, allows_simulation
from physicsexplorer.model.state import SimulationState
from physicsexplorer.model.topics import get_topic
from physicsexplorer.view.canvas import Canvas
from physicsexplorer.view.mapping import CanvasGeometry, Point, clamp

BACKGROUND = "#f0f0f0"
INK = "#212121"
MUTED = "#9e9e9e"
POSITIVE = "#e53935"
NEGATIVE = "#1976d2"
WIRE = "#795548"
ELECTRON = "#1e88e5"
FIELD = "#8e24aa"
LIGHT = "#fbc02d"
GLASS = "#b3e5fc"


class TopicRenderer(ABC):
    """Base class for topic renderers."""
    KEY: str = "base"  # Override in subclass
    GEOMETRY: CanvasGeometry = CanvasGeometry(600, 400)

    def render(
        self,
        canvas: Canvas,
        state: SimulationState,
        params: Optional[ParameterSet],
        result: Optional[CalculationResult],
    ) -> None:
        """Draw one frame."""
        canvas.clear(BACKGROUND)
        if params is None or not allows_simulation(result):
            self.draw_placeholder(canvas, result)
            return
        derived = get_topic(self.KEY).derive(state.elapsed_time, params)
        self.draw(canvas, derived, params, result, state)

    @abstractmethod
    def draw(
        self,
        canvas: Canvas,
        derived: DerivedQuantities,
        params: ParameterSet,
        result: CalculationResult,
        state: SimulationState,
    ) -> None:
        """Topic specific drawing."""
        pass

    def draw_placeholder(self, canvas: Canvas, result: Optional[CalculationResult]) -> None:
        cx, cy = self.GEOMETRY.center
        message = "Enter the parameters and press Calculate."
        if result is not None and not allows_simulation(result):
            message = "Fix the input to see the simulation."
        canvas.text((cx, cy), message, MUTED, size=12)

    # ---- shared drawing helpers ----

    def draw_caption(self, canvas: Canvas, lines: list[str], origin: Point = (10.0, 15.0)) -> None:
        x, y = origin
        for i, line in enumerate(lines):
            canvas.text((x, y + 16 * i), line, INK, size=10, align="left")

    def draw_status(self, canvas: Canvas, state: SimulationState) -> None:
        label = f"t = {state.tick_count} ticks" if state.is_running else "Press Simulate to animate"
        canvas.text((self.GEOMETRY.width - 10, self.GEOMETRY.height - 12), label, MUTED,
                    size=9, align="right")


def primary_text(result: CalculationResult) -> str:
    if isinstance(result, CalculationSuccess):
        return str(result.primary)
    return str(getattr(result, "kind", ""))


def draw_galvanometer(canvas: Canvas, center: Point, radius: float, needle_angle: float,
                      limit: float, label: str = "G") -> None:
    """
    Dial with a needle; ``needle_angle`` is measured from vertical,
    positive to the right, and is clamped to ``±limit``.
    """
    cx, cy = center
    canvas.arc(center, radius, 0.0, 180.0, INK, 2.0)
    canvas.line((cx - radius, cy), (cx + radius, cy), INK, 2.0)
    for tick in (-limit, 0.0, limit):
        outer = (cx + radius * math.sin(tick), cy - radius * math.cos(tick))
        inner = (cx + 0.85 * radius * math.sin(tick), cy - 0.85 * radius * math.cos(tick))
        canvas.line(inner, outer, MUTED, 1.0)
    angle = clamp(needle_angle, -limit, limit)
    tip = (cx + 0.9 * radius * math.sin(angle), cy - 0.9 * radius * math.cos(angle))
    canvas.line(center, tip, POSITIVE, 2.0)
    canvas.circle(center, 3.0, fill=INK)
    canvas.text((cx, cy + 14), label, INK, size=9)


def charge_color(value: float) -> str:
    return NEGATIVE if value < 0 else POSITIVE


def charge_sign(value: float) -> str:
    return "-" if value < 0 else "+"
