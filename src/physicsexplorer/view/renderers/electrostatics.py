from __future__ import annotations

import math

from physicsexplorer.model.kinematics import DerivedQuantities
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import CalculationResult
from physicsexplorer.model.state import SimulationState
from physicsexplorer.view import mapping as m
from physicsexplorer.view.canvas import Canvas
from physicsexplorer.view.renderers.base import (
    FIELD, INK, MUTED, NEGATIVE, POSITIVE, TopicRenderer, charge_color, charge_sign, primary_text,
)
from physicsexplorer.view.renderers.registry import register_renderer


@register_renderer
class ElectricForceRenderer(TopicRenderer):
    """Two charges drifting apart (like signs) or together (opposite signs)."""
    KEY = "electric-forces"
    GEOMETRY = m.FORCE_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        q1, q2 = params["charge1"], params["charge2"]
        cx, cy = self.GEOMETRY.center
        half = derived["separation"] * m.FORCE_PX_PER_M / 2
        x1 = m.clamp(cx - half, m.CHARGE_RADIUS_PX, cx)
        x2 = m.clamp(cx + half, cx, self.GEOMETRY.width - m.CHARGE_RADIUS_PX)

        # Field lines bow outwards between the charges
        for i in range(-3, 4):
            points = []
            for t in m.spread(21, 0.0, 1.05):
                t = min(t, 1.0)
                x = (1 - t) * x1 + t * x2
                points.append((x, cy + i * 15 + math.sin(math.pi * t) * 30 * i / 3))
            canvas.polyline(points, "#aaaaaa")

        interaction = derived["interaction"]
        if interaction != 0:
            color = POSITIVE if interaction > 0 else NEGATIVE
            length = m.arrow_length(derived["force"], m.FORCE_ARROW_BASE_PX,
                                    m.FORCE_ARROW_DIVISOR, m.FORCE_ARROW_CAP_PX)
            outward = 1 if interaction > 0 else -1
            canvas.arrow((x1, cy), (x1 - outward * length, cy), color, 4.0)
            canvas.arrow((x2, cy), (x2 + outward * length, cy), color, 4.0)

        for x, q, name in ((x1, q1, "q₁"), (x2, q2, "q₂")):
            canvas.circle((x, cy), m.CHARGE_RADIUS_PX, fill=charge_color(q))
            canvas.text((x, cy), charge_sign(q), "#ffffff", size=14)
            canvas.text((x, cy - 32), f"{name} = {q:.2e} C", INK)

        canvas.line((x1, cy + 30), (x2, cy + 30), MUTED)
        canvas.text(((x1 + x2) / 2, cy + 45), f"d = {derived['separation']:.2f} m", INK)

        kind = {1.0: "Repulsive", -1.0: "Attractive"}.get(interaction, "None")
        canvas.text((cx, self.GEOMETRY.height - 35), kind, INK, size=11)
        canvas.text((cx, self.GEOMETRY.height - 15), f"F = {derived['force']:.2e} N", INK, size=11)
        self.draw_caption(canvas, [f"Coulomb force: {primary_text(result)}"])
        self.draw_status(canvas, state)


@register_renderer
class ElectricFieldRenderer(TopicRenderer):
    """Point charge with radial field lines and a probe easing to distance r."""
    KEY = "electric-fields"
    GEOMETRY = m.FIELD_CANVAS
    SOURCE_X = 80.0

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        q = params["charge"]
        _, cy = self.GEOMETRY.center
        source = (self.SOURCE_X, cy)
        outward = derived["sign"] > 0

        for k in range(m.FIELD_LINE_COUNT):
            angle = 2 * math.pi * k / m.FIELD_LINE_COUNT
            near = m.polar(source, 25.0, angle)
            far = m.polar(source, 70.0, angle)
            if outward:
                canvas.arrow(near, far, FIELD, 1.0, head=6.0)
            else:
                canvas.arrow(far, near, FIELD, 1.0, head=6.0)

        canvas.circle(source, 20.0, fill=charge_color(q))
        canvas.text(source, charge_sign(q), "#ffffff", size=14)

        probe_x = m.map_to_pixels(derived["probe_distance"], m.FIELD_PX_PER_M, self.GEOMETRY,
                                  origin=self.SOURCE_X)
        probe_x = m.clamp(probe_x, self.SOURCE_X + 25, self.GEOMETRY.width - 15)
        probe = (probe_x, cy)
        length = m.arrow_length(derived["field"], m.FIELD_ARROW_BASE_PX,
                                m.FIELD_ARROW_DIVISOR, m.FIELD_ARROW_CAP_PX)
        # Arrow points away from a positive source and towards a negative one
        tip_x = probe_x + length if outward else probe_x - length
        canvas.line((self.SOURCE_X + 20, cy + 40), (probe_x, cy + 40), MUTED)
        canvas.text(((self.SOURCE_X + probe_x) / 2, cy + 52), f"r = {derived['probe_distance']:.2f} m", INK)
        canvas.arrow(probe, (tip_x, cy), POSITIVE, 3.0)
        canvas.circle(probe, 6.0, fill="#ffffff", stroke=INK)
        canvas.text((probe_x, cy - 20), f"E = {derived['field']:.2e} N/C", INK)

        self.draw_caption(canvas, [f"Field at r: {primary_text(result)}"])
        self.draw_status(canvas, state)


@register_renderer
class CapacitanceRenderer(TopicRenderer):
    """Charge building up on parallel plates or concentric spheres."""
    KEY = "capacitance"
    GEOMETRY = m.CAPACITOR_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        level = derived["charge_level"]
        if params.variant == "spherical":
            self._draw_spherical(canvas, level, params)
        else:
            self._draw_parallel(canvas, level, params)
        self.draw_caption(canvas, [
            f"Capacitance: {primary_text(result)}",
            f"Charge: {level * 100:.0f}%",
            f"κ = {params['dielectric_constant']:g}",
        ])
        self.draw_status(canvas, state)

    def _draw_parallel(self, canvas: Canvas, level: float, params: ParameterSet) -> None:
        cx, cy = self.GEOMETRY.center
        height = m.to_pixels(params["plate_area"], m.PLATE_PX_PER_M2, 20.0, m.PLATE_MAX_WIDTH_PX)
        gap = m.to_pixels(params["plate_separation"], m.PLATE_SEPARATION_PX_PER_M,
                          m.PLATE_MIN_SEPARATION_PX, 300.0)
        left, right = cx - gap / 2, cx + gap / 2
        top = cy - height / 2

        if params["dielectric_constant"] != 1:
            canvas.rect((left, top), (gap, height), fill="#fff3e0")
        canvas.rect((left - 8, top), (8, height), fill=POSITIVE)
        canvas.rect((right, top), (8, height), fill=NEGATIVE)

        count = math.floor(level * m.PLATE_CHARGE_MARKERS) + 1
        for y in m.spread(count, top + 6, top + height):
            canvas.text((left - 20, y), "+", POSITIVE, size=12)
            canvas.text((right + 20, y), "-", NEGATIVE, size=12)

        if level > 0:
            for y in m.spread(5, top + height / 10, top + height):
                canvas.arrow((left + 2, y), (right - 2, y), FIELD, 1.0 + 2 * level, head=6.0)

        # Wires to a battery below
        canvas.line((left - 4, top + height), (left - 4, cy + 150), INK)
        canvas.line((right + 4, top + height), (right + 4, cy + 150), INK)
        canvas.line((left - 4, cy + 150), (cx - 10, cy + 150), INK)
        canvas.line((right + 4, cy + 150), (cx + 10, cy + 150), INK)
        canvas.line((cx - 10, cy + 135), (cx - 10, cy + 165), INK, 3.0)
        canvas.line((cx + 10, cy + 142), (cx + 10, cy + 158), INK, 3.0)

    def _draw_spherical(self, canvas: Canvas, level: float, params: ParameterSet) -> None:
        center = self.GEOMETRY.center
        inner = m.to_pixels(params["inner_radius"], m.SPHERE_PX_PER_M, m.SPHERE_MIN_RADIUS_PX, 150.0)
        outer = m.to_pixels(params["outer_radius"], m.SPHERE_PX_PER_M,
                            inner + m.SPHERE_MIN_GAP_PX, 180.0)
        canvas.circle(center, outer, stroke=NEGATIVE, width=4.0)
        canvas.circle(center, inner, fill="#ffcdd2", stroke=POSITIVE, width=3.0)

        count = math.floor(level * m.SPHERE_CHARGE_MARKERS) + 4
        for angle in m.spread(count, 0.0, 2 * math.pi):
            canvas.text(m.polar(center, inner * 0.7, angle), "+", POSITIVE, size=11)
            canvas.text(m.polar(center, outer + 12, angle), "-", NEGATIVE, size=11)

        if level > 0:
            for angle in m.spread(12, 0.0, 2 * math.pi):
                canvas.arrow(m.polar(center, inner + 3, angle), m.polar(center, outer - 3, angle),
                             FIELD, 1.0 + 2 * level, head=5.0)
