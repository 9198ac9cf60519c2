from __future__ import annotations

import math

from physicsexplorer.model import kinematics
from physicsexplorer.model.kinematics import DerivedQuantities
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import CalculationResult, CalculationSuccess
from physicsexplorer.model.state import SimulationState
from physicsexplorer.view import mapping as m
from physicsexplorer.view.canvas import Canvas
from physicsexplorer.view.renderers.base import (
    ELECTRON, FIELD, INK, MUTED, NEGATIVE, POSITIVE, WIRE, TopicRenderer, draw_galvanometer, primary_text,
)
from physicsexplorer.view.renderers.registry import register_renderer


def _draw_magnet(canvas: Canvas, center: m.Point, size: tuple[float, float] = (80.0, 30.0)) -> None:
    cx, cy = center
    w, h = size
    canvas.rect((cx - w / 2, cy - h / 2), (w / 2, h), fill=POSITIVE)
    canvas.rect((cx, cy - h / 2), (w / 2, h), fill=NEGATIVE)
    canvas.text((cx - w / 4, cy), "N", "#ffffff", size=11)
    canvas.text((cx + w / 4, cy), "S", "#ffffff", size=11)


@register_renderer
class MagnetismRenderer(TopicRenderer):
    """Cross-section of a straight wire with circulating field markers."""
    KEY = "magnetism"
    GEOMETRY = m.MAGNET_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        center = self.GEOMETRY.center
        for radius in m.FIELD_RING_RADII:
            canvas.circle(center, radius, stroke=MUTED)

        rings = len(m.FIELD_RING_RADII)
        rotation = derived["rotation"]
        for k in range(m.FIELD_PARTICLES):
            radius = m.FIELD_RING_RADII[k % rings]
            base = 2 * math.pi * (k // rings) / (m.FIELD_PARTICLES / rings)
            # Field is stronger near the wire, so inner markers turn faster
            angle = base + rotation * m.FIELD_RING_RADII[0] * 2 / radius
            canvas.circle(m.polar(center, radius, angle), 3.0, fill=FIELD)

        canvas.circle(center, 12.0, fill="#ffffff", stroke=WIRE, width=3.0)
        if derived["direction"] > 0:
            canvas.circle(center, 3.0, fill=INK)
        else:
            cx, cy = center
            canvas.line((cx - 6, cy - 6), (cx + 6, cy + 6), INK, 2.0)
            canvas.line((cx - 6, cy + 6), (cx + 6, cy - 6), INK, 2.0)

        self.draw_caption(canvas, [
            f"Magnetic force: {primary_text(result)}",
            f"I = {params['current']:g} A, L = {params['wire_length']:g} m, B = {params['magnetic_field']:g} T",
            "Current out of the page" if derived["direction"] > 0 else "Current into the page",
        ])
        self.draw_status(canvas, state)


@register_renderer
class ElectromagnetismRenderer(TopicRenderer):
    """Bar magnet sweeping through a coil; the needle follows the induced current."""
    KEY = "electromagnetism"
    GEOMETRY = m.COIL_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        cx, cy = self.GEOMETRY.center
        coil_y = cy - 40
        loops = int(m.clamp(abs(params["coil_turns"]), 1, 10))
        for x in m.spread(loops, cx - 50, cx + 50):
            canvas.ellipse((x + 5, coil_y), 8.0, 45.0, stroke=WIRE, width=2.0)

        magnet_x = cx + derived["magnet_position"]
        _draw_magnet(canvas, (magnet_x, coil_y))

        dial = (cx, cy + 130)
        canvas.line((cx - 50, coil_y + 45), (cx - 50, dial[1]), WIRE)
        canvas.line((cx + 50, coil_y + 45), (cx + 50, dial[1]), WIRE)
        draw_galvanometer(canvas, dial, m.NEEDLE_LENGTH_PX, derived["needle_angle"],
                          kinematics.NEEDLE_LIMIT_COIL)

        self.draw_caption(canvas, [
            f"Induced EMF: {primary_text(result)}",
            f"Coil current: {derived['current']:.3f} (arb.)",
            f"Meter EMF: {derived['emf']:.3f}",
        ])
        self.draw_status(canvas, state)


@register_renderer
class InducedVoltageRenderer(TopicRenderer):
    """Loop in a pulsing field with a galvanometer reading the EMF."""
    KEY = "induced-voltages"
    GEOMETRY = m.COIL_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        cx, cy = self.GEOMETRY.center
        loop_top_left = (cx - 120, cy - 140)
        canvas.rect(loop_top_left, (240, 160), stroke=WIRE, width=3.0)

        pulse = derived["pulse"]
        side = int(math.sqrt(m.INDUCTION_FIELD_MARKERS))
        for x in m.spread(side, cx - 90, cx + 110):
            for y in m.spread(side, cy - 115, cy + 35):
                size = 2.0 + 6.0 * pulse
                canvas.line((x - size, y - size), (x + size, y + size), FIELD, 2.0)
                canvas.line((x - size, y + size), (x + size, y - size), FIELD, 2.0)

        dial = (cx, cy + 120)
        canvas.line((cx - 120, cy + 20), (cx - 50, dial[1]), WIRE)
        canvas.line((cx + 120, cy + 20), (cx + 50, dial[1]), WIRE)
        draw_galvanometer(canvas, dial, m.NEEDLE_LENGTH_PX, derived["needle_angle"],
                          kinematics.NEEDLE_LIMIT_GALVANOMETER)

        self.draw_caption(canvas, [
            f"Induced voltage: {primary_text(result)}",
            f"B = {derived['field']:.3f} T",
            f"EMF now: {derived['emf']:.3f} V",
        ])
        self.draw_status(canvas, state)


@register_renderer
class InductanceRenderer(TopicRenderer):
    """Solenoid whose current ramps up to a cap and back down."""
    KEY = "inductance"
    GEOMETRY = m.SOLENOID_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        cx, cy = self.GEOMETRY.center
        width, height = m.SOLENOID_SIZE
        left = cx - width / 2
        canvas.rect((left, cy - height / 2), (width, height), fill="#eceff1", stroke=MUTED)

        turns = int(m.clamp(abs(params["num_turns"]), 1, m.SOLENOID_MAX_TURNS_DRAWN))
        for x in m.spread(turns, left + 5, left + width):
            canvas.ellipse((x, cy), 4.0, height / 2, stroke=WIRE, width=2.0)

        current = derived["current"]
        cap = kinematics.SOLENOID_CURRENT_CAP
        field_px = m.to_pixels(abs(derived["field"]), m.SOLENOID_FIELD_PX_PER_T, 0.0, m.SOLENOID_FIELD_CAP_PX)
        if field_px > 1:
            canvas.arrow((cx - field_px, cy), (cx + field_px, cy), FIELD, 3.0)

        # Current meter
        meter_x, meter_bottom, meter_h = cx + width / 2 + 60, cy + 60, 120.0
        canvas.rect((meter_x, meter_bottom - meter_h), (20, meter_h), stroke=INK)
        fill_h = meter_h * current / cap
        canvas.rect((meter_x, meter_bottom - fill_h), (20, fill_h), fill=ELECTRON)
        canvas.text((meter_x + 10, meter_bottom + 12), f"{current:.1f} A", INK, size=9)
        canvas.text((meter_x + 10, meter_bottom - meter_h - 12),
                    "rising" if derived["ramp"] > 0 else "falling", MUTED, size=9)

        lines = [f"Inductance: {primary_text(result)}"]
        if isinstance(result, CalculationSuccess):
            lines.append(f"EMF at dI/dt: {result.extras['emf']}")
        lines.append(f"B = {derived['field']:.3e} T, self EMF = {derived['emf']:.3e} V")
        self.draw_caption(canvas, lines)
        self.draw_status(canvas, state)
