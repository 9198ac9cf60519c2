from __future__ import annotations

import math

import numpy as np

from physicsexplorer.model.kinematics import DerivedQuantities
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import CalculationResult, CalculationSuccess
from physicsexplorer.model.state import SimulationState
from physicsexplorer.view import mapping as m
from physicsexplorer.view.canvas import Canvas
from physicsexplorer.view.renderers.base import (
    ELECTRON, INK, MUTED, NEGATIVE, POSITIVE, WIRE, TopicRenderer, primary_text,
)
from physicsexplorer.view.renderers.registry import register_renderer


def _zigzag(start: m.Point, end: m.Point, teeth: int = 6, amplitude: float = 8.0) -> list[m.Point]:
    """Resistor symbol between two points on a horizontal or vertical run."""
    (x0, y0), (x1, y1) = start, end
    length = math.hypot(x1 - x0, y1 - y0)
    ux, uy = (x1 - x0) / length, (y1 - y0) / length
    points = [start]
    for k in range(1, 2 * teeth):
        t = k / (2 * teeth)
        side = amplitude if k % 2 else -amplitude
        points.append((x0 + ux * length * t - uy * side, y0 + uy * length * t + ux * side))
    points.append(end)
    return points


def _battery(canvas: Canvas, center: m.Point, vertical: bool = True) -> None:
    cx, cy = center
    if vertical:
        canvas.line((cx - 14, cy - 4), (cx + 14, cy - 4), INK, 3.0)
        canvas.line((cx - 8, cy + 4), (cx + 8, cy + 4), INK, 3.0)
        canvas.text((cx + 22, cy - 8), "+", POSITIVE, size=11)
        canvas.text((cx + 22, cy + 8), "-", NEGATIVE, size=11)
    else:
        canvas.line((cx - 4, cy - 14), (cx - 4, cy + 14), INK, 3.0)
        canvas.line((cx + 4, cy - 8), (cx + 4, cy + 8), INK, 3.0)


@register_renderer
class ResistanceRenderer(TopicRenderer):
    """Electrons drifting through a wire; power mode adds heat waves."""
    KEY = "current-resistance"
    GEOMETRY = m.RESISTANCE_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        _, cy = self.GEOMETRY.center
        span = m.WIRE_END_X - m.WIRE_START_X
        canvas.rect((m.WIRE_START_X, cy - 20), (span, 40), fill="#d7ccc8", stroke=WIRE, width=2.0)
        canvas.line((m.WIRE_START_X - 40, cy), (m.WIRE_START_X, cy), WIRE, 3.0)
        canvas.line((m.WIRE_END_X, cy), (m.WIRE_END_X + 40, cy), WIRE, 3.0)

        offset = derived["direction"] * derived["travel"]
        for i, base in enumerate(m.spread(m.WIRE_ELECTRONS, 0.0, span)):
            x = m.WIRE_START_X + m.wrap(base + offset, span)
            y = cy + (i * 37 % 30) - 15
            canvas.circle((x, y), 4.0, fill=ELECTRON)

        if params.variant == "power":
            phase = derived["heat_phase"]
            for k in range(3):
                x0 = m.WIRE_START_X + span * (k + 1) / 4
                wave = [
                    (x0 + 6 * math.sin(phase * 2 * math.pi + t / 6), cy - 30 - t)
                    for t in m.spread(12, 0.0, 48.0)
                ]
                canvas.polyline(wave, "#ff7043", 2.0)

        lines = [f"Resistance: {primary_text(result)}"]
        match params.variant:
            case "ohm":
                lines.append(f"V = {params['voltage']:g} V, I = {params['current']:g} A")
            case "resistivity":
                lines.append(f"ρ = {params['resistivity']:g} Ω·m, L = {params['wire_length']:g} m, "
                             f"A = {params['wire_area']:g} m²")
            case "power":
                lines.append(f"P = {params['power']:g} W, I = {params['current']:g} A")
        self.draw_caption(canvas, lines)
        self.draw_status(canvas, state)


@register_renderer
class DirectCurrentRenderer(TopicRenderer):
    """Electrons circulating around a battery/resistor loop."""
    KEY = "direct-current"
    GEOMETRY = m.DC_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        center = self.GEOMETRY.center
        width, height = m.LOOP_SIZE
        path = m.rectangle_path(center, width, height)
        canvas.polyline(path.vertices, WIRE, 3.0, closed=True)

        cx, cy = center
        left, right = cx - width / 2, cx + width / 2
        canvas.rect((left - 20, cy - 20), (40, 40), fill="#f0f0f0")
        _battery(canvas, (left, cy))
        canvas.rect((right - 12, cy - 40), (24, 80), fill="#f0f0f0")
        canvas.polyline(_zigzag((right, cy - 40), (right, cy + 40)), INK, 2.0)
        canvas.text((right + 30, cy), f"{params['resistance']:g} Ω", INK)
        canvas.text((left - 40, cy), f"{params['voltage']:g} V", INK)

        travel = derived["direction"] * derived["travel"]
        bases = np.array(m.spread(m.DC_ELECTRONS, 0.0, path.length))
        for x, y in path.points_at(bases + travel):
            canvas.circle((float(x), float(y)), 3.0, fill=ELECTRON)

        self.draw_caption(canvas, [
            f"Current: {primary_text(result)}",
            f"Power: {derived['power']:.3f} W",
        ])
        self.draw_status(canvas, state)


@register_renderer
class ACCircuitRenderer(TopicRenderer):
    """Series RLC loop with markers following i(t) and a two-cycle waveform plot."""
    KEY = "ac-circuits"
    GEOMETRY = m.AC_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        cx = self.GEOMETRY.width / 2
        center = (cx, 170.0)
        width, height = m.LOOP_SIZE
        path = m.rectangle_path(center, width, height)
        self._draw_loop(canvas, path, center, params)

        amplitude = derived["current_amplitude"]
        current = derived["current"]
        period = derived["period"]
        if amplitude > 0 and abs(current) >= m.AC_MARKER_HIDE_FRACTION * amplitude:
            size = m.AC_MARKER_MAX_PX * abs(current) / amplitude
            bases = np.array(m.spread(m.AC_MARKERS, 0.0, path.length))
            travel = derived["time"] * path.length / period
            for x, y in path.points_at(bases + travel):
                canvas.circle((float(x), float(y)), size, fill=ELECTRON)

        self._draw_graph(canvas, derived)
        lines = [f"Impedance: {primary_text(result)}"]
        if isinstance(result, CalculationSuccess):
            lines += [
                f"I = {result.extras['current']}, φ = {result.extras['phase']}",
                f"PF = {result.extras['power_factor'].formatted()}",
            ]
        lines.append(f"v(t) = {derived['voltage']:.2f} V, i(t) = {current:.3f} A")
        self.draw_caption(canvas, lines)
        self.draw_status(canvas, state)

    def _draw_loop(self, canvas: Canvas, path: m.ClosedPath, center: m.Point, params: ParameterSet) -> None:
        canvas.polyline(path.vertices, WIRE, 3.0, closed=True)
        cx, cy = center
        width, height = m.LOOP_SIZE
        left, top = cx - width / 2, cy - height / 2

        # Source: circle with a sine glyph on the left side
        canvas.circle((left, cy), 22.0, fill="#ffffff", stroke=INK, width=2.0)
        glyph = [(left - 12 + t, cy - 8 * math.sin(t / 24 * 2 * math.pi)) for t in m.spread(13, 0.0, 26.0)]
        canvas.polyline(glyph, INK, 1.5)

        slots = [("R", params["resistance"], "Ω")]
        if params.get("inductance", 0.0):
            slots.append(("L", params["inductance"], "H"))
        if "capacitance" in params:
            slots.append(("C", params["capacitance"], "F"))
        for (name, value, unit), x in zip(slots, m.spread(len(slots), left + 60, left + width)):
            canvas.rect((x - 4, top - 12), (48, 24), fill="#ffffff", stroke=INK, width=2.0)
            canvas.text((x + 20, top), name, INK, size=11)
            canvas.text((x + 20, top - 24), f"{value:g} {unit}", MUTED, size=9)

    def _draw_graph(self, canvas: Canvas, derived: DerivedQuantities) -> None:
        gw, gh = m.AC_GRAPH_SIZE
        left = (self.GEOMETRY.width - gw) / 2
        top = m.AC_GRAPH_TOP
        mid = top + gh / 2
        canvas.rect((left, top), (gw, gh), fill="#ffffff", stroke=MUTED)
        canvas.line((left, mid), (left + gw, mid), MUTED)

        span = m.AC_GRAPH_CYCLES * derived["period"]
        times = np.linspace(0.0, span, m.AC_GRAPH_SAMPLES)
        xs = left + times / span * gw
        half = gh / 2 * 0.8
        voltage = np.sin(derived["omega"] * times)
        current = np.sin(derived["omega"] * times - derived["phase"])
        canvas.polyline(list(zip(xs.tolist(), (mid - half * voltage).tolist())), POSITIVE, 2.0)
        canvas.polyline(list(zip(xs.tolist(), (mid - half * current).tolist())), ELECTRON, 2.0)

        cursor = left + m.wrap(derived["time"], span) / span * gw
        canvas.line((cursor, top), (cursor, top + gh), INK)
        canvas.text((left + 5, top - 10), "v(t)", POSITIVE, size=9, align="left")
        canvas.text((left + 45, top - 10), "i(t)", ELECTRON, size=9, align="left")
