from __future__ import annotations

import math

from physicsexplorer.model.kinematics import DerivedQuantities
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import CalculationResult, CalculationSuccess
from physicsexplorer.model.state import SimulationState
from physicsexplorer.view import mapping as m
from physicsexplorer.view.canvas import Canvas
from physicsexplorer.view.renderers.base import (
    GLASS, INK, LIGHT, MUTED, POSITIVE, TopicRenderer, primary_text,
)
from physicsexplorer.view.renderers.registry import register_renderer

VIRTUAL = "#90a4ae"


def _angle_label(canvas: Canvas, hit: m.Point, angle_deg: float, above: bool, right: bool, text: str) -> None:
    """Arc between the normal and a ray leaving ``hit``, with its label."""
    start = 90.0 if above else 270.0
    span = -angle_deg if above == right else angle_deg
    canvas.arc(hit, 30.0, start, span, MUTED)
    mid = math.radians(start + span / 2)
    canvas.text(m.polar(hit, 45.0, mid), text, INK, size=9)


@register_renderer
class ReflectionRenderer(TopicRenderer):
    """Incident and reflected rays revealed by a sweeping light front."""
    KEY = "light-reflection"
    GEOMETRY = m.RAY_CANVAS
    SURFACE_Y = 260.0

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        cx = self.GEOMETRY.width / 2
        hit = (cx, self.SURFACE_Y)
        self._draw_surface(canvas, params.variant or "plane", hit)
        canvas.line((cx, self.SURFACE_Y - 170), (cx, self.SURFACE_Y + 20), MUTED)

        theta = math.radians(derived["angle"])
        source = (cx - m.RAY_LENGTH_PX * math.sin(theta), self.SURFACE_Y - m.RAY_LENGTH_PX * math.cos(theta))
        target = (cx + m.RAY_LENGTH_PX * math.sin(theta), self.SURFACE_Y - m.RAY_LENGTH_PX * math.cos(theta))
        if derived["incident_progress"] > 0:
            canvas.arrow(source, m.lerp(source, hit, derived["incident_progress"]), LIGHT, 3.0)
        if derived["outgoing_progress"] > 0:
            canvas.arrow(hit, m.lerp(hit, target, derived["outgoing_progress"]), LIGHT, 3.0)

        _angle_label(canvas, hit, derived["angle"], True, False, "θᵢ")
        _angle_label(canvas, hit, derived["angle"], True, True, "θᵣ")
        self.draw_caption(canvas, [
            f"Angle of reflection: {primary_text(result)}",
            f"Surface: {(params.variant or 'plane').capitalize()}",
        ])
        self.draw_status(canvas, state)

    def _draw_surface(self, canvas: Canvas, surface: str, hit: m.Point) -> None:
        cx, y = hit
        match surface:
            case "concave":
                # Centre of curvature above the surface
                canvas.arc((cx, y - 200), 200.0, 240.0, 60.0, INK, 4.0)
            case "convex":
                canvas.arc((cx, y + 200), 200.0, 60.0, 60.0, INK, 4.0)
            case _:
                canvas.line((cx - 200, y), (cx + 200, y), INK, 4.0)
                for x in m.spread(20, cx - 200, cx + 200):
                    canvas.line((x, y), (x - 8, y + 10), MUTED)


@register_renderer
class RefractionRenderer(TopicRenderer):
    """Ray bending at an interface, or reflecting back under total internal reflection."""
    KEY = "light-refraction"
    GEOMETRY = m.RAY_CANVAS

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        cx, cy = self.GEOMETRY.center
        w, h = self.GEOMETRY.width, self.GEOMETRY.height
        canvas.rect((0, 0), (w, cy), fill="#fafafa")
        canvas.rect((0, cy), (w, h - cy), fill=GLASS)
        canvas.line((0, cy), (w, cy), INK, 2.0)
        canvas.line((cx, cy - 170), (cx, cy + 170), MUTED)
        canvas.text((w - 20, cy - 15), f"n₁ = {params['n1']:g}", INK, align="right")
        canvas.text((w - 20, cy + 15), f"n₂ = {params['n2']:g}", INK, align="right")

        hit = (cx, cy)
        theta = math.radians(derived["angle"])
        source = (cx - m.RAY_LENGTH_PX * math.sin(theta), cy - m.RAY_LENGTH_PX * math.cos(theta))
        tir = derived["total_internal_reflection"] > 0
        phi = math.radians(derived["outgoing_angle"])
        if tir:
            target = (cx + m.RAY_LENGTH_PX * math.sin(phi), cy - m.RAY_LENGTH_PX * math.cos(phi))
        else:
            target = (cx + m.RAY_LENGTH_PX * math.sin(phi), cy + m.RAY_LENGTH_PX * math.cos(phi))

        if derived["incident_progress"] > 0:
            canvas.arrow(source, m.lerp(source, hit, derived["incident_progress"]), LIGHT, 3.0)
        if derived["outgoing_progress"] > 0:
            canvas.arrow(hit, m.lerp(hit, target, derived["outgoing_progress"]),
                         POSITIVE if tir else LIGHT, 3.0)

        _angle_label(canvas, hit, derived["angle"], True, False, "θ₁")
        if tir:
            _angle_label(canvas, hit, derived["outgoing_angle"], True, True, "θᵣ")
        else:
            _angle_label(canvas, hit, derived["outgoing_angle"], False, True, "θ₂")

        lines = [f"Refracted angle: {primary_text(result)}"]
        if not isinstance(result, CalculationSuccess):
            extras = getattr(result, "extras", {})
            if "critical_angle" in extras:
                lines.append(f"Critical angle: {extras['critical_angle']}")
        self.draw_caption(canvas, lines)
        self.draw_status(canvas, state)


class ThinOpticRenderer(TopicRenderer):
    """
    Principal-ray diagram for a thin lens or mirror.

    Ray segments appear one after another as ``ray_progress`` goes 0 → 1:
    the parallel ray first, the central ray from 0.3, the image at 1.
    """
    GEOMETRY = m.LENS_CANVAS
    SCALE = m.LENS_PX_PER_CM

    def is_mirror(self, params: ParameterSet) -> bool:
        return "mirror" in (params.variant or "")

    def is_converging(self, params: ParameterSet) -> bool:
        return params.variant in ("converging-lens", "converging-mirror", "thin-lens", "concave-mirror")

    def optic_name(self, params: ParameterSet) -> str:
        return (params.variant or "").replace("-", " ").capitalize()

    def draw(self, canvas: Canvas, derived: DerivedQuantities, params: ParameterSet,
             result: CalculationResult, state: SimulationState) -> None:
        cx, axis_y = self.GEOMETRY.center
        canvas.line((0, axis_y), (self.GEOMETRY.width, axis_y), MUTED)
        mirror = self.is_mirror(params)
        self._draw_optic(canvas, (cx, axis_y), mirror, self.is_converging(params))

        f_px = params["focal_length"] * self.SCALE
        for fx in (cx - f_px, cx + f_px):
            fx = m.clamp(fx, 5, self.GEOMETRY.width - 5)
            canvas.circle((fx, axis_y), 3.0, fill=INK)
            canvas.text((fx, axis_y + 12), "F", INK, size=9)

        # Real images of a mirror form on the object side
        image_sign = -1.0 if mirror else 1.0
        obj = m.clamp_to_canvas(
            (cx - params["object_distance"] * self.SCALE, axis_y - m.OBJECT_HEIGHT_PX), self.GEOMETRY, 10
        )
        obj_base = (obj[0], axis_y)
        img = m.clamp_to_canvas(
            (cx + image_sign * derived["image_distance"] * self.SCALE,
             axis_y - m.OBJECT_HEIGHT_PX * derived["magnification"]),
            self.GEOMETRY, 10,
        )
        canvas.arrow(obj_base, obj, POSITIVE, 3.0)

        progress = derived["ray_progress"]
        virtual = derived["image_distance"] < 0
        ray_color = VIRTUAL if virtual else LIGHT
        bend = (cx, obj[1])
        center = (cx, axis_y)
        self._segment(canvas, obj, bend, progress * 2, LIGHT)
        self._segment(canvas, bend, img, (progress - 0.5) * 2, ray_color)
        self._segment(canvas, obj, center, (progress - 0.3) * 2, LIGHT)
        self._segment(canvas, center, img, (progress - 0.8) * 5, ray_color)

        if progress >= 1:
            canvas.arrow((img[0], axis_y), img, VIRTUAL if virtual else POSITIVE, 3.0)
            canvas.text((img[0], axis_y + 25), "virtual image" if virtual else "real image", INK, size=9)

        lines = [f"{self.optic_name(params)}: image distance {primary_text(result)}"]
        if isinstance(result, CalculationSuccess):
            lines.append(f"Magnification: {result.extras['magnification'].formatted()}")
        self.draw_caption(canvas, lines)
        self.draw_status(canvas, state)

    @staticmethod
    def _segment(canvas: Canvas, start: m.Point, end: m.Point, t: float, color: str) -> None:
        t = m.clamp(t, 0.0, 1.0)
        if t > 0:
            canvas.line(start, m.lerp(start, end, t), color, 2.0)

    def _draw_optic(self, canvas: Canvas, center: m.Point, mirror: bool, converging: bool) -> None:
        cx, cy = center
        if mirror:
            # Concave faces the object (left), convex bulges towards it
            if converging:
                canvas.arc((cx - 150, cy), 150.0, -30.0, 60.0, INK, 4.0)
            else:
                canvas.arc((cx + 150, cy), 150.0, 150.0, 60.0, INK, 4.0)
        elif converging:
            canvas.ellipse(center, 10.0, 80.0, fill=GLASS, stroke=INK, width=2.0)
        else:
            canvas.polygon(
                [(cx - 12, cy - 80), (cx + 12, cy - 80), (cx + 4, cy), (cx + 12, cy + 80),
                 (cx - 12, cy + 80), (cx - 4, cy)],
                fill=GLASS, stroke=INK, width=2.0,
            )


@register_renderer
class MirrorLensRenderer(ThinOpticRenderer):
    KEY = "mirrors-lenses"
    SCALE = m.LENS_PX_PER_CM


@register_renderer
class ImageFormationRenderer(ThinOpticRenderer):
    KEY = "image-formation"
    SCALE = m.IMAGE_PX_PER_CM
