"""
Coordinate Mapper
=================
Stateless conversion of physical magnitudes into canvas pixels.

Why is this file needed?
------------------------
1. Separation: the scale factors below are presentation choices (how many
   pixels a metre is, how long a force arrow gets). They have no physical
   derivation and live here, away from the formulas.
2. Path parameterisation: electrons and AC markers ride a closed polyline.
   `ClosedPath.point_at` turns "distance travelled" into an (x, y) point by
   walking the polyline segment by segment, so motion stays continuous
   across corners and across the wrap-around seam.

Canvas convention: origin top-left, x to the right, y downwards.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

Point = tuple[float, float]


# ------------------------------------------------------------------------------
# Geometry
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class CanvasGeometry:
    width: float
    height: float

    @property
    def center(self) -> Point:
        return self.width / 2, self.height / 2


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def map_to_pixels(
    value: float,
    scale: float,
    geometry: CanvasGeometry,
    axis: str = "x",
    origin: Optional[float] = None,
    clamp_to_bounds: bool = False,
) -> float:
    """
    Map a physical coordinate to a pixel coordinate along one axis.

    Args:
        value: Physical coordinate (m, T, N/C, ... depending on the topic).
        scale: Pixels per physical unit.
        geometry: Canvas size.
        axis: "x" (grows right) or "y" (physical up, so pixels grow down).
        origin: Pixel of the physical zero; defaults to the canvas centre.
        clamp_to_bounds: Keep the result inside the canvas.

    Returns:
        Pixel coordinate.
    """
    match axis:
        case "x":
            zero = geometry.width / 2 if origin is None else origin
            pixel = zero + value * scale
            limit = geometry.width
        case "y":
            zero = geometry.height / 2 if origin is None else origin
            pixel = zero - value * scale
            limit = geometry.height
        case _:
            raise ValueError(f"Unknown axis '{axis}'")
    return clamp(pixel, 0.0, limit) if clamp_to_bounds else pixel


def to_pixels(length: float, scale: float, minimum: float = 0.0, maximum: float = math.inf) -> float:
    """Scale a physical length and clamp it to [minimum, maximum] pixels."""
    return clamp(length * scale, minimum, maximum)


def clamp_to_canvas(point: Point, geometry: CanvasGeometry, margin: float = 0.0) -> Point:
    x, y = point
    return (
        clamp(x, margin, geometry.width - margin),
        clamp(y, margin, geometry.height - margin),
    )


def wrap(distance: float, length: float) -> float:
    """``distance`` modulo ``length``, always in ``[0, length)``."""
    if length <= 0:
        return 0.0
    wrapped = distance % length
    # -1e-17 % 10 rounds to 10.0
    return 0.0 if wrapped >= length else wrapped


def arrow_length(magnitude: float, base: float, divisor: float, cap: float) -> float:
    """``base + min(|magnitude| / divisor, cap)`` pixels."""
    return base + min(abs(magnitude) / divisor, cap)


def polar(center: Point, radius: float, angle: float) -> Point:
    """Point at ``angle`` (radians, counter-clockwise on screen) around ``center``."""
    cx, cy = center
    return cx + radius * math.cos(angle), cy - radius * math.sin(angle)


def lerp(a: Point, b: Point, t: float) -> Point:
    return a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t


def spread(count: int, start: float, stop: float) -> list[float]:
    """``count`` evenly spaced values from start (inclusive) to stop (exclusive)."""
    if count <= 0:
        return []
    return np.linspace(start, stop, count, endpoint=False).tolist()


class ClosedPath:
    """
    Closed polyline parameterised by arc length.

    The last vertex is joined back to the first; zero-length segments are
    dropped.
    """

    def __init__(self, vertices: npt.ArrayLike) -> None:
        points = np.asarray(vertices, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 2 or len(points) < 2:
            raise ValueError("A closed path needs at least two (x, y) vertices")

        closed = np.vstack([points, points[:1]])
        lengths = np.hypot(*np.diff(closed, axis=0).T)
        keep = lengths > 0
        if not keep.any():
            raise ValueError("A closed path needs a non-zero length")

        self._starts = closed[:-1][keep]
        self._deltas = np.diff(closed, axis=0)[keep]
        self._lengths = lengths[keep]
        self._cumulative = np.concatenate([[0.0], np.cumsum(self._lengths)])

    @property
    def length(self) -> float:
        return float(self._cumulative[-1])

    @property
    def vertices(self) -> list[Point]:
        return [(float(x), float(y)) for x, y in self._starts]

    def point_at(self, distance: float) -> Point:
        """Point reached after travelling ``distance`` from the first vertex."""
        d = wrap(distance, self.length)
        index = int(np.searchsorted(self._cumulative, d, side="right")) - 1
        index = min(max(index, 0), len(self._lengths) - 1)
        t = (d - self._cumulative[index]) / self._lengths[index]
        x, y = self._starts[index] + t * self._deltas[index]
        return float(x), float(y)

    def points_at(self, distances: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Vectorised `point_at`; returns an (N, 2) array."""
        total = self.length
        d = np.mod(np.atleast_1d(np.asarray(distances, dtype=np.float64)), total)
        d[d >= total] = 0.0
        index = np.searchsorted(self._cumulative, d, side="right") - 1
        index = np.clip(index, 0, len(self._lengths) - 1)
        t = (d - self._cumulative[index]) / self._lengths[index]
        return self._starts[index] + t[:, None] * self._deltas[index]


def rectangle_path(center: Point, width: float, height: float) -> ClosedPath:
    """Clockwise rectangle starting at its top-left corner."""
    cx, cy = center
    left, right = cx - width / 2, cx + width / 2
    top, bottom = cy - height / 2, cy + height / 2
    return ClosedPath([(left, top), (right, top), (right, bottom), (left, bottom)])


# ------------------------------------------------------------------------------
# Presentation constants
# ------------------------------------------------------------------------------
# Electric forces
FORCE_CANVAS = CanvasGeometry(600, 300)
FORCE_PX_PER_M = 50.0
CHARGE_RADIUS_PX = 20.0
FORCE_ARROW_BASE_PX = 50.0
FORCE_ARROW_DIVISOR = 1e3  # N per extra pixel
FORCE_ARROW_CAP_PX = 100.0

# Electric fields
FIELD_CANVAS = CanvasGeometry(500, 300)
FIELD_PX_PER_M = 80.0
FIELD_ARROW_BASE_PX = 40.0
FIELD_ARROW_DIVISOR = 1e3  # N/C per extra pixel
FIELD_ARROW_CAP_PX = 80.0
FIELD_LINE_COUNT = 12

# Capacitance
CAPACITOR_CANVAS = CanvasGeometry(600, 400)
PLATE_PX_PER_M2 = 1000.0
PLATE_MAX_WIDTH_PX = 150.0
PLATE_SEPARATION_PX_PER_M = 200.0
PLATE_MIN_SEPARATION_PX = 10.0
SPHERE_PX_PER_M = 100.0
SPHERE_MIN_RADIUS_PX = 20.0
SPHERE_MIN_GAP_PX = 20.0
PLATE_CHARGE_MARKERS = 10  # markers at full charge (plus one)
SPHERE_CHARGE_MARKERS = 8  # markers at full charge (plus four)

# Current & resistance
RESISTANCE_CANVAS = CanvasGeometry(600, 300)
WIRE_START_X = 100.0
WIRE_END_X = 500.0
WIRE_ELECTRONS = 20

# Direct current and AC share the loop drawing
DC_CANVAS = CanvasGeometry(600, 400)
LOOP_SIZE = (300.0, 180.0)
DC_ELECTRONS = 30

AC_CANVAS = CanvasGeometry(700, 500)
AC_MARKERS = 20
AC_MARKER_MAX_PX = 6.0
AC_MARKER_HIDE_FRACTION = 0.3  # hide markers below this share of the amplitude
AC_GRAPH_TOP = 350.0
AC_GRAPH_SIZE = (600.0, 100.0)
AC_GRAPH_CYCLES = 2
AC_GRAPH_SAMPLES = 200

# Magnetism
MAGNET_CANVAS = CanvasGeometry(600, 400)
FIELD_RING_RADII = (20.0, 60.0, 100.0, 140.0, 180.0)
FIELD_PARTICLES = 50

# Electromagnetism / induction
COIL_CANVAS = CanvasGeometry(600, 400)
NEEDLE_LENGTH_PX = 50.0
INDUCTION_FIELD_MARKERS = 9

# Inductance
SOLENOID_CANVAS = CanvasGeometry(600, 400)
SOLENOID_SIZE = (200.0, 80.0)
SOLENOID_MAX_TURNS_DRAWN = 20
SOLENOID_FIELD_PX_PER_T = 2e4  # arrow pixels per tesla inside the coil
SOLENOID_FIELD_CAP_PX = 80.0

# Optics
RAY_CANVAS = CanvasGeometry(600, 400)
RAY_LENGTH_PX = 150.0
LENS_CANVAS = CanvasGeometry(700, 400)
LENS_PX_PER_CM = 30.0
IMAGE_PX_PER_CM = 40.0
OBJECT_HEIGHT_PX = 60.0

TOPIC_SCALES: dict[str, tuple[float, str]] = {
    "electric-forces": (FORCE_PX_PER_M, "px/m"),
    "electric-fields": (FIELD_PX_PER_M, "px/m"),
    "capacitance": (PLATE_SEPARATION_PX_PER_M, "px/m"),
    "current-resistance": (1.0, "px/tick"),
    "direct-current": (1.0, "px/tick"),
    "magnetism": (1.0, "rad/tick"),
    "electromagnetism": (1.0, "px/tick"),
    "induced-voltages": (NEEDLE_LENGTH_PX, "px"),
    "inductance": (SOLENOID_FIELD_PX_PER_T, "px/T"),
    "ac-circuits": (AC_GRAPH_SIZE[1] / 2, "px per amplitude"),
    "light-reflection": (1.0, "px"),
    "light-refraction": (1.0, "px"),
    "mirrors-lenses": (LENS_PX_PER_CM, "px/cm"),
    "image-formation": (IMAGE_PX_PER_CM, "px/cm"),
}
