"""
Animation Kinematics
====================
Per-topic ``derive_*(elapsed, params)`` and ``step_*(params)`` pairs.

The controller advances ``elapsed`` by ``step(params)`` on every tick; the
derive function then recomputes everything the renderer needs from
``(elapsed, params)`` alone. Nothing here remembers the previous tick, so any
frame can be reproduced from its elapsed value and the parameters.

Units of ``elapsed`` differ per topic (seconds for AC, pixels of travel for
path animations, a 0..1 fraction for ramps); each step function documents
what it advances.
"""
from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

from physicsexplorer.model import formulas
from physicsexplorer.model.constants import MU_0
from physicsexplorer.model.parameters import ParameterSet

DerivedQuantities = Mapping[str, float]

# Electric forces: charges drift 1 px each per tick at 50 px/m
CHARGE_MIN_SEPARATION = 0.2  # m
CHARGE_MAX_SEPARATION = 8.0  # m
CHARGE_DRIFT_PER_TICK = 2 / 50  # m of separation change per tick

# Electric field: probe eases toward its target
PROBE_MIN_DISTANCE = 0.2  # m
PROBE_MAX_DISTANCE = 4.0  # m
PROBE_EASING = 0.15

CHARGE_BUILDUP_STEP = 0.05
RAY_PROGRESS_STEP = 0.02
FLUX_PULSE_STEP = 0.02

MAX_DRIFT_PX = 25.0  # px per tick, keeps fast electrons readable
MAGNET_BOUND_PX = 200.0
MAGNET_COIL_REACH_PX = 100.0
NEEDLE_LIMIT_COIL = math.pi / 4
NEEDLE_LIMIT_GALVANOMETER = math.pi / 3
SOLENOID_CURRENT_CAP = 10.0  # A
MAGNETIC_SPIN_PER_AMP = 0.02  # rad per tick per ampere
MAX_SPIN_PER_TICK = 0.5  # rad

RAY_SWEEP_START = -300.0  # px
RAY_SWEEP_END = 600.0  # px
RAY_SWEEP_STEP = 10.0  # px
RAY_LEG_LENGTH = 300.0  # px


def _frozen(**values: float) -> DerivedQuantities:
    return MappingProxyType({k: float(v) for k, v in values.items()})


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def triangle_wave(distance: float, span: float) -> tuple[float, float]:
    """
    Position along a back-and-forth run of length ``span``.

    Returns ``(offset, direction)`` with ``offset`` in ``[0, span]`` and
    ``direction`` +1 while moving out and -1 while moving back.
    """
    if span <= 0:
        return 0.0, 1.0
    phase = math.fmod(distance, 2 * span)
    if phase <= span:
        return phase, 1.0 if phase < span else -1.0
    return 2 * span - phase, -1.0


def fraction(elapsed: float) -> float:
    """Linear 0→1 reveal that holds at 1."""
    return clamp(elapsed, 0.0, 1.0)


# ------------------------------------------------------------------------------
# Electrostatics
# ------------------------------------------------------------------------------
def step_electric_force(params: ParameterSet) -> float:
    """One tick of charge drift."""
    return 1.0


def derive_electric_force(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    q1, q2 = params["charge1"], params["charge2"]
    start = clamp(params["distance"], CHARGE_MIN_SEPARATION, CHARGE_MAX_SEPARATION)
    interaction = math.copysign(1.0, q1 * q2) if q1 * q2 != 0 else 0.0
    # Like charges push apart, opposite ones pull together
    separation = clamp(
        start + interaction * CHARGE_DRIFT_PER_TICK * elapsed,
        CHARGE_MIN_SEPARATION, CHARGE_MAX_SEPARATION,
    )
    return _frozen(
        separation=separation,
        force=formulas.coulomb_force(q1, q2, separation),
        interaction=interaction,
    )


def step_electric_field(params: ParameterSet) -> float:
    return 1.0


def derive_electric_field(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    target = clamp(params["distance"], PROBE_MIN_DISTANCE, PROBE_MAX_DISTANCE)
    probe = target + (PROBE_MIN_DISTANCE - target) * (1 - PROBE_EASING) ** elapsed
    return _frozen(
        probe_distance=probe,
        field=formulas.point_charge_field(params["charge"], probe),
        sign=1.0 if params["charge"] >= 0 else -1.0,
    )


def step_capacitance(params: ParameterSet) -> float:
    """Fraction of full charge gained per tick."""
    return CHARGE_BUILDUP_STEP


def derive_capacitance(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    return _frozen(charge_level=fraction(elapsed))


# ------------------------------------------------------------------------------
# Circuits
# ------------------------------------------------------------------------------
def drift_speed(params: ParameterSet) -> float:
    """Signed electron speed in px per tick for the resistance wire."""
    match params.variant:
        case "ohm" | "power":
            speed = params["current"] * 2
        case "resistivity":
            r = formulas.resistance_of(params)
            speed = MAX_DRIFT_PX if r == 0 else 5 / r
        case _:
            raise KeyError(f"Unknown resistance method '{params.variant}'")
    return clamp(speed, -MAX_DRIFT_PX, MAX_DRIFT_PX)


def step_resistance(params: ParameterSet) -> float:
    """Pixels of electron travel per tick."""
    return abs(drift_speed(params))


def derive_resistance(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    speed = drift_speed(params)
    return _frozen(
        travel=elapsed,
        direction=-1.0 if speed < 0 else 1.0,
        resistance=formulas.resistance_of(params),
        heat_phase=elapsed / 10 if params.variant == "power" else 0.0,
    )


def step_direct_current(params: ParameterSet) -> float:
    """Pixels travelled around the loop per tick."""
    current = params["voltage"] / params["resistance"]
    return min(0.4 * abs(current), MAX_DRIFT_PX)


def derive_direct_current(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    current = params["voltage"] / params["resistance"]
    return _frozen(
        travel=elapsed,
        current=current,
        direction=-1.0 if current < 0 else 1.0,
        power=params["voltage"] * current,
    )


def step_ac(params: ParameterSet) -> float:
    """Seconds of circuit time per tick: ten samples per cycle."""
    return 1 / (10 * abs(params["frequency"]))


def derive_ac(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    ac = formulas.ac_response_of(params)
    wt = ac.omega * elapsed
    return _frozen(
        time=elapsed,
        period=1 / abs(params["frequency"]),
        omega=ac.omega,
        voltage=params["voltage"] * math.sin(wt),
        current=ac.current * math.sin(wt - ac.phase),
        voltage_amplitude=params["voltage"],
        current_amplitude=ac.current,
        phase=ac.phase,
    )


# ------------------------------------------------------------------------------
# Magnetism & induction
# ------------------------------------------------------------------------------
def step_magnetism(params: ParameterSet) -> float:
    """Radians the field markers turn per tick."""
    return min(MAGNETIC_SPIN_PER_AMP * abs(params["current"]), MAX_SPIN_PER_TICK)


def derive_magnetism(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    direction = -1.0 if params["current"] < 0 else 1.0
    return _frozen(
        rotation=direction * elapsed,
        direction=direction,
        force=abs(params["current"] * params["wire_length"] * params["magnetic_field"]),
    )


def step_electromagnetism(params: ParameterSet) -> float:
    """Pixels the magnet moves per tick."""
    return abs(params["movement_speed"])


def derive_electromagnetism(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    offset, direction = triangle_wave(elapsed, 2 * MAGNET_BOUND_PX)
    position = offset - MAGNET_BOUND_PX
    current = 0.0
    if abs(position) < MAGNET_COIL_REACH_PX:
        strength = params["field_change_rate"] * params["coil_turns"] / 20
        # Approaching and leaving the coil induce opposite currents
        sense = direction if position < 0 else -direction
        current = (1 - abs(position) / MAGNET_COIL_REACH_PX) * strength * sense
    return _frozen(
        magnet_position=position,
        direction=direction,
        current=current,
        needle_angle=clamp(current, -1.0, 1.0) * NEEDLE_LIMIT_COIL,
        emf=abs(current * 10),
    )


def step_induced_voltage(params: ParameterSet) -> float:
    """Fraction of one flux pulse per tick."""
    return FLUX_PULSE_STEP


def derive_induced_voltage(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    pulse = math.fmod(elapsed, 1.0)
    field = 5 * params["flux_change_rate"] * pulse
    emf = field * params["loop_area"] * params["num_loops"]
    return _frozen(
        pulse=pulse,
        field=field,
        emf=emf,
        needle_angle=clamp(emf / 50, -NEEDLE_LIMIT_GALVANOMETER, NEEDLE_LIMIT_GALVANOMETER),
    )


def step_inductance(params: ParameterSet) -> float:
    """Amperes of current change per tick."""
    return abs(params["current_change_rate"]) / 5


def derive_inductance(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    current, ramp = triangle_wave(elapsed, SOLENOID_CURRENT_CAP)
    inductance = formulas.solenoid_inductance(
        params["num_turns"], params["coil_radius"], params["coil_length"]
    )
    return _frozen(
        current=current,
        ramp=ramp,
        field=MU_0 * params["num_turns"] * current / params["coil_length"],
        emf=inductance * abs(params["current_change_rate"]) * ramp,
    )


# ------------------------------------------------------------------------------
# Optics
# ------------------------------------------------------------------------------
def step_ray_sweep(params: ParameterSet) -> float:
    """Pixels the light front travels per tick."""
    return RAY_SWEEP_STEP


def _sweep(elapsed: float) -> tuple[float, float, float]:
    cycle = RAY_SWEEP_END - RAY_SWEEP_START + RAY_SWEEP_STEP
    position = RAY_SWEEP_START + math.fmod(elapsed, cycle)
    incident = clamp((position - RAY_SWEEP_START) / RAY_LEG_LENGTH, 0.0, 1.0)
    outgoing = clamp((position - RAY_SWEEP_START - RAY_LEG_LENGTH) / RAY_LEG_LENGTH, 0.0, 1.0)
    return position, incident, outgoing


def derive_reflection(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    position, incident, outgoing = _sweep(elapsed)
    return _frozen(
        ray_position=position,
        incident_progress=incident,
        outgoing_progress=outgoing,
        angle=params["incident_angle"],
    )


def derive_refraction(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    position, incident, outgoing = _sweep(elapsed)
    sine = formulas.refracted_sine(params["incident_angle"], params["n1"], params["n2"])
    tir = abs(sine) > 1
    return _frozen(
        ray_position=position,
        incident_progress=incident,
        outgoing_progress=outgoing,
        angle=params["incident_angle"],
        # Under total internal reflection the outgoing ray is the reflected one
        outgoing_angle=params["incident_angle"] if tir else math.degrees(math.asin(sine)),
        total_internal_reflection=1.0 if tir else 0.0,
    )


def step_ray_progress(params: ParameterSet) -> float:
    return RAY_PROGRESS_STEP


def derive_image(elapsed: float, params: ParameterSet) -> DerivedQuantities:
    do, f = params["object_distance"], params["focal_length"]
    di = formulas.image_distance(do, f)
    return _frozen(
        ray_progress=fraction(elapsed),
        image_distance=di,
        magnification=-di / do,
    )
