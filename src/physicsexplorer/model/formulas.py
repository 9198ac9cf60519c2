"""
Formula Evaluator
=================
One pure ``evaluate_*`` function per topic: validated `ParameterSet` in,
`CalculationResult` out.

Every division below is safe because the validator has already rejected
zero divisors, including squares and products that round to zero. Squares
are written as ``x * x``: a huge input then overflows to ``inf`` instead of
raising. The only in-formula branch is Snell's law, whose total internal
reflection is a physical outcome and not an error.

The small helpers (``coulomb_force``, ``ac_response``, ...) are shared with
the kinematics so an animation frame and the printed result never disagree.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from physicsexplorer.model.constants import COULOMB_K, EPSILON_0, MU_0
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import (
    CalculationResult, CalculationSuccess, DomainOutcome, DomainOutcomeKind, Notation, Quantity,
)


# ------------------------------------------------------------------------------
# Shared helpers
# ------------------------------------------------------------------------------
def coulomb_force(q1: float, q2: float, r: float) -> float:
    """F = k|q1 q2| / r²"""
    return COULOMB_K * abs(q1 * q2) / (r * r)


def point_charge_field(q: float, r: float) -> float:
    """E = k|q| / r²"""
    return COULOMB_K * abs(q) / (r * r)


def parallel_plate_capacitance(area: float, separation: float, kappa: float) -> float:
    return EPSILON_0 * kappa * area / separation


def spherical_capacitance(inner: float, outer: float, kappa: float) -> float:
    return 4 * math.pi * EPSILON_0 * kappa * inner * outer / (outer - inner)


def solenoid_inductance(turns: float, radius: float, length: float) -> float:
    """L = μ0 N² A / l with A = πr²"""
    area = math.pi * radius * radius
    return MU_0 * turns * turns * area / length


def image_distance(object_distance: float, focal_length: float) -> float:
    """Thin lens / mirror equation solved for the image: di = do·f / (do − f)"""
    return object_distance * focal_length / (object_distance - focal_length)


def refracted_sine(incident_deg: float, n1: float, n2: float) -> float:
    return n1 * math.sin(math.radians(incident_deg)) / n2


def resistance_of(params: ParameterSet) -> float:
    """Resistance for whichever method the current-resistance topic uses."""
    match params.variant:
        case "ohm":
            return params["voltage"] / params["current"]
        case "resistivity":
            return params["resistivity"] * params["wire_length"] / params["wire_area"]
        case "power":
            current = params["current"]
            return params["power"] / (current * current)
    raise KeyError(f"Unknown resistance method '{params.variant}'")


@dataclass(frozen=True)
class ACResponse:
    """Steady-state response of a series RLC circuit."""
    omega: float
    inductive_reactance: float
    capacitive_reactance: float
    impedance: float
    current: float
    phase: float  # radians, positive when voltage leads current

    @property
    def power_factor(self) -> float:
        return math.cos(self.phase)


def reactances(frequency: float, inductance: float = 0.0,
               capacitance: float | None = None) -> tuple[float, float]:
    """
    (XL, XC) at ``frequency``.

    A missing capacitor (``capacitance is None``) contributes no reactance.
    """
    omega = 2 * math.pi * frequency
    xc = 0.0 if capacitance is None else 1 / (omega * capacitance)
    return omega * inductance, xc


def series_impedance(resistance: float, xl: float, xc: float) -> float:
    """Z = √(R² + (XL − XC)²); NaN when both reactances are infinite."""
    x = xl - xc
    return math.sqrt(resistance * resistance + x * x)


def ac_response(voltage: float, frequency: float, resistance: float,
                inductance: float = 0.0, capacitance: float | None = None) -> ACResponse:
    """Series RLC circuit driven at ``frequency``."""
    xl, xc = reactances(frequency, inductance, capacitance)
    z = series_impedance(resistance, xl, xc)
    return ACResponse(
        omega=2 * math.pi * frequency,
        inductive_reactance=xl,
        capacitive_reactance=xc,
        impedance=z,
        current=voltage / z,
        phase=math.atan2(xl - xc, resistance),
    )


def ac_response_of(params: ParameterSet) -> ACResponse:
    return ac_response(
        params["voltage"], params["frequency"], params["resistance"],
        params.get("inductance", 0.0), params.get("capacitance"),
    )


def describe_image(distance: float, magnification: float) -> str:
    nature = "real" if distance > 0 else "virtual"
    size = abs(magnification)
    if math.isclose(size, 1.0, rel_tol=1e-9):
        scale = "the same size as the object"
    else:
        scale = "enlarged" if size > 1 else "reduced"
    orientation = "inverted" if magnification < 0 else "upright"
    return f"The image is {nature}, {orientation} and {scale}."


def _sci(value: float, unit: str, label: str = "") -> Quantity:
    return Quantity(value, unit, decimals=3, notation=Notation.SCIENTIFIC, label=label)


def _fixed(value: float, unit: str, decimals: int = 3, label: str = "") -> Quantity:
    return Quantity(value, unit, decimals=decimals, notation=Notation.FIXED, label=label)


# ------------------------------------------------------------------------------
# Electrostatics
# ------------------------------------------------------------------------------
def evaluate_electric_force(params: ParameterSet) -> CalculationResult:
    force = coulomb_force(params["charge1"], params["charge2"], params["distance"])
    return CalculationSuccess(
        primary=_sci(force, "N"),
        explanation="The electric force between two charges is calculated using "
                    "Coulomb's Law: F = k|q₁q₂|/r²",
    )


def evaluate_electric_field(params: ParameterSet) -> CalculationResult:
    field = point_charge_field(params["charge"], params["distance"])
    return CalculationSuccess(
        primary=_sci(field, "N/C"),
        explanation="The electric field due to a point charge is calculated using E = k|q|/r²",
    )


def evaluate_capacitance(params: ParameterSet) -> CalculationResult:
    kappa = params["dielectric_constant"]
    match params.variant:
        case "parallel":
            c = parallel_plate_capacitance(params["plate_area"], params["plate_separation"], kappa)
            explanation = "The capacitance of a parallel plate capacitor is calculated using C = ε₀κA/d"
        case "spherical":
            c = spherical_capacitance(params["inner_radius"], params["outer_radius"], kappa)
            explanation = ("The capacitance of a spherical capacitor is calculated using "
                           "C = 4πε₀κr₁r₂/(r₂-r₁)")
        case _:
            raise KeyError(f"Unknown capacitor type '{params.variant}'")
    return CalculationSuccess(primary=_sci(c, "F"), explanation=explanation)


# ------------------------------------------------------------------------------
# Circuits
# ------------------------------------------------------------------------------
_RESISTANCE_EXPLANATIONS = {
    "ohm": "The resistance is calculated using Ohm's Law: R = V/I",
    "resistivity": "The resistance is calculated using R = ρL/A, where ρ is the resistivity",
    "power": "The resistance is calculated using R = P/I², derived from P = I²R",
}


def evaluate_resistance(params: ParameterSet) -> CalculationResult:
    r = resistance_of(params)
    return CalculationSuccess(
        primary=_fixed(r, "Ω"),
        explanation=_RESISTANCE_EXPLANATIONS[params.variant],
    )


def evaluate_direct_current(params: ParameterSet) -> CalculationResult:
    v, r = params["voltage"], params["resistance"]
    current = v / r
    power = v * current
    return CalculationSuccess(
        primary=_fixed(current, "A"),
        explanation=f"The current is calculated using Ohm's Law: I = V/R = {v:g}V/{r:g}Ω "
                    f"= {current:.3f}A. The power dissipated is P = VI = {power:.3f}W.",
        extras={"power": _fixed(power, "W", label="Power")},
    )


def evaluate_ac_circuit(params: ParameterSet) -> CalculationResult:
    ac = ac_response_of(params)
    apparent = params["voltage"] * ac.current
    return CalculationSuccess(
        primary=_fixed(ac.impedance, "Ω"),
        explanation="The impedance is calculated using Z = √(R² + (XL - XC)²) where XL = ωL "
                    "and XC = 1/(ωC). The current amplitude is I = V/Z.",
        extras={
            "inductive_reactance": _fixed(ac.inductive_reactance, "Ω", label="Inductive reactance XL"),
            "capacitive_reactance": _fixed(ac.capacitive_reactance, "Ω", label="Capacitive reactance XC"),
            "current": _fixed(ac.current, "A", label="Current amplitude"),
            "phase": _fixed(math.degrees(ac.phase), "°", decimals=1, label="Phase difference"),
            "power_factor": _fixed(ac.power_factor, "", label="Power factor"),
            "real_power": _fixed(apparent * ac.power_factor, "W", label="Real power"),
            "reactive_power": _fixed(apparent * math.sin(ac.phase), "VAR", label="Reactive power"),
            "apparent_power": _fixed(apparent, "VA", label="Apparent power"),
        },
    )


# ------------------------------------------------------------------------------
# Magnetism & induction
# ------------------------------------------------------------------------------
def evaluate_magnetic_force(params: ParameterSet) -> CalculationResult:
    force = abs(params["current"] * params["wire_length"] * params["magnetic_field"])
    return CalculationSuccess(
        primary=_fixed(force, "N"),
        explanation="The magnetic force on a current-carrying wire is calculated using "
                    "F = |I × L × B| where I is current, L is length, and B is the magnetic field strength.",
    )


def evaluate_coil_emf(params: ParameterSet) -> CalculationResult:
    emf = abs(params["coil_turns"] * params["loop_area"] * params["field_change_rate"])
    return CalculationSuccess(
        primary=_fixed(emf, "V"),
        explanation="The induced EMF is calculated using Faraday's Law: EMF = -N × A × (dB/dt) "
                    "where N is the number of turns, A is the area, and dB/dt is the rate of "
                    "change of the magnetic field.",
    )


def evaluate_induced_voltage(params: ParameterSet) -> CalculationResult:
    emf = params["flux_change_rate"] * params["loop_area"] * params["num_loops"]
    return CalculationSuccess(
        primary=_fixed(emf, "V"),
        explanation="The induced voltage is calculated using Faraday's Law: EMF = -N × A × (dB/dt) "
                    "where N is the number of loops, A is the area, and dB/dt is the rate of "
                    "change of magnetic flux.",
    )


def evaluate_inductance(params: ParameterSet) -> CalculationResult:
    inductance = solenoid_inductance(params["num_turns"], params["coil_radius"], params["coil_length"])
    emf = inductance * params["current_change_rate"]
    return CalculationSuccess(
        primary=_fixed(inductance, "H", decimals=6),
        explanation="The inductance of a solenoid is calculated using L = μ₀N²A/l where N is the "
                    "number of turns, A is the cross-sectional area, and l is the length.",
        extras={"emf": _fixed(emf, "V", label="Self-induced EMF")},
    )


# ------------------------------------------------------------------------------
# Optics
# ------------------------------------------------------------------------------
def evaluate_reflection(params: ParameterSet) -> CalculationResult:
    angle = params["incident_angle"]
    return CalculationSuccess(
        primary=_fixed(angle, "°", decimals=1),
        explanation="According to the Law of Reflection, the angle of reflection equals the "
                    f"angle of incidence: θᵣ = θᵢ = {angle:g}°.",
    )


def evaluate_refraction(params: ParameterSet) -> CalculationResult:
    n1, n2 = params["n1"], params["n2"]
    sine = refracted_sine(params["incident_angle"], n1, n2)
    if abs(sine) > 1:
        extras = {}
        if n2 < n1:
            extras["critical_angle"] = _fixed(
                math.degrees(math.asin(n2 / n1)), "°", decimals=1, label="Critical angle"
            )
        return DomainOutcome(
            kind=DomainOutcomeKind.TOTAL_INTERNAL_REFLECTION,
            explanation="Total internal reflection occurs when light travels from a medium with "
                        "higher refractive index to one with lower refractive index at an angle "
                        "greater than the critical angle.",
            extras=extras,
        )
    return CalculationSuccess(
        primary=_fixed(math.degrees(math.asin(sine)), "°", decimals=1),
        explanation="The refracted angle is calculated using Snell's Law: n₁sin(θ₁) = n₂sin(θ₂).",
    )


def evaluate_image(params: ParameterSet) -> CalculationResult:
    """Image distance and magnification; shared by both image topics."""
    do, f = params["object_distance"], params["focal_length"]
    di = image_distance(do, f)
    m = -di / do
    return CalculationSuccess(
        primary=_fixed(di, "cm", decimals=2),
        explanation="The image distance is calculated using the lens/mirror equation: "
                    "1/f = 1/do + 1/di, where f is focal length, do is object distance, and di is "
                    f"image distance. The magnification is m = -di/do = {m:.2f}. "
                    + describe_image(di, m),
        extras={"magnification": _fixed(m, "", decimals=2, label="Magnification")},
    )
