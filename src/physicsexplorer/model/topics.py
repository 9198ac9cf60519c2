"""
Topic Registry
==============
Table of the fourteen topics: their input form, their formula and their
animation callbacks.

Why is this file needed?
------------------------
1. Dispatch: the validator, the session and the renderers look a topic up by
   its key instead of branching on it.
2. Uniform testing: every topic exposes the same five members, so the tests
   can iterate over `list_keys()`.

Usage:
    >>> topic = get_topic("electric-forces")
    >>> topic.spec_for(None).names()
    ['charge1', 'charge2', 'distance']
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from physicsexplorer.model import formulas, kinematics
from physicsexplorer.model.kinematics import DerivedQuantities
from physicsexplorer.model.parameters import ChoiceField, CrossFieldRule, NumericField, ParameterSet, ParameterSpec
from physicsexplorer.model.results import CalculationResult

logger = logging.getLogger(__name__)

Evaluate = Callable[[ParameterSet], CalculationResult]
Derive = Callable[[float, ParameterSet], DerivedQuantities]
TimeStep = Callable[[ParameterSet], float]


@dataclass(frozen=True)
class TopicDefinition:
    key: str
    title: str
    specs: Mapping[Optional[str], ParameterSpec]
    evaluate: Evaluate
    derive: Derive
    time_step: TimeStep
    selector: Optional[ChoiceField] = None
    category: str = ""
    sample_inputs: Mapping[str, str] = field(default_factory=dict)

    def spec_for(self, variant: Optional[str]) -> ParameterSpec:
        try:
            return self.specs[variant]
        except KeyError:
            raise KeyError(f"Topic '{self.key}' has no variant '{variant}'") from None

    @property
    def variants(self) -> list[Optional[str]]:
        return list(self.specs.keys())


_REGISTRY: dict[str, TopicDefinition] = {}


def register_topic(topic: TopicDefinition) -> TopicDefinition:
    if topic.key in _REGISTRY:
        raise ValueError(f"Topic '{topic.key}' registered twice")
    if topic.selector is None and list(topic.specs) != [None]:
        raise ValueError(f"Topic '{topic.key}' has variants but no selector")
    _REGISTRY[topic.key] = topic
    return topic


def get_topic(key: str) -> TopicDefinition:
    topic = _REGISTRY.get(key)
    if topic is None:
        raise KeyError(f"No topic registered for key '{key}'")
    return topic


def list_keys() -> list[str]:
    return list(_REGISTRY.keys())


# ------------------------------------------------------------------------------
# Field shorthands
# ------------------------------------------------------------------------------
def _num(name: str, label: str, unit: str = "", **kwargs) -> NumericField:
    return NumericField(name=name, label=label, unit=unit, **kwargs)


def _angle(name: str = "incident_angle", label: str = "Angle of incidence") -> NumericField:
    return _num(name, label, "°", minimum=0.0, maximum=90.0)


_DIELECTRIC = _num("dielectric_constant", "Dielectric constant κ", required=False, default=1.0,
                   placeholder="1 (vacuum)")


def _image_spec() -> ParameterSpec:
    return ParameterSpec(
        fields=(
            _num("object_distance", "Object distance", "cm", nonzero=True),
            _num("focal_length", "Focal length", "cm", nonzero=True),
        ),
        rules=(
            CrossFieldRule(
                "Object distance must differ from the focal length (the image would be at infinity).",
                lambda v: v["object_distance"] != v["focal_length"],
                field="object_distance",
            ),
        ),
    )


def _square_nonzero(name: str, label: str) -> CrossFieldRule:
    """A divisor r² must not underflow to zero even when r itself is not zero."""
    return CrossFieldRule(
        f"{label} is too small: its square rounds to zero.",
        lambda v: v[name] * v[name] != 0,
        field=name,
    )


def _capacitive_reactance_defined(values: Mapping[str, float]) -> bool:
    capacitance = values.get("capacitance")
    return capacitance is None or 2 * math.pi * values["frequency"] * capacitance != 0


def _impedance_positive(values: Mapping[str, float]) -> bool:
    # Runs after _capacitive_reactance_defined, so XC is computable.
    xl, xc = formulas.reactances(values["frequency"], values.get("inductance", 0.0),
                                 values.get("capacitance"))
    return formulas.series_impedance(values["resistance"], xl, xc) > 0


# ------------------------------------------------------------------------------
# Topics
# ------------------------------------------------------------------------------
register_topic(TopicDefinition(
    key="electric-forces",
    title="Electric Forces",
    category="Electrostatics",
    specs={None: ParameterSpec(
        fields=(
            _num("charge1", "Charge q₁", "C"),
            _num("charge2", "Charge q₂", "C"),
            _num("distance", "Distance r", "m", nonzero=True),
        ),
        rules=(_square_nonzero("distance", "Distance r"),),
    )},
    evaluate=formulas.evaluate_electric_force,
    derive=kinematics.derive_electric_force,
    time_step=kinematics.step_electric_force,
    sample_inputs={"charge1": "2e-6", "charge2": "-2e-6", "distance": "2"},
))

register_topic(TopicDefinition(
    key="electric-fields",
    title="Electric Fields",
    category="Electrostatics",
    specs={None: ParameterSpec(
        fields=(
            _num("charge", "Charge q", "C"),
            _num("distance", "Distance r", "m", nonzero=True),
        ),
        rules=(_square_nonzero("distance", "Distance r"),),
    )},
    evaluate=formulas.evaluate_electric_field,
    derive=kinematics.derive_electric_field,
    time_step=kinematics.step_electric_field,
    sample_inputs={"charge": "1e-6", "distance": "1.5"},
))

register_topic(TopicDefinition(
    key="capacitance",
    title="Capacitance",
    category="Electrostatics",
    selector=ChoiceField("capacitor_type", "Capacitor type",
                         (("parallel", "Parallel plate"), ("spherical", "Spherical"))),
    specs={
        "parallel": ParameterSpec(fields=(
            _num("plate_area", "Plate area A", "m²"),
            _num("plate_separation", "Plate separation d", "m", nonzero=True),
            _DIELECTRIC,
        )),
        "spherical": ParameterSpec(
            fields=(
                _num("inner_radius", "Inner radius r₁", "m"),
                _num("outer_radius", "Outer radius r₂", "m"),
                _DIELECTRIC,
            ),
            rules=(CrossFieldRule(
                "Outer radius must be greater than inner radius.",
                lambda v: v["outer_radius"] > v["inner_radius"],
                field="outer_radius",
            ),),
        ),
    },
    evaluate=formulas.evaluate_capacitance,
    derive=kinematics.derive_capacitance,
    time_step=kinematics.step_capacitance,
    sample_inputs={"capacitor_type": "parallel", "plate_area": "0.01", "plate_separation": "0.001"},
))

register_topic(TopicDefinition(
    key="current-resistance",
    title="Current & Resistance",
    category="Circuits",
    selector=ChoiceField("method", "Calculation method", (
        ("ohm", "Ohm's law (V, I)"),
        ("resistivity", "Resistivity (ρ, L, A)"),
        ("power", "Power (P, I)"),
    )),
    specs={
        "ohm": ParameterSpec(fields=(
            _num("voltage", "Voltage V", "V"),
            _num("current", "Current I", "A", nonzero=True),
        )),
        "resistivity": ParameterSpec(fields=(
            _num("resistivity", "Resistivity ρ", "Ω·m"),
            _num("wire_length", "Wire length L", "m"),
            _num("wire_area", "Cross-sectional area A", "m²", nonzero=True),
        )),
        "power": ParameterSpec(
            fields=(
                _num("power", "Power dissipated P", "W"),
                _num("current", "Current I", "A", nonzero=True),
            ),
            rules=(_square_nonzero("current", "Current I"),),
        ),
    },
    evaluate=formulas.evaluate_resistance,
    derive=kinematics.derive_resistance,
    time_step=kinematics.step_resistance,
    sample_inputs={"method": "ohm", "voltage": "12", "current": "2"},
))

register_topic(TopicDefinition(
    key="direct-current",
    title="Direct Current",
    category="Circuits",
    specs={None: ParameterSpec(fields=(
        _num("voltage", "Voltage V", "V"),
        _num("resistance", "Resistance R", "Ω", nonzero=True),
    ))},
    evaluate=formulas.evaluate_direct_current,
    derive=kinematics.derive_direct_current,
    time_step=kinematics.step_direct_current,
    sample_inputs={"voltage": "12", "resistance": "4"},
))

register_topic(TopicDefinition(
    key="magnetism",
    title="Magnetism",
    category="Magnetism",
    specs={None: ParameterSpec(fields=(
        _num("current", "Current I", "A"),
        _num("wire_length", "Wire length L", "m"),
        _num("magnetic_field", "Magnetic field B", "T"),
    ))},
    evaluate=formulas.evaluate_magnetic_force,
    derive=kinematics.derive_magnetism,
    time_step=kinematics.step_magnetism,
    sample_inputs={"current": "5", "wire_length": "0.5", "magnetic_field": "0.2"},
))

register_topic(TopicDefinition(
    key="electromagnetism",
    title="Electromagnetism",
    category="Magnetism",
    specs={None: ParameterSpec(fields=(
        _num("coil_turns", "Number of turns N"),
        _num("loop_area", "Loop area A", "m²"),
        _num("field_change_rate", "Rate of field change dB/dt", "T/s"),
        _num("movement_speed", "Magnet speed", "px/tick", required=False, default=5.0,
             placeholder="5"),
    ))},
    evaluate=formulas.evaluate_coil_emf,
    derive=kinematics.derive_electromagnetism,
    time_step=kinematics.step_electromagnetism,
    sample_inputs={"coil_turns": "100", "loop_area": "0.01", "field_change_rate": "0.5"},
))

register_topic(TopicDefinition(
    key="induced-voltages",
    title="Induced Voltages",
    category="Magnetism",
    specs={None: ParameterSpec(fields=(
        _num("flux_change_rate", "Rate of flux change dB/dt", "T/s"),
        _num("loop_area", "Loop area A", "m²"),
        _num("num_loops", "Number of loops N"),
    ))},
    evaluate=formulas.evaluate_induced_voltage,
    derive=kinematics.derive_induced_voltage,
    time_step=kinematics.step_induced_voltage,
    sample_inputs={"flux_change_rate": "2", "loop_area": "0.05", "num_loops": "50"},
))

register_topic(TopicDefinition(
    key="inductance",
    title="Inductance",
    category="Magnetism",
    specs={None: ParameterSpec(fields=(
        _num("num_turns", "Number of turns N"),
        _num("coil_radius", "Coil radius r", "m"),
        _num("coil_length", "Coil length l", "m", nonzero=True),
        _num("current_change_rate", "Rate of current change dI/dt", "A/s", required=False,
             default=0.0, placeholder="0"),
    ))},
    evaluate=formulas.evaluate_inductance,
    derive=kinematics.derive_inductance,
    time_step=kinematics.step_inductance,
    sample_inputs={"num_turns": "200", "coil_radius": "0.02", "coil_length": "0.1",
                   "current_change_rate": "5"},
))

register_topic(TopicDefinition(
    key="ac-circuits",
    title="AC Circuits",
    category="Circuits",
    specs={None: ParameterSpec(
        fields=(
            _num("voltage", "Voltage amplitude V", "V"),
            _num("frequency", "Frequency f", "Hz", nonzero=True),
            _num("resistance", "Resistance R", "Ω"),
            _num("inductance", "Inductance L", "H", required=False, default=0.0, placeholder="0"),
            _num("capacitance", "Capacitance C", "F", required=False, zero_is_blank=True,
                 placeholder="none (blank or 0)"),
        ),
        rules=(
            CrossFieldRule(
                "Capacitance C is too small for this frequency: 2πfC rounds to zero.",
                _capacitive_reactance_defined,
                field="capacitance",
            ),
            CrossFieldRule(
                "Impedance must not be zero: give a resistance or an unbalanced reactance.",
                _impedance_positive,
                field="resistance",
            ),
        ),
    )},
    evaluate=formulas.evaluate_ac_circuit,
    derive=kinematics.derive_ac,
    time_step=kinematics.step_ac,
    sample_inputs={"voltage": "120", "frequency": "60", "resistance": "100",
                   "inductance": "0.1", "capacitance": "1e-6"},
))

register_topic(TopicDefinition(
    key="light-reflection",
    title="Light Reflection",
    category="Optics",
    selector=ChoiceField("surface", "Surface", (
        ("plane", "Plane mirror"),
        ("concave", "Concave mirror"),
        ("convex", "Convex mirror"),
    ), default="plane"),
    specs={
        "plane": ParameterSpec(fields=(_angle(),)),
        "concave": ParameterSpec(fields=(_angle(),)),
        "convex": ParameterSpec(fields=(_angle(),)),
    },
    evaluate=formulas.evaluate_reflection,
    derive=kinematics.derive_reflection,
    time_step=kinematics.step_ray_sweep,
    sample_inputs={"surface": "plane", "incident_angle": "30"},
))

register_topic(TopicDefinition(
    key="light-refraction",
    title="Light Refraction",
    category="Optics",
    specs={None: ParameterSpec(fields=(
        _angle(),
        _num("n1", "Refractive index n₁"),
        _num("n2", "Refractive index n₂", nonzero=True),
    ))},
    evaluate=formulas.evaluate_refraction,
    derive=kinematics.derive_refraction,
    time_step=kinematics.step_ray_sweep,
    sample_inputs={"incident_angle": "30", "n1": "1.0", "n2": "1.5"},
))

register_topic(TopicDefinition(
    key="mirrors-lenses",
    title="Mirrors & Lenses",
    category="Optics",
    selector=ChoiceField("optic", "Optic", (
        ("converging-lens", "Converging (convex) lens"),
        ("diverging-lens", "Diverging (concave) lens"),
        ("converging-mirror", "Converging (concave) mirror"),
        ("diverging-mirror", "Diverging (convex) mirror"),
    ), default="converging-lens"),
    specs={
        "converging-lens": _image_spec(),
        "diverging-lens": _image_spec(),
        "converging-mirror": _image_spec(),
        "diverging-mirror": _image_spec(),
    },
    evaluate=formulas.evaluate_image,
    derive=kinematics.derive_image,
    time_step=kinematics.step_ray_progress,
    sample_inputs={"optic": "converging-lens", "object_distance": "20", "focal_length": "10"},
))

register_topic(TopicDefinition(
    key="image-formation",
    title="Image Formation",
    category="Optics",
    selector=ChoiceField("element", "Optical element", (
        ("thin-lens", "Thin lens"),
        ("concave-mirror", "Concave mirror"),
        ("convex-mirror", "Convex mirror"),
    ), default="thin-lens"),
    specs={
        "thin-lens": _image_spec(),
        "concave-mirror": _image_spec(),
        "convex-mirror": _image_spec(),
    },
    evaluate=formulas.evaluate_image,
    derive=kinematics.derive_image,
    time_step=kinematics.step_ray_progress,
    sample_inputs={"element": "thin-lens", "object_distance": "15", "focal_length": "10"},
))

logger.debug(f"Registered {len(_REGISTRY)} topics.")
