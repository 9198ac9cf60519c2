import dataclasses

import pytest

from physicsexplorer.model.errors import ConstraintViolation, MissingField, NotANumber, ValidationError
from physicsexplorer.model.topics import get_topic, list_keys
from physicsexplorer.model.validation import validate


def test_all_fourteen_topics_are_registered():
    assert len(list_keys()) == 14
    assert "electric-forces" in list_keys()
    assert "image-formation" in list_keys()


@pytest.mark.parametrize("key", list_keys())
def test_sample_inputs_validate(key):
    params = validate(key, get_topic(key).sample_inputs)
    assert params.topic == key


def test_parses_and_strips_whitespace():
    params = validate("electric-forces", {"charge1": " 1.6e-19 ", "charge2": "1.6e-19", "distance": "1"})
    assert params["charge1"] == pytest.approx(1.6e-19)
    assert params.variant is None


def test_missing_required_field():
    with pytest.raises(MissingField) as exc:
        validate("electric-forces", {"charge1": "1", "charge2": "", "distance": "1"})
    assert exc.value.field == "charge2"


def test_absent_required_field():
    with pytest.raises(MissingField):
        validate("direct-current", {"voltage": "12"})


@pytest.mark.parametrize("raw", ["abc", "1,5", "nan", "inf", "-inf", "1e400"])
def test_not_a_number(raw):
    with pytest.raises(NotANumber) as exc:
        validate("direct-current", {"voltage": raw, "resistance": "4"})
    assert exc.value.field == "voltage"


def test_validation_errors_share_a_base_class():
    with pytest.raises(ValidationError) as exc:
        validate("direct-current", {"voltage": "x", "resistance": "4"})
    assert "Voltage" in exc.value.message


@pytest.mark.parametrize("key, raw", [
    ("electric-forces", {"charge1": "1", "charge2": "1", "distance": "0"}),
    ("electric-fields", {"charge": "1", "distance": "0"}),
    ("direct-current", {"voltage": "12", "resistance": "0"}),
    ("current-resistance", {"method": "ohm", "voltage": "12", "current": "0"}),
    ("current-resistance", {"method": "resistivity", "resistivity": "1", "wire_length": "1", "wire_area": "0"}),
    ("current-resistance", {"method": "power", "power": "5", "current": "0"}),
    ("capacitance", {"capacitor_type": "parallel", "plate_area": "1", "plate_separation": "0"}),
    ("inductance", {"num_turns": "10", "coil_radius": "0.1", "coil_length": "0"}),
    ("ac-circuits", {"voltage": "1", "frequency": "0", "resistance": "1"}),
    ("light-refraction", {"incident_angle": "30", "n1": "1", "n2": "0"}),
    ("mirrors-lenses", {"optic": "converging-lens", "object_distance": "10", "focal_length": "0"}),
    ("image-formation", {"element": "thin-lens", "object_distance": "0", "focal_length": "10"}),
])
def test_zero_divisors_are_rejected(key, raw):
    with pytest.raises(ConstraintViolation):
        validate(key, raw)


def test_outer_radius_must_exceed_inner():
    raw = {"capacitor_type": "spherical", "inner_radius": "0.2", "outer_radius": "0.2"}
    with pytest.raises(ConstraintViolation) as exc:
        validate("capacitance", raw)
    assert "Outer radius" in exc.value.detail


@pytest.mark.parametrize("angle, ok", [("0", True), ("90", True), ("-1", False), ("90.5", False)])
def test_angle_range_is_inclusive(angle, ok):
    raw = {"surface": "plane", "incident_angle": angle}
    if ok:
        assert validate("light-reflection", raw)["incident_angle"] == float(angle)
    else:
        with pytest.raises(ConstraintViolation):
            validate("light-reflection", raw)


def test_object_at_focal_point_is_rejected():
    raw = {"optic": "converging-mirror", "object_distance": "10", "focal_length": "10"}
    with pytest.raises(ConstraintViolation):
        validate("mirrors-lenses", raw)


def test_optional_fields_take_their_defaults():
    params = validate("capacitance", {"capacitor_type": "parallel", "plate_area": "0.01",
                                      "plate_separation": "0.001", "dielectric_constant": "  "})
    assert params["dielectric_constant"] == 1.0

    params = validate("electromagnetism", {"coil_turns": "10", "loop_area": "1", "field_change_rate": "1"})
    assert params["movement_speed"] == 5.0

    params = validate("inductance", {"num_turns": "10", "coil_radius": "0.1", "coil_length": "1"})
    assert params["current_change_rate"] == 0.0


def test_missing_capacitor_means_no_capacitor():
    params = validate("ac-circuits", {"voltage": "120", "frequency": "60", "resistance": "100"})
    assert params["inductance"] == 0.0
    assert "capacitance" not in params


@pytest.mark.parametrize("raw", ["0", " 0.0 ", "-0"])
def test_zero_capacitance_means_no_capacitor(raw):
    params = validate("ac-circuits", {"voltage": "120", "frequency": "60", "resistance": "100", "capacitance": raw})
    assert "capacitance" not in params


@pytest.mark.parametrize("key, raw, field", [
    ("electric-forces", {"charge1": "1", "charge2": "1", "distance": "1e-200"}, "distance"),
    ("electric-fields", {"charge": "1", "distance": "-1e-170"}, "distance"),
    ("current-resistance", {"method": "power", "power": "5", "current": "1e-200"}, "current"),
    ("ac-circuits", {"voltage": "120", "frequency": "1e-320", "resistance": "100", "capacitance": "1e-6"},
     "capacitance"),
])
def test_divisors_that_round_to_zero_are_rejected(key, raw, field):
    with pytest.raises(ConstraintViolation) as exc:
        validate(key, raw)
    assert exc.value.field == field
    assert "too small" in exc.value.detail


def test_tiny_frequency_without_capacitor_is_accepted():
    params = validate("ac-circuits", {"voltage": "120", "frequency": "1e-320", "resistance": "100"})
    assert params["frequency"] == 1e-320


def test_opposing_infinite_reactances_are_rejected():
    raw = {"voltage": "1", "frequency": "1e10", "resistance": "1", "inductance": "1e300", "capacitance": "1e-320"}
    with pytest.raises(ConstraintViolation) as exc:
        validate("ac-circuits", raw)
    assert "Impedance" in exc.value.detail


def test_zero_impedance_is_rejected():
    with pytest.raises(ConstraintViolation) as exc:
        validate("ac-circuits", {"voltage": "120", "frequency": "60", "resistance": "0"})
    assert "Impedance" in exc.value.detail


def test_selector_is_required_without_default():
    with pytest.raises(MissingField):
        validate("capacitance", {"plate_area": "1", "plate_separation": "1"})


def test_selector_default_is_used():
    params = validate("light-reflection", {"incident_angle": "45"})
    assert params.variant == "plane"


def test_unknown_selector_value():
    with pytest.raises(ConstraintViolation):
        validate("capacitance", {"capacitor_type": "cylindrical", "plate_area": "1", "plate_separation": "1"})


def test_unknown_topic():
    with pytest.raises(KeyError):
        validate("quantum-tunnelling", {})


def test_validation_is_pure():
    raw = {"charge1": "2e-6", "charge2": "-2e-6", "distance": "2"}
    snapshot = dict(raw)
    first = validate("electric-forces", raw)
    second = validate("electric-forces", raw)
    assert first == second
    assert raw == snapshot


def test_parameter_set_is_immutable():
    params = validate("direct-current", {"voltage": "12", "resistance": "4"})
    with pytest.raises(TypeError):
        params.values["voltage"] = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.topic = "magnetism"


def test_parameter_set_does_not_alias_input():
    from physicsexplorer.model.parameters import ParameterSet

    values = {"voltage": 12.0, "resistance": 4.0}
    params = ParameterSet("direct-current", values)
    values["voltage"] = 0.0
    assert params["voltage"] == 12.0
