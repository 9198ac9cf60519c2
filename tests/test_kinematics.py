import math

import pytest

from conftest import sample_params
from physicsexplorer.model import kinematics
from physicsexplorer.model.topics import get_topic, list_keys


@pytest.mark.parametrize("key", list_keys())
def test_derive_is_a_pure_function_of_elapsed(key):
    topic = get_topic(key)
    params = sample_params(key)
    before = params.as_dict()
    dt = topic.time_step(params)
    for tick in (0, 1, 7, 50):
        first = topic.derive(tick * dt, params)
        second = topic.derive(tick * dt, params)
        assert dict(first) == dict(second)
        assert all(math.isfinite(v) for v in first.values())
    assert params.as_dict() == before


@pytest.mark.parametrize("key", list_keys())
def test_derived_quantities_are_read_only(key):
    derived = get_topic(key).derive(0.0, sample_params(key))
    with pytest.raises(TypeError):
        derived["anything"] = 1.0


@pytest.mark.parametrize("key", list_keys())
def test_time_step_is_not_negative(key):
    assert get_topic(key).time_step(sample_params(key)) >= 0


def test_triangle_wave():
    assert kinematics.triangle_wave(0, 10) == (0.0, 1.0)
    assert kinematics.triangle_wave(4, 10) == (4.0, 1.0)
    assert kinematics.triangle_wave(10, 10) == (10.0, -1.0)
    assert kinematics.triangle_wave(15, 10) == (5.0, -1.0)
    assert kinematics.triangle_wave(24, 10) == (4.0, 1.0)
    assert kinematics.triangle_wave(3, 0) == (0.0, 1.0)


def test_opposite_charges_attract_until_the_limit():
    params = sample_params("electric-forces")  # +2 µC and -2 µC, 2 m apart
    derive = kinematics.derive_electric_force
    assert derive(0, params)["separation"] == pytest.approx(2.0)
    assert derive(10, params)["separation"] == pytest.approx(1.6)
    assert derive(1000, params)["separation"] == kinematics.CHARGE_MIN_SEPARATION
    assert derive(10, params)["force"] > derive(0, params)["force"]


def test_like_charges_repel_until_the_limit():
    params = sample_params("electric-forces", charge2="2e-6", distance="7.9")
    derived = kinematics.derive_electric_force(100, params)
    assert derived["separation"] == kinematics.CHARGE_MAX_SEPARATION
    assert derived["interaction"] == 1.0


def test_probe_eases_towards_the_target():
    params = sample_params("electric-fields", distance="1.5")
    derive = kinematics.derive_electric_field
    assert derive(0, params)["probe_distance"] == pytest.approx(kinematics.PROBE_MIN_DISTANCE)
    assert derive(5, params)["probe_distance"] < derive(10, params)["probe_distance"] < 1.5
    assert derive(500, params)["probe_distance"] == pytest.approx(1.5)


def test_capacitor_charge_ramps_and_holds():
    params = sample_params("capacitance")
    derive = kinematics.derive_capacitance
    assert derive(0, params)["charge_level"] == 0.0
    assert derive(0.5, params)["charge_level"] == 0.5
    assert derive(3.0, params)["charge_level"] == 1.0


def test_resistance_drift_is_capped():
    params = sample_params("current-resistance", current="1000")
    assert kinematics.step_resistance(params) == kinematics.MAX_DRIFT_PX
    reverse = sample_params("current-resistance", current="-2")
    assert kinematics.derive_resistance(3, reverse)["direction"] == -1.0


def test_power_method_heats_the_wire():
    params = sample_params("current-resistance", method="power", power="50", current="5")
    assert kinematics.derive_resistance(20, params)["heat_phase"] == pytest.approx(2.0)


def test_direct_current_loop():
    params = sample_params("direct-current")
    derived = kinematics.derive_direct_current(12, params)
    assert derived["current"] == pytest.approx(3.0)
    assert derived["power"] == pytest.approx(36.0)
    assert kinematics.step_direct_current(params) == pytest.approx(1.2)


def test_ac_time_step_gives_ten_samples_per_cycle():
    params = sample_params("ac-circuits")
    assert kinematics.step_ac(params) == pytest.approx(1 / 600)


def test_ac_waveforms():
    params = sample_params("ac-circuits")
    derive = kinematics.derive_ac
    start = derive(0.0, params)
    assert start["voltage"] == pytest.approx(0.0)
    assert start["current"] == pytest.approx(start["current_amplitude"] * math.sin(-start["phase"]))
    quarter = derive(start["period"] / 4, params)
    assert quarter["voltage"] == pytest.approx(quarter["voltage_amplitude"])
    full = derive(start["period"], params)
    assert full["voltage"] == pytest.approx(0.0, abs=1e-9)


def test_magnetism_spin():
    params = sample_params("magnetism", current="-5")
    derived = kinematics.derive_magnetism(2.0, params)
    assert derived["direction"] == -1.0
    assert derived["rotation"] == -2.0
    assert kinematics.step_magnetism(sample_params("magnetism", current="1000")) == kinematics.MAX_SPIN_PER_TICK


def test_magnet_sweeps_back_and_forth():
    params = sample_params("electromagnetism")
    derive = kinematics.derive_electromagnetism
    start = derive(0, params)
    assert start["magnet_position"] == -kinematics.MAGNET_BOUND_PX
    assert start["direction"] == 1.0
    assert start["current"] == 0.0
    turn = derive(400, params)
    assert turn["magnet_position"] == kinematics.MAGNET_BOUND_PX
    assert turn["direction"] == -1.0
    centre = derive(600, params)
    assert centre["magnet_position"] == 0.0
    assert abs(centre["needle_angle"]) <= kinematics.NEEDLE_LIMIT_COIL


def test_galvanometer_needle_is_clamped():
    params = sample_params("induced-voltages", flux_change_rate="1000")
    derive = kinematics.derive_induced_voltage
    assert derive(0.0, params)["emf"] == 0.0
    assert derive(0.5, params)["needle_angle"] == pytest.approx(math.pi / 3)
    negative = sample_params("induced-voltages", flux_change_rate="-1000")
    assert derive(0.5, negative)["needle_angle"] == pytest.approx(-math.pi / 3)


def test_solenoid_current_ramps_up_and_down():
    params = sample_params("inductance", current_change_rate="5")
    derive = kinematics.derive_inductance
    assert derive(5, params)["current"] == 5.0
    assert derive(5, params)["ramp"] == 1.0
    assert derive(15, params)["current"] == 5.0
    assert derive(15, params)["ramp"] == -1.0
    assert derive(5, params)["emf"] == pytest.approx(-derive(15, params)["emf"])
    assert kinematics.step_inductance(params) == pytest.approx(1.0)


def test_light_sweep_cycle():
    params = sample_params("light-reflection")
    derive = kinematics.derive_reflection
    start = derive(0, params)
    assert start["ray_position"] == kinematics.RAY_SWEEP_START
    assert start["incident_progress"] == start["outgoing_progress"] == 0.0
    halfway = derive(kinematics.RAY_LEG_LENGTH, params)
    assert halfway["incident_progress"] == 1.0
    assert halfway["outgoing_progress"] == 0.0
    assert derive(2 * kinematics.RAY_LEG_LENGTH, params)["outgoing_progress"] == 1.0
    cycle = kinematics.RAY_SWEEP_END - kinematics.RAY_SWEEP_START + kinematics.RAY_SWEEP_STEP
    assert derive(cycle, params)["ray_position"] == kinematics.RAY_SWEEP_START


def test_refraction_under_total_internal_reflection():
    params = sample_params("light-refraction", incident_angle="60", n1="1.5", n2="1")
    derived = kinematics.derive_refraction(0, params)
    assert derived["total_internal_reflection"] == 1.0
    assert derived["outgoing_angle"] == 60.0


def test_refraction_bends_towards_the_normal():
    derived = kinematics.derive_refraction(0, sample_params("light-refraction"))
    assert derived["total_internal_reflection"] == 0.0
    assert derived["outgoing_angle"] == pytest.approx(19.47, abs=0.01)


def test_image_rays_reveal_and_hold():
    params = sample_params("mirrors-lenses")
    derive = kinematics.derive_image
    assert derive(0, params)["ray_progress"] == 0.0
    assert derive(2, params)["ray_progress"] == 1.0
    assert derive(2, params)["image_distance"] == pytest.approx(20.0)
    assert derive(2, params)["magnification"] == pytest.approx(-1.0)
