import pytest

from conftest import sample_params
from physicsexplorer.controller.animation import AnimationController
from physicsexplorer.model.results import CalculationError
from physicsexplorer.model.state import Phase
from physicsexplorer.model.topics import get_topic


def make_controller(scheduler, key="capacitance", interval=50):
    topic = get_topic(key)
    return AnimationController(topic.derive, topic.time_step, scheduler=scheduler, tick_interval_ms=interval)


def load(controller, key="capacitance", **overrides):
    params = sample_params(key, **overrides)
    result = get_topic(key).evaluate(params)
    controller.set_inputs(params, result)
    return params


def test_refuses_to_start_without_a_result(scheduler):
    controller = make_controller(scheduler)
    assert controller.start() is False
    assert controller.state.phase == Phase.IDLE
    assert scheduler.pending is None


def test_refuses_to_start_after_an_error(scheduler):
    controller = make_controller(scheduler)
    controller.set_inputs(sample_params("capacitance"), CalculationError("bad input"))
    assert controller.start() is False
    assert not controller.is_running()


def test_start_schedules_one_tick(scheduler):
    controller = make_controller(scheduler, interval=40)
    load(controller)
    assert controller.start() is True
    assert controller.is_running()
    assert controller.state.elapsed_time == 0.0
    assert scheduler.intervals == [40]
    assert scheduler.pending is not None


def test_elapsed_is_ticks_times_step(scheduler):
    controller = make_controller(scheduler, key="ac-circuits")
    load(controller, key="ac-circuits")
    controller.start()
    dt = controller.time_step
    assert scheduler.fire(25) == 25
    assert controller.state.tick_count == 25
    assert controller.state.elapsed_time == 25 * dt
    assert dict(controller.derived) == dict(get_topic("ac-circuits").derive(25 * dt, controller.params))


def test_ticks_are_sequential(scheduler):
    controller = make_controller(scheduler)
    load(controller)
    controller.start()
    for expected in range(1, 6):
        scheduler.fire()
        assert controller.state.tick_count == expected
        assert scheduler.pending is not None


def test_stop_resets_to_idle(scheduler):
    controller = make_controller(scheduler)
    params = load(controller)
    controller.start()
    scheduler.fire(10)
    controller.stop()
    assert controller.state.phase == Phase.IDLE
    assert controller.state.elapsed_time == 0.0
    assert controller.state.tick_count == 0
    assert scheduler.pending is None
    assert dict(controller.derived) == dict(get_topic("capacitance").derive(0.0, params))


def test_stale_tick_after_stop_is_dropped(scheduler):
    controller = make_controller(scheduler)
    load(controller)
    controller.start()
    stale = scheduler.pending
    controller.stop()
    stale()
    assert controller.state.tick_count == 0
    assert scheduler.pending is None


def test_stale_tick_from_an_earlier_run_is_dropped(scheduler):
    controller = make_controller(scheduler)
    load(controller)
    controller.start()
    stale = scheduler.pending
    controller.stop()
    controller.start()
    stale()
    assert controller.state.tick_count == 0
    scheduler.fire()
    assert controller.state.tick_count == 1


def test_restart_reproduces_the_first_frame(scheduler):
    controller = make_controller(scheduler, key="electric-forces")
    load(controller, key="electric-forces")
    controller.start()
    first = dict(controller.derived)
    scheduler.fire(30)
    assert dict(controller.derived) != first
    controller.stop()
    controller.start()
    assert dict(controller.derived) == first


def test_set_inputs_stops_a_running_animation(scheduler):
    controller = make_controller(scheduler)
    load(controller)
    controller.start()
    scheduler.fire(3)
    load(controller, plate_area="0.02")
    assert not controller.is_running()
    assert controller.state.elapsed_time == 0.0
    assert scheduler.pending is None


def test_domain_outcome_can_be_animated(scheduler):
    controller = make_controller(scheduler, key="light-refraction")
    load(controller, key="light-refraction", incident_angle="60", n1="1.5", n2="1")
    assert controller.start() is True


def test_listener_stopping_during_a_frame_ends_the_run(scheduler):
    controller = make_controller(scheduler)
    load(controller)
    controller.start()

    def stop_after_three(state):
        if state.tick_count == 3:
            controller.stop()

    controller.state_changed.connect(stop_after_three)
    scheduler.fire(10)
    assert not controller.is_running()
    assert scheduler.pending is None


def test_signals(scheduler):
    controller = make_controller(scheduler)
    load(controller)
    states, frames = [], []
    controller.state_changed.connect(lambda s: states.append(s))
    controller.frame_advanced.connect(lambda f: frames.append(f))
    controller.start()
    scheduler.fire(2)
    controller.stop()
    assert [s.phase for s in states] == [Phase.RUNNING, Phase.RUNNING, Phase.RUNNING, Phase.IDLE]
    assert [f["charge_level"] for f in frames[:3]] == pytest.approx([0.0, 0.05, 0.10])


def test_tick_interval_can_change(scheduler):
    controller = make_controller(scheduler)
    load(controller)
    controller.set_tick_interval(20)
    controller.start()
    assert scheduler.intervals == [20]


def test_refuses_to_start_when_nothing_would_move(scheduler):
    controller = make_controller(scheduler, key="inductance")
    load(controller, key="inductance", current_change_rate="")
    assert controller.time_step == 0.0
    assert controller.can_start() is False
    assert controller.start() is False
    assert controller.state.phase == Phase.IDLE
    assert scheduler.pending is None


def test_solenoid_current_ramps_with_a_rate(scheduler):
    controller = make_controller(scheduler, key="inductance")
    load(controller, key="inductance", current_change_rate="-5")
    assert controller.start() is True
    scheduler.fire(3)
    assert controller.state.elapsed_time > 0
    assert controller.derived["current"] > 0
