import pytest

from conftest import sample_params
from physicsexplorer.model.results import CalculationError
from physicsexplorer.model.state import Phase, SimulationState
from physicsexplorer.model.topics import get_topic, list_keys
from physicsexplorer.view.canvas import RecordingCanvas
from physicsexplorer.view.renderers.base import TopicRenderer
from physicsexplorer.view.renderers.registry import create_renderer, list_keys as renderer_keys, register_renderer

VARIANT_INPUTS = [
    ("capacitance", {"capacitor_type": "spherical", "inner_radius": "0.1", "outer_radius": "0.2"}),
    ("current-resistance", {"method": "resistivity", "resistivity": "1.68e-8",
                            "wire_length": "10", "wire_area": "1e-6"}),
    ("current-resistance", {"method": "power", "power": "50", "current": "5"}),
    ("light-reflection", {"surface": "concave"}),
    ("light-reflection", {"surface": "convex"}),
    ("light-refraction", {"incident_angle": "60", "n1": "1.5", "n2": "1"}),
    ("mirrors-lenses", {"optic": "diverging-lens"}),
    ("mirrors-lenses", {"optic": "converging-mirror", "object_distance": "5"}),
    ("mirrors-lenses", {"optic": "diverging-mirror"}),
    ("image-formation", {"element": "concave-mirror"}),
    ("image-formation", {"element": "convex-mirror"}),
    ("ac-circuits", {"capacitance": ""}),
    ("electric-forces", {"charge2": "0"}),
]


def running_state(key, params, ticks):
    dt = get_topic(key).time_step(params)
    return SimulationState(Phase.RUNNING, ticks * dt, 50, ticks)


def draw(key, params, state, result=None):
    canvas = RecordingCanvas()
    if result is None:
        result = get_topic(key).evaluate(params)
    create_renderer(key).render(canvas, state, params, result)
    return canvas


def test_every_topic_has_a_renderer():
    assert set(renderer_keys()) == set(list_keys())


@pytest.mark.parametrize("key", list_keys())
@pytest.mark.parametrize("ticks", [0, 1, 17, 120])
def test_rendering_is_repeatable(key, ticks):
    params = sample_params(key)
    snapshot = params.as_dict()
    state = running_state(key, params, ticks)
    first = draw(key, params, state)
    second = draw(key, params, state)
    assert first.commands == second.commands
    assert first.kinds()[0] == "clear"
    assert len(first.commands) > 2
    assert params.as_dict() == snapshot
    assert state == running_state(key, params, ticks)


@pytest.mark.parametrize("key, overrides", VARIANT_INPUTS)
def test_variants_render(key, overrides):
    params = sample_params(key, **overrides)
    for ticks in (0, 40):
        canvas = draw(key, params, running_state(key, params, ticks))
        assert len(canvas.commands) > 2


@pytest.mark.parametrize("key", list_keys())
def test_placeholder_without_parameters(key):
    canvas = RecordingCanvas()
    create_renderer(key).render(canvas, SimulationState(), None, None)
    assert canvas.kinds() == ["clear", "text"]
    assert canvas.texts() == ["Enter the parameters and press Calculate."]


def test_placeholder_after_an_error():
    params = sample_params("direct-current")
    canvas = draw("direct-current", params, SimulationState(), CalculationError("Resistance must not be zero."))
    assert canvas.texts() == ["Fix the input to see the simulation."]


def test_idle_frame_shows_the_result():
    params = sample_params("electric-forces")
    canvas = draw("electric-forces", params, SimulationState())
    assert any("N" in text for text in canvas.texts())
    assert "Press Simulate to animate" in canvas.texts()


def test_frames_change_while_running():
    params = sample_params("direct-current")
    early = draw("direct-current", params, running_state("direct-current", params, 1))
    late = draw("direct-current", params, running_state("direct-current", params, 30))
    assert early.commands != late.commands


def test_registry_rejects_missing_key():
    class Nameless(TopicRenderer):
        def draw(self, canvas, derived, params, result, state):
            pass

    with pytest.raises(ValueError):
        register_renderer(Nameless)


def test_unknown_renderer():
    with pytest.raises(KeyError):
        create_renderer("no-such-topic")
