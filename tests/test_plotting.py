import numpy as np
import pytest
from matplotlib.figure import Figure

from conftest import sample_params
from physicsexplorer.model.topics import get_topic
from physicsexplorer.view.plotting import plot_run, sample_run


def test_sample_run_follows_derive():
    params = sample_params("capacitance")
    elapsed, series = sample_run(params, ticks=40)
    assert elapsed.shape == (41,)
    assert elapsed[1] == pytest.approx(0.05)
    assert set(series) == set(get_topic("capacitance").derive(0.0, params))
    assert series["charge_level"][0] == 0.0
    assert series["charge_level"][-1] == 1.0
    assert np.all(np.diff(series["charge_level"]) >= 0)


def test_sample_run_selected_quantities():
    params = sample_params("ac-circuits")
    _, series = sample_run(params, ticks=20, quantities=["voltage", "current"])
    assert list(series) == ["voltage", "current"]
    assert series["voltage"].max() <= 120.0 + 1e-9


def test_plot_run_returns_a_figure():
    import matplotlib.pyplot as plt

    params = sample_params("inductance", current_change_rate="5")
    fig = plot_run(params, ticks=30, quantities=["current", "emf"], show=False)
    assert isinstance(fig, Figure)
    assert len(fig.axes) == 2
    assert fig.axes[0].get_title().startswith(get_topic("inductance").title)
    plt.close(fig)
