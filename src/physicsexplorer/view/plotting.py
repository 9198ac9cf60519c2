"""
Static plots of the derived quantities over a run of ticks.

Handy for checking an animation without watching it: the values plotted are
exactly the ones the renderer draws at each tick.
"""
from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt

from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.topics import get_topic

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.figure import Figure


def sample_run(
    params: ParameterSet,
    ticks: int = 100,
    quantities: Optional[Sequence[str]] = None,
) -> tuple[npt.NDArray[np.float64], dict[str, npt.NDArray[np.float64]]]:
    """
    Evaluate ``derive`` at ticks ``0..ticks``.

    Returns:
        Elapsed values and one array per derived quantity.
    """
    topic = get_topic(params.topic)
    dt = topic.time_step(params)
    elapsed = np.arange(ticks + 1, dtype=np.float64) * dt
    frames = [topic.derive(float(t), params) for t in elapsed]
    names = list(quantities) if quantities is not None else list(frames[0].keys())
    return elapsed, {name: np.array([frame[name] for frame in frames]) for name in names}


def plot_run(
    params: ParameterSet,
    ticks: int = 100,
    quantities: Optional[Sequence[str]] = None,
    show: bool = True,
) -> Figure:
    """Plot the derived quantities of ``params`` against the tick number."""
    topic = get_topic(params.topic)
    elapsed, series = sample_run(params, ticks, quantities)
    tick_numbers = np.arange(len(elapsed))

    plt.rcParams["figure.constrained_layout.use"] = True
    fig, axes = plt.subplots(len(series), 1, figsize=(7, 1.8 * len(series) + 1), sharex=True, squeeze=False)
    for ax, (name, values) in zip(axes[:, 0], series.items()):
        ax.plot(tick_numbers, values, 'b', lw=1.5)
        ax.set_ylabel(name)
        ax.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        ax.minorticks_on()
        ax.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

    axes[0, 0].set_title(f"{topic.title}: derived quantities")
    axes[-1, 0].set_xlabel("Tick")
    if show:
        plt.show()
    return fig
