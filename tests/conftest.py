from __future__ import annotations

from typing import Callable, Optional

import matplotlib
import pytest

matplotlib.use("Agg")

from physicsexplorer.model.parameters import ParameterSet  # noqa: E402
from physicsexplorer.model.topics import get_topic  # noqa: E402
from physicsexplorer.model.validation import validate  # noqa: E402


class FakeScheduler:
    """Manual clock: ticks fire only when the test calls `fire`."""

    def __init__(self) -> None:
        self.pending: Optional[Callable[[], None]] = None
        self.intervals: list[int] = []
        self.cancel_count = 0

    def schedule(self, interval_ms: int, callback: Callable[[], None]) -> None:
        assert self.pending is None, "a tick was scheduled while another one was pending"
        self.pending = callback
        self.intervals.append(interval_ms)

    def cancel(self) -> None:
        self.pending = None
        self.cancel_count += 1

    def fire(self, times: int = 1) -> int:
        """Fire up to ``times`` pending ticks; returns how many fired."""
        fired = 0
        for _ in range(times):
            callback, self.pending = self.pending, None
            if callback is None:
                break
            callback()
            fired += 1
        return fired


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def scheduler_factory() -> Callable[[], FakeScheduler]:
    created: list[FakeScheduler] = []

    def factory() -> FakeScheduler:
        s = FakeScheduler()
        created.append(s)
        return s

    factory.created = created
    return factory


def sample_params(key: str, **overrides: str) -> ParameterSet:
    """Validated sample inputs of a topic, with some raw fields replaced."""
    raw = dict(get_topic(key).sample_inputs)
    raw.update(overrides)
    return validate(key, raw)


@pytest.fixture
def params_for() -> Callable[..., ParameterSet]:
    return sample_params
