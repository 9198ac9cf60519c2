"""
Simulation State
================
Snapshot of one animation controller.

Classes:
    Phase: Idle or Running.
    SimulationState: Immutable snapshot handed to signal listeners and
        renderers; the controller swaps in a new one on every change.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from physicsexplorer.config import DEFAULT_TICK_INTERVAL_MS


class Phase(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class SimulationState:
    phase: Phase = Phase.IDLE
    elapsed_time: float = 0.0
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    tick_count: int = 0

    def __post_init__(self) -> None:
        if self.elapsed_time < 0:
            raise ValueError(f"elapsed_time must be >= 0, got {self.elapsed_time}")
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be > 0, got {self.tick_interval_ms}")

    @property
    def is_running(self) -> bool:
        return self.phase == Phase.RUNNING

    def idle(self) -> SimulationState:
        """Back to the initial clock, keeping the interval."""
        return SimulationState(tick_interval_ms=self.tick_interval_ms)

    def running(self) -> SimulationState:
        return SimulationState(Phase.RUNNING, 0.0, self.tick_interval_ms, 0)

    def advanced(self, time_step: float) -> SimulationState:
        ticks = self.tick_count + 1
        # elapsed is ticks * dt, never an accumulated sum
        return replace(self, tick_count=ticks, elapsed_time=ticks * time_step)
