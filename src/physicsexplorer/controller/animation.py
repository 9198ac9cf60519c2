"""
Animation Controller
====================
One reusable clock for every topic animation.

Why is this file needed?
------------------------
1. Strategy: a topic only supplies ``derive(elapsed, params)`` and
   ``time_step(params)``; timer setup, teardown and the Idle/Running state
   machine live here once.
2. Correctness: after `stop()` (or new inputs) returns, no tick of the old
   run can be observed. The next tick is only scheduled once the previous
   one has committed, and every run carries a generation number that a late
   callback must match.

Classes:
    TickScheduler: What the controller needs from a timer.
    QtTickScheduler: Single-shot QTimer implementation.
    AnimationController: The state machine (QObject with signals).
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, QTimer, Signal

from physicsexplorer.config import DEFAULT_TICK_INTERVAL_MS
from physicsexplorer.model.kinematics import DerivedQuantities
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import CalculationResult, allows_simulation
from physicsexplorer.model.state import SimulationState

logger = logging.getLogger(__name__)


class TickScheduler(Protocol):
    def schedule(self, interval_ms: int, callback: Callable[[], None]) -> None:
        """Call ``callback`` once, ``interval_ms`` from now."""
        ...

    def cancel(self) -> None:
        """Drop the pending callback, if any. Must be synchronous."""
        ...


class QtTickScheduler:
    """
    Single-shot `QTimer` re-armed by the controller after each tick.

    A periodic timer could queue a second timeout while the first one is
    still being handled; re-arming keeps ticks strictly sequential.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._callback: Optional[Callable[[], None]] = None

    def schedule(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.setInterval(interval_ms)
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def is_active(self) -> bool:
        return self._timer.isActive()

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class AnimationController(QObject):
    """
    Idle/Running state machine around a pure ``derive`` callback.

    Signals:
        state_changed(SimulationState): after start, stop and every tick.
        frame_advanced(DerivedQuantities): whenever the derived values change.
    """
    state_changed = Signal(object)
    frame_advanced = Signal(object)

    def __init__(
        self,
        derive: Callable[[float, ParameterSet], DerivedQuantities],
        time_step: Callable[[ParameterSet], float],
        scheduler: TickScheduler | None = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._derive = derive
        self._time_step = time_step
        self._scheduler: TickScheduler = scheduler if scheduler is not None else QtTickScheduler(self)
        self._state = SimulationState(tick_interval_ms=tick_interval_ms)
        self._params: ParameterSet | None = None
        self._result: CalculationResult | None = None
        self._dt = 0.0
        self._derived: DerivedQuantities | None = None
        self._generation = 0

    # ---- read access ----

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def params(self) -> ParameterSet | None:
        return self._params

    @property
    def result(self) -> CalculationResult | None:
        return self._result

    @property
    def derived(self) -> DerivedQuantities | None:
        return self._derived

    @property
    def time_step(self) -> float:
        return self._dt

    def is_running(self) -> bool:
        return self._state.is_running

    def has_motion(self) -> bool:
        """True when one tick moves the animation forward by a finite step."""
        return math.isfinite(self._dt) and self._dt > 0

    def can_start(self) -> bool:
        return self._params is not None and allows_simulation(self._result) and self.has_motion()

    # ---- inputs ----

    def set_inputs(self, params: ParameterSet | None, result: CalculationResult | None) -> None:
        """Replace the parameter/result pair; any running animation is stopped first."""
        self.stop()
        self._params = params
        self._result = result
        self._dt = self._time_step(params) if params is not None else 0.0
        self._refresh_derived()

    def set_tick_interval(self, interval_ms: int) -> None:
        self.stop()
        self._state = SimulationState(tick_interval_ms=interval_ms)
        self.state_changed.emit(self._state)

    # ---- state machine ----

    def start(self) -> bool:
        """
        Start from elapsed time 0.

        Returns:
            False (and stays Idle) when the last calculation did not succeed
            or when the time step would leave the frame standing still.
        """
        if not self.can_start():
            if self._params is not None and allows_simulation(self._result):
                logger.warning(f"Refusing to start animation: time step {self._dt:g} does not advance "
                               f"({self._params.topic}).")
            else:
                logger.warning("Refusing to start animation: no successful calculation.")
            return False
        if self._state.is_running:
            self._cancel()

        self._state = self._state.running()
        self._generation += 1
        self._refresh_derived()
        logger.info(f"Animation started ({self._params.topic}, dt={self._dt:g}).")
        self.state_changed.emit(self._state)
        self._schedule_next()
        return True

    def stop(self) -> None:
        """Cancel the pending tick and return to Idle with elapsed time 0."""
        was_running = self._state.is_running
        self._cancel()
        self._state = self._state.idle()
        if was_running:
            logger.info("Animation stopped.")
            self._refresh_derived()
            self.state_changed.emit(self._state)

    def reset(self) -> None:
        self.stop()

    def on_tick(self) -> None:
        """Advance the clock one step and recompute the derived quantities."""
        if not self._state.is_running or self._params is None:
            return
        self._state = self._state.advanced(self._dt)
        self._derived = self._derive(self._state.elapsed_time, self._params)
        self.state_changed.emit(self._state)
        self.frame_advanced.emit(self._derived)

    # ---- internals ----

    def _cancel(self) -> None:
        self._scheduler.cancel()
        self._generation += 1

    def _schedule_next(self) -> None:
        generation = self._generation
        self._scheduler.schedule(self._state.tick_interval_ms, lambda: self._on_timer(generation))

    def _on_timer(self, generation: int) -> None:
        if generation != self._generation or not self._state.is_running:
            logger.debug(f"Dropping stale tick of run {generation}.")
            return
        self.on_tick()
        # A listener may have stopped or restarted us during the emit
        if generation == self._generation and self._state.is_running:
            self._schedule_next()

    def _refresh_derived(self) -> None:
        if self._params is None:
            self._derived = None
            return
        self._derived = self._derive(self._state.elapsed_time, self._params)
        self.frame_advanced.emit(self._derived)
