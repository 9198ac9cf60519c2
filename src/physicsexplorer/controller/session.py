"""
Topic Sessions
==============
Explicit per-topic session record: raw input buffer, last parameter set,
last result and the topic's animation controller.

A fresh `TopicSession` is created on every topic switch, so nothing typed
into one topic can leak into another.
"""
from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from physicsexplorer.config import DEFAULT_TICK_INTERVAL_MS
from physicsexplorer.controller.animation import AnimationController, TickScheduler
from physicsexplorer.model.errors import ValidationError
from physicsexplorer.model.parameters import ParameterSet
from physicsexplorer.model.results import CalculationError, CalculationResult
from physicsexplorer.model.topics import TopicDefinition, get_topic
from physicsexplorer.model.validation import validate

logger = logging.getLogger(__name__)

SchedulerFactory = Callable[[], TickScheduler]


class TopicSession:
    def __init__(
        self,
        topic: TopicDefinition,
        scheduler_factory: Optional[SchedulerFactory] = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
    ) -> None:
        self.topic = topic
        self.raw_fields: dict[str, str] = {}
        if topic.selector is not None and topic.selector.default:
            self.raw_fields[topic.selector.name] = topic.selector.default
        self.parameters: ParameterSet | None = None
        self.result: CalculationResult | None = None
        scheduler = scheduler_factory() if scheduler_factory is not None else None
        self.animation = AnimationController(
            topic.derive, topic.time_step, scheduler=scheduler, tick_interval_ms=tick_interval_ms
        )

    @property
    def key(self) -> str:
        return self.topic.key

    def on_field_change(self, field: str, raw: str) -> None:
        """
        Record one edited field.

        The previous parameter set and result no longer describe the form,
        so they are dropped and the animation goes back to Idle.
        """
        self.raw_fields[field] = raw
        if self.parameters is not None or self.result is not None:
            self.parameters = None
            self.result = None
            self.animation.set_inputs(None, None)

    def update_fields(self, raw_fields: Mapping[str, str]) -> None:
        for field, raw in raw_fields.items():
            self.on_field_change(field, raw)

    def calculate(self) -> CalculationResult:
        """Validator, then Evaluator; hands the new pair to the animation."""
        try:
            params = validate(self.topic, self.raw_fields)
        except ValidationError as exc:
            logger.debug(f"{self.key}: invalid input: {exc}")
            self.parameters = None
            self.result = CalculationError(exc.message)
        else:
            self.parameters = params
            self.result = self.topic.evaluate(params)
            logger.info(f"{self.key}: calculated {type(self.result).__name__}.")
        self.animation.set_inputs(self.parameters, self.result)
        return self.result

    def start(self) -> bool:
        return self.animation.start()

    def stop(self) -> None:
        self.animation.stop()

    def close(self) -> None:
        """Stop the clock and drop the parameter set."""
        self.animation.set_inputs(None, None)
        self.parameters = None
        self.result = None


class ExplorerSession(QObject):
    """Owns the session of the topic currently on screen."""
    topic_changed = Signal(object)

    def __init__(
        self,
        scheduler_factory: Optional[SchedulerFactory] = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
    ) -> None:
        super().__init__()
        self._scheduler_factory = scheduler_factory
        self._tick_interval_ms = tick_interval_ms
        self._current: TopicSession | None = None

    @property
    def current(self) -> TopicSession | None:
        return self._current

    def select_topic(self, key: str) -> TopicSession:
        topic = get_topic(key)
        if self._current is not None:
            self._current.close()
        self._current = TopicSession(topic, self._scheduler_factory, self._tick_interval_ms)
        logger.info(f"Selected topic '{key}'.")
        self.topic_changed.emit(self._current)
        return self._current
