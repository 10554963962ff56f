"""Step lifecycle events and their dispatcher.

The event names match the ones Behat formatters listen to, so reporting
backends written against those names work unchanged. Delivery is
synchronous: every listener runs to completion, in registration order,
before dispatch() returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from chained_steps.nodes import ExecutionContext, Step
from chained_steps.results import Setup, StepResult, Teardown

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


@dataclass(frozen=True)
class BeforeStepTested:
    BEFORE = "tester.step_tested.before"

    context: ExecutionContext
    step: Step


@dataclass(frozen=True)
class AfterStepSetup:
    AFTER_SETUP = "tester.step_tested.after_setup"

    context: ExecutionContext
    step: Step
    setup: Setup


@dataclass(frozen=True)
class BeforeStepTeardown:
    BEFORE_TEARDOWN = "tester.step_tested.before_teardown"

    context: ExecutionContext
    step: Step
    result: StepResult


@dataclass(frozen=True)
class AfterStepTested:
    AFTER = "tester.step_tested.after"

    context: ExecutionContext
    step: Step
    result: StepResult
    teardown: Teardown


class EventNotifier(Protocol):
    """Publish-only, ordered, synchronous event delivery."""

    def dispatch(self, event_name: str, event: Any) -> None: ...


class EventDispatcher:
    """Default EventNotifier keeping listeners per event name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, event_name: str, listener: Listener) -> None:
        self._listeners.setdefault(event_name, []).append(listener)

    def remove_listener(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)

    def get_listeners(self, event_name: str) -> list[Listener]:
        return list(self._listeners.get(event_name, []))

    def dispatch(self, event_name: str, event: Any) -> None:
        """Call every listener of event_name with event, in order.

        A listener raising stops delivery and the exception propagates to
        the caller.
        """
        listeners = self.get_listeners(event_name)
        logger.debug("Dispatching %s to %d listener(s)", event_name, len(listeners))
        for listener in listeners:
            listener(event)
