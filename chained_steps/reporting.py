"""Event listener recording the outcome of every tested step."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional

from chained_steps.events import AfterStepTested, EventDispatcher
from chained_steps.results import result_status
from chained_steps.tester import ChainedStepTester

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    keyword: str
    text: str
    line: int
    status: str
    error: Optional[str] = None


class StepOutcomeRecorder:
    """Collects AfterStepTested events into StepOutcome records.

    The summary also tells whether chained steps were used, which a
    formatter needs to explain step counts that differ from the feature
    file.
    """

    def __init__(self, tester: Optional[ChainedStepTester] = None) -> None:
        self.tester = tester
        self.outcomes: list[StepOutcome] = []

    def subscribe(self, dispatcher: EventDispatcher) -> None:
        dispatcher.add_listener(AfterStepTested.AFTER, self.on_after_step_tested)

    def on_after_step_tested(self, event: AfterStepTested) -> None:
        status = result_status(event.result)
        error = str(event.result.exception) if event.result.exception else None
        outcome = StepOutcome(event.step.keyword, event.step.text, event.step.line, status, error)
        self.outcomes.append(outcome)
        if status == "passed":
            logger.info("%s %s [%s]", outcome.keyword, outcome.text, status)
        else:
            logger.warning(
                "%s %s (line %d) [%s] %s",
                outcome.keyword,
                outcome.text,
                outcome.line,
                status,
                error or "",
            )

    def summary(self) -> dict[str, Any]:
        counts = Counter(outcome.status for outcome in self.outcomes)
        return {
            "steps": len(self.outcomes),
            "statuses": dict(counts),
            "chained_steps_used": bool(self.tester and self.tester.was_chaining_used()),
        }
