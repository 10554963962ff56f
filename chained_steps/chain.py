"""Chain-step values and chain classification.

A step definition chains to further steps by returning them::

    @registry.given("I log in as admin")
    def log_in_as_admin(env):
        return [
            Given('I am on the "login" page'),
            When('I fill in "username" with "admin"'),
            When('I press "Log in"'),
        ]

Returning a single chain step runs it in place; returning a non-empty list
or tuple made only of chain steps runs each one as a step of its own, with
full lifecycle events.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from chained_steps.nodes import Step
from chained_steps.results import ExecutedStepResult, StepResult


@dataclass(frozen=True)
class ChainedStep(Step):
    """A step returned by a step definition to be run before it completes."""


class Given(ChainedStep):
    KEYWORD = "Given"

    def __init__(self, text: str, *arguments: Any, line: int = 0) -> None:
        super().__init__(self.KEYWORD, text, tuple(arguments), line)


class When(Given):
    KEYWORD = "When"


class Then(Given):
    KEYWORD = "Then"


class And(Given):
    KEYWORD = "And"


class But(Given):
    KEYWORD = "But"


class ChainKind(enum.Enum):
    NONE = "none"
    SINGLE = "single"
    SEQUENCE = "sequence"


@dataclass(frozen=True)
class ChainOutcome:
    """What a step result's return value asks the coordinator to run next."""

    kind: ChainKind
    steps: tuple[ChainedStep, ...] = ()

    @property
    def is_chain(self) -> bool:
        return self.kind is not ChainKind.NONE


NOT_A_CHAIN = ChainOutcome(ChainKind.NONE)


def classify_return_value(value: Any) -> ChainOutcome:
    if isinstance(value, ChainedStep):
        return ChainOutcome(ChainKind.SINGLE, (value,))
    if not isinstance(value, (list, tuple)) or not value:
        return NOT_A_CHAIN
    if not all(isinstance(item, ChainedStep) for item in value):
        return NOT_A_CHAIN
    return ChainOutcome(ChainKind.SEQUENCE, tuple(value))


def classify_chain(result: StepResult) -> ChainOutcome:
    """Classify a step result as a single chain step, a sequence, or neither.

    Only executed results are inspected; skipped, undefined and pending
    results never chain.
    """
    if not isinstance(result, ExecutedStepResult):
        return NOT_A_CHAIN
    return classify_return_value(result.call_result.return_value)
