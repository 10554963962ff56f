"""Step results and setup/teardown records.

A step result is one of four variants:

- ExecutedStepResult: the definition ran; it passed unless an exception
  was captured. Only executed results carry the definition's return value.
- SkippedStepResult: the step was not run or skipped itself on purpose.
- UndefinedStepResult: no definition matched the step text.
- PendingStepResult: the definition raised PendingException.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union


@dataclass(frozen=True)
class SearchResult:
    """The definition matched for a step and the arguments parsed from it."""

    definition: Any
    matched_text: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CallResult:
    """Outcome of calling a step definition."""

    return_value: Any = None
    exception: Optional[BaseException] = None

    def has_exception(self) -> bool:
        return self.exception is not None


@dataclass(frozen=True)
class ExecutedStepResult:
    search_result: SearchResult
    call_result: CallResult

    status = "executed"

    @property
    def exception(self) -> Optional[BaseException]:
        return self.call_result.exception

    def has_exception(self) -> bool:
        return self.call_result.has_exception()

    def is_passed(self) -> bool:
        return not self.has_exception()


@dataclass(frozen=True)
class SkippedStepResult:
    search_result: Optional[SearchResult] = None

    status = "skipped"
    exception = None

    def has_exception(self) -> bool:
        return False

    def is_passed(self) -> bool:
        return False


@dataclass(frozen=True)
class UndefinedStepResult:
    status = "undefined"
    search_result = None
    exception = None

    def has_exception(self) -> bool:
        return False

    def is_passed(self) -> bool:
        return False


@dataclass(frozen=True)
class PendingStepResult:
    search_result: SearchResult
    call_result: CallResult

    status = "pending"

    @property
    def exception(self) -> Optional[BaseException]:
        return self.call_result.exception

    def has_exception(self) -> bool:
        return self.call_result.has_exception()

    def is_passed(self) -> bool:
        return False


StepResult = Union[
    ExecutedStepResult, SkippedStepResult, UndefinedStepResult, PendingStepResult
]


def result_status(result: StepResult) -> str:
    """Return the reporting status of a result.

    Executed results report "passed" or "failed"; the other variants report
    their own name.
    """
    if isinstance(result, ExecutedStepResult):
        return "passed" if result.is_passed() else "failed"
    return result.status


@dataclass(frozen=True)
class HookCall:
    """One before/after step hook that ran during setup or teardown."""

    hook: Callable[..., Any]
    exception: Optional[BaseException] = None


@dataclass(frozen=True)
class Setup:
    hook_calls: tuple[HookCall, ...] = ()

    def is_successful(self) -> bool:
        return all(call.exception is None for call in self.hook_calls)


@dataclass(frozen=True)
class Teardown:
    hook_calls: tuple[HookCall, ...] = ()

    def is_successful(self) -> bool:
        return all(call.exception is None for call in self.hook_calls)
