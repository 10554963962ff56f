"""Step tester that runs diagnostic steps and chained steps.

ChainedStepTester wraps a single-step tester. Around every step it runs
two diagnostic steps: one waiting for pending javascript and one looking
for exceptions or debugging output on the page. When a step definition
returns chained steps instead, those are run recursively before the
calling step is considered complete.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

import pytest

from chained_steps.chain import ChainKind, ChainedStep, classify_chain
from chained_steps.config import CoordinatorConfig, load_config
from chained_steps.events import (
    AfterStepSetup,
    AfterStepTested,
    BeforeStepTeardown,
    BeforeStepTested,
    EventDispatcher,
    EventNotifier,
)
from chained_steps.exceptions import ChainDepthExceeded, SkippedException
from chained_steps.nodes import ExecutionContext, Step
from chained_steps.results import (
    CallResult,
    ExecutedStepResult,
    PendingStepResult,
    SearchResult,
    Setup,
    SkippedStepResult,
    StepResult,
    Teardown,
    UndefinedStepResult,
)

logger = logging.getLogger(__name__)

# pytest.skip() raises this; definitions written for pytest-bdd use it to skip
SKIP_EXCEPTIONS = (SkippedException, pytest.skip.Exception)


class StepTester(Protocol):
    """Sets up, tests and tears down exactly one step."""

    def set_up(self, context: ExecutionContext, step: Step, skip: bool) -> Setup: ...

    def test(self, context: ExecutionContext, step: Step, skip: bool) -> StepResult: ...

    def tear_down(
        self, context: ExecutionContext, step: Step, skip: bool, result: StepResult
    ) -> Teardown: ...


class ChainingUsage:
    """Records whether chained steps were used during a run.

    The flag is set the first time any chain runs and is never cleared.
    Share one instance between testers to answer for a whole run.
    """

    def __init__(self) -> None:
        self._used = False
        self._lock = threading.Lock()

    def mark(self) -> None:
        with self._lock:
            if not self._used:
                logger.info("Chained steps are in use")
            self._used = True

    @property
    def used(self) -> bool:
        return self._used


def is_fail(result: StepResult) -> bool:
    """Return True if a result must stop the step or chain it belongs to."""
    if isinstance(result, (UndefinedStepResult, SkippedStepResult, PendingStepResult)):
        return True
    return isinstance(result, ExecutedStepResult) and result.has_exception()


def check_skip_result(result: StepResult) -> StepResult:
    """Report a step that raised an intentional skip as skipped."""
    if isinstance(result.exception, SKIP_EXCEPTIONS):
        return SkippedStepResult(result.search_result)
    return result


class ChainedStepTester:
    """Step tester adding diagnostic steps and chained step support.

    Example:
        tester = ChainedStepTester(SingleStepTester(registry))
        tester.set_event_dispatcher(dispatcher)
        result = tester.test(context, Step("When", "I log in as admin"), skip=False)
    """

    def __init__(
        self,
        single_step_tester: StepTester,
        event_dispatcher: Optional[EventNotifier] = None,
        config: Optional[CoordinatorConfig] = None,
        usage: Optional[ChainingUsage] = None,
    ) -> None:
        self._single_step_tester = single_step_tester
        self._event_dispatcher = event_dispatcher or EventDispatcher()
        self._config = config or load_config()
        self._usage = usage or ChainingUsage()

    def set_event_dispatcher(self, event_dispatcher: EventNotifier) -> None:
        self._event_dispatcher = event_dispatcher

    def was_chaining_used(self) -> bool:
        return self._usage.used

    def set_up(self, context: ExecutionContext, step: Step, skip: bool) -> Setup:
        return self._single_step_tester.set_up(context, step, skip)

    def tear_down(
        self, context: ExecutionContext, step: Step, skip: bool, result: StepResult
    ) -> Teardown:
        return self._single_step_tester.tear_down(context, step, skip, result)

    def test(self, context: ExecutionContext, step: Step, skip: bool = False) -> StepResult:
        """Test a step, wrapped in diagnostic steps or followed by its chain.

        Returns the first failing result among the pre-check, the step
        itself and the post-checks, or the result of the last diagnostic
        step when all of them pass. For a chain-producing step, returns the
        result of the chain.
        """
        return self._test(context, step, skip, depth=0)

    def _test(
        self, context: ExecutionContext, step: Step, skip: bool, depth: int
    ) -> StepResult:
        diagnostics = self._config.diagnostics
        if diagnostics.enabled:
            # Ensure that the page is ready.
            result = self._run_diagnostic(context, step, diagnostics.wait_step_text, skip)
            if is_fail(result):
                return result

        result = self._single_step_tester.test(context, step, skip)

        chain = classify_chain(result)
        logger.debug("'%s' at line %d: %s", step, step.line, chain.kind.value)
        if chain.is_chain:
            return self._run_chained_steps(context, chain.kind, chain.steps, skip, depth + 1)

        result = check_skip_result(result)
        if is_fail(result) or not diagnostics.enabled:
            return result

        # Exceptions first: an exception is often what leaves javascript pending.
        result = self._run_diagnostic(context, step, diagnostics.exceptions_step_text, skip)
        if is_fail(result):
            return result
        return self._run_diagnostic(context, step, diagnostics.wait_step_text, skip)

    def _run_diagnostic(
        self, context: ExecutionContext, step: Step, text: str, skip: bool
    ) -> StepResult:
        checking_step = Step(self._config.diagnostics.keyword, text, (), step.line)
        logger.debug("Running diagnostic step '%s' for line %d", text, step.line)
        result = check_skip_result(self._single_step_tester.test(context, checking_step, skip))
        if is_fail(result):
            logger.warning(
                "Diagnostic step '%s' for '%s' at line %d did not pass: %s",
                text,
                step,
                step.line,
                result.exception or result.status,
            )
        return result

    def _run_chained_steps(
        self,
        context: ExecutionContext,
        kind: ChainKind,
        steps: tuple[ChainedStep, ...],
        skip: bool,
        depth: int,
    ) -> StepResult:
        self._usage.mark()

        max_depth = self._config.chaining.max_chain_depth
        if max_depth is not None and depth > max_depth:
            logger.warning("Chain depth %d exceeds the limit of %d", depth, max_depth)
            error = ChainDepthExceeded(steps[0].text, max_depth)
            return ExecutedStepResult(SearchResult(None, steps[0].text), CallResult(exception=error))

        if kind is ChainKind.SINGLE:
            # A single chained step runs in place, without events of its own.
            return check_skip_result(self._test(context, steps[0], skip, depth))

        dispatcher = self._event_dispatcher
        for step in steps:
            logger.debug("Running chained step '%s'", step)
            dispatcher.dispatch(BeforeStepTested.BEFORE, BeforeStepTested(context, step))

            setup = self.set_up(context, step, skip)
            dispatcher.dispatch(
                AfterStepSetup.AFTER_SETUP, AfterStepSetup(context, step, setup)
            )

            step_result = self._test(context, step, skip, depth)

            dispatcher.dispatch(
                BeforeStepTeardown.BEFORE_TEARDOWN,
                BeforeStepTeardown(context, step, step_result),
            )
            teardown = self.tear_down(context, step, skip, step_result)
            dispatcher.dispatch(
                AfterStepTested.AFTER, AfterStepTested(context, step, step_result, teardown)
            )

            if not step_result.is_passed():
                return check_skip_result(step_result)

        return check_skip_result(step_result)
