"""Chained Step Keywords for Robot Framework.

Runs scenario steps through a ChainedStepTester so Robot suites get the same
diagnostic steps and chained step support as the pytest runs.

Usage:
    *** Settings ***
    Library    chained_steps.keywords.ChainedStepKeywords

    *** Test Cases ***
    Admin Logs In
        Run Step    When    I log in as admin
        Chained Steps Should Have Been Used
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Optional

from robot.api import SkipExecution
from robot.api.deco import keyword

from chained_steps.config import CoordinatorConfig, load_config
from chained_steps.definitions import SingleStepTester, StepDefinitionRegistry, default_registry
from chained_steps.diagnostics import BrowserDiagnostics
from chained_steps.nodes import ExecutionContext, Feature, Step
from chained_steps.results import StepResult, result_status
from chained_steps.tester import ChainedStepTester


def _register_diagnostics(registry: StepDefinitionRegistry, config: CoordinatorConfig) -> None:
    """Register the diagnostic steps unless the registry already defines them."""
    diagnostics = config.diagnostics
    if not diagnostics.enabled:
        return
    if registry.search(Step(diagnostics.keyword, diagnostics.wait_step_text)) is not None:
        return
    BrowserDiagnostics(config=config).register(registry)


class ChainedStepKeywords:
    """Keywords running steps through the chained step tester."""

    ROBOT_LIBRARY_SCOPE = "SUITE"
    ROBOT_LIBRARY_DOC_FORMAT = "TEXT"

    def __init__(
        self,
        tester: Optional[ChainedStepTester] = None,
        environment: Any = None,
        feature: str = "Robot Framework suite",
    ) -> None:
        """Initialize ChainedStepKeywords.

        Arguments:
            tester: Tester to run steps with; defaults to one built on the
                default step registry, with the diagnostic steps registered
            environment: Object handed to step definitions; defaults to an
                empty namespace. Its driver attribute, if any, is the
                browser session the diagnostic steps inspect
            feature: Feature title reported for the steps
        """
        if tester is None:
            config = load_config()
            _register_diagnostics(default_registry, config)
            tester = ChainedStepTester(SingleStepTester(default_registry), config=config)
        self.tester = tester
        self.context = ExecutionContext(
            environment if environment is not None else SimpleNamespace(),
            Feature(feature),
        )
        self.last_result: Optional[StepResult] = None

    @keyword("Run step")
    def run_step(self, step_keyword: str, text: str, line: int = 0) -> str:
        """Run one step and fail unless it passed.

        Arguments:
            step_keyword: Step keyword (e.g., "Given", "When")
            text: Step text
            line: Line number reported for the step

        Returns:
            The step status ("passed")
        """
        step = Step(step_keyword, text, (), int(line))
        result = self.tester.test(self.context, step, False)
        self.last_result = result

        status = result_status(result)
        if status == "skipped":
            raise SkipExecution(f"Step skipped: {step}")
        if status != "passed":
            detail = f": {result.exception}" if result.exception else ""
            raise AssertionError(f"Step {status}: {step}{detail}")
        return status

    @keyword("Chained steps were used")
    def chained_steps_were_used(self) -> bool:
        """Return True if any step so far ran chained steps."""
        return self.tester.was_chaining_used()

    @keyword("Chained steps should have been used")
    def chained_steps_should_have_been_used(self) -> None:
        """Fail unless any step so far ran chained steps."""
        if not self.tester.was_chaining_used():
            raise AssertionError("No chained steps were used")
