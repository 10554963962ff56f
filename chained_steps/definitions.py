"""Step definition registry and the single-step tester built on it.

Step patterns are pytest-bdd parsers, so definitions read the same way they
do in a pytest-bdd suite::

    registry = StepDefinitionRegistry()

    @registry.given(parsers.parse('I am on the "{page}" page'))
    def on_page(env, page):
        env.browser.get(env.base_url + page)

    @registry.when("I log in as admin")
    def log_in_as_admin(env):
        return [Given('I am on the "login" page'), When('I press "Log in"')]

A definition receives the environment of the ExecutionContext first, then
the arguments parsed from the step text, then the step itself if it
declares a ``step`` parameter. Keywords do not take part in matching.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

import pytest
from pytest_bdd import parsers
from pytest_bdd.parsers import StepParser

from chained_steps.exceptions import PendingException, RedundantStepDefinition
from chained_steps.nodes import ExecutionContext, Step
from chained_steps.results import (
    CallResult,
    ExecutedStepResult,
    HookCall,
    PendingStepResult,
    SearchResult,
    Setup,
    SkippedStepResult,
    StepResult,
    Teardown,
    UndefinedStepResult,
)

logger = logging.getLogger(__name__)

Pattern = Union[str, StepParser]
Hook = Callable[[Any, Step], Any]


@dataclass(frozen=True)
class StepDefinition:
    keyword: str
    parser: StepParser
    func: Callable[..., Any]

    @property
    def pattern(self) -> str:
        return self.parser.name

    def __str__(self) -> str:
        return f"{self.keyword} {self.pattern} ({self.func.__module__}.{self.func.__name__})"


def _as_parser(pattern: Pattern) -> StepParser:
    if isinstance(pattern, StepParser):
        return pattern
    return parsers.string(pattern)


class StepDefinitionRegistry:
    """Holds step definitions and before/after step hooks."""

    def __init__(self) -> None:
        self._definitions: list[StepDefinition] = []
        self._before_hooks: list[Hook] = []
        self._after_hooks: list[Hook] = []

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def definitions(self) -> list[StepDefinition]:
        return list(self._definitions)

    @property
    def before_hooks(self) -> list[Hook]:
        return list(self._before_hooks)

    @property
    def after_hooks(self) -> list[Hook]:
        return list(self._after_hooks)

    def add(self, keyword: str, pattern: Pattern, func: Callable[..., Any]) -> StepDefinition:
        parser = _as_parser(pattern)
        for existing in self._definitions:
            if existing.pattern == parser.name:
                raise RedundantStepDefinition(
                    f"Step '{parser.name}' is already defined by {existing}"
                )
        definition = StepDefinition(keyword, parser, func)
        self._definitions.append(definition)
        logger.debug("Registered %s", definition)
        return definition

    def _decorator(self, keyword: str, pattern: Pattern) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add(keyword, pattern, func)
            return func

        return decorator

    def given(self, pattern: Pattern):
        return self._decorator("Given", pattern)

    def when(self, pattern: Pattern):
        return self._decorator("When", pattern)

    def then(self, pattern: Pattern):
        return self._decorator("Then", pattern)

    def step(self, pattern: Pattern):
        """Register a definition usable with any keyword."""
        return self._decorator("*", pattern)

    def before_step(self, hook: Hook) -> Hook:
        self._before_hooks.append(hook)
        return hook

    def after_step(self, hook: Hook) -> Hook:
        self._after_hooks.append(hook)
        return hook

    def search(self, step: Step) -> Optional[SearchResult]:
        """Return the first definition matching the step text, if any."""
        for definition in self._definitions:
            if definition.parser.is_matching(step.text):
                arguments = definition.parser.parse_arguments(step.text) or {}
                return SearchResult(definition, step.text, dict(arguments))
        return None


# Definitions and hooks registered at import time by step modules.
default_registry = StepDefinitionRegistry()


def _run_hooks(hooks: list[Hook], environment: Any, step: Step) -> tuple[HookCall, ...]:
    calls = []
    for hook in hooks:
        try:
            hook(environment, step)
        except Exception as e:  # noqa: BLE001
            logger.warning("Hook %s failed for '%s': %s", hook.__name__, step, e)
            calls.append(HookCall(hook, e))
        else:
            calls.append(HookCall(hook))
    return tuple(calls)


class SingleStepTester:
    """Tests exactly one step against a StepDefinitionRegistry.

    Failures raised by a definition are captured in the returned result,
    never raised. This includes pytest's skip outcome, which is a
    BaseException and would otherwise escape.
    """

    def __init__(self, registry: Optional[StepDefinitionRegistry] = None) -> None:
        self.registry = registry if registry is not None else default_registry

    def set_up(self, context: ExecutionContext, step: Step, skip: bool) -> Setup:
        if skip:
            return Setup()
        return Setup(_run_hooks(self.registry.before_hooks, context.environment, step))

    def test(self, context: ExecutionContext, step: Step, skip: bool) -> StepResult:
        search_result = self.registry.search(step)
        if search_result is None:
            logger.debug("Undefined step '%s' at line %d", step, step.line)
            return UndefinedStepResult()
        if skip:
            return SkippedStepResult(search_result)

        call_result = self._call(context, step, search_result)
        if isinstance(call_result.exception, PendingException):
            return PendingStepResult(search_result, call_result)
        return ExecutedStepResult(search_result, call_result)

    def tear_down(
        self, context: ExecutionContext, step: Step, skip: bool, result: StepResult
    ) -> Teardown:
        if skip:
            return Teardown()
        return Teardown(_run_hooks(self.registry.after_hooks, context.environment, step))

    def _call(self, context: ExecutionContext, step: Step, search_result: SearchResult) -> CallResult:
        func = search_result.definition.func
        kwargs = dict(search_result.arguments)
        if "step" in inspect.signature(func).parameters:
            kwargs["step"] = step
        try:
            return CallResult(return_value=func(context.environment, **kwargs))
        except (Exception, pytest.skip.Exception) as e:  # noqa: BLE001
            return CallResult(exception=e)
