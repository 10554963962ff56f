"""Root conftest.py - Discover step definitions and provide shared fixtures."""

import importlib
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from chained_steps.config import CoordinatorConfig, load_config
from chained_steps.definitions import SingleStepTester, StepDefinitionRegistry
from chained_steps.diagnostics import BrowserDiagnostics
from chained_steps.events import EventDispatcher
from chained_steps.nodes import ExecutionContext, Feature
from chained_steps.tester import ChainedStepTester

STEP_DEFS_DIR = Path(__file__).parent / "tests" / "step_defs"


def _discover_step_definition_modules() -> list[str]:
    """Import every module in tests/step_defs so its definitions register.

    Returns the imported module names.
    """
    imported = []
    for step_file in sorted(STEP_DEFS_DIR.glob("*.py")):
        if step_file.stem == "__init__":
            continue
        module_name = f"tests.step_defs.{step_file.stem}"
        importlib.import_module(module_name)
        imported.append(module_name)
    return imported


# Step definition modules must be imported before any registry fixture copies
# tests.step_defs.registry.
STEP_DEFINITION_MODULES = _discover_step_definition_modules()


@pytest.fixture
def config() -> CoordinatorConfig:
    """Packaged default configuration."""
    return load_config()


@pytest.fixture
def environment() -> SimpleNamespace:
    """Fresh scenario environment handed to step definitions."""
    return SimpleNamespace(page=None, form={}, logged_in_as=None, pressed=[])


@pytest.fixture
def context(environment: SimpleNamespace) -> ExecutionContext:
    """Execution context pairing the environment with a test feature."""
    return ExecutionContext(environment, Feature("Chained steps", "login.feature"))


@pytest.fixture
def browser_driver() -> Optional[Any]:
    """Browser session used by the diagnostic steps; None means no browser."""
    return None


@pytest.fixture
def registry(browser_driver: Optional[Any], config: CoordinatorConfig) -> StepDefinitionRegistry:
    """Registry holding the discovered step definitions and the diagnostics.

    Definitions are re-registered on a fresh registry so each test gets its
    own diagnostics bound to its own browser_driver.
    """
    from tests.step_defs import registry as discovered

    fresh = StepDefinitionRegistry()
    for definition in discovered.definitions:
        fresh.add(definition.keyword, definition.parser, definition.func)
    BrowserDiagnostics(lambda: browser_driver, config).register(fresh)
    return fresh


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
def tester(
    registry: StepDefinitionRegistry, dispatcher: EventDispatcher, config: CoordinatorConfig
) -> ChainedStepTester:
    """Chained step tester over a real SingleStepTester."""
    return ChainedStepTester(SingleStepTester(registry), dispatcher, config)
