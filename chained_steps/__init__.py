"""Chained step execution for behavior-driven test runs.

The package wraps a single-step executor with a coordinator that injects
diagnostic steps around every step and runs the chained steps a step
definition may return.

Modules:
    nodes: Step, Feature and ExecutionContext values
    results: Step results and setup/teardown records
    chain: Chain-step values and chain classification
    events: Step lifecycle events and the event dispatcher
    tester: The ChainedStepTester coordinator
    definitions: Step definition registry and SingleStepTester
    diagnostics: Browser diagnostic steps backed by Selenium
    config: YAML configuration
    reporting: Event listener recording step outcomes
    keywords: Robot Framework keyword library
"""

from chained_steps.chain import And, But, ChainedStep, Given, Then, When
from chained_steps.config import CoordinatorConfig, load_config
from chained_steps.definitions import SingleStepTester, StepDefinitionRegistry
from chained_steps.events import EventDispatcher
from chained_steps.exceptions import PendingException, SkippedException
from chained_steps.nodes import ExecutionContext, Feature, Step
from chained_steps.tester import ChainedStepTester, ChainingUsage

__all__ = [
    "And",
    "But",
    "ChainedStep",
    "ChainedStepTester",
    "ChainingUsage",
    "CoordinatorConfig",
    "EventDispatcher",
    "ExecutionContext",
    "Feature",
    "Given",
    "PendingException",
    "SingleStepTester",
    "SkippedException",
    "Step",
    "StepDefinitionRegistry",
    "Then",
    "When",
    "load_config",
]
