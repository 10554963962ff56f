"""Unit test conftest for the chained step tester.

Provides a scripted SpyStepTester in place of the real single-step tester
and a RecordingDispatcher in place of the event dispatcher, both writing
to one journal so the order of calls and events can be asserted.
"""

import pytest

from chained_steps.config import CoordinatorConfig
from chained_steps.tester import ChainedStepTester
from tests.unit.mocks import RecordingDispatcher, SpyStepTester


@pytest.fixture
def journal() -> list:
    """Shared record of tester calls and dispatched events."""
    return []


@pytest.fixture
def spy(journal: list) -> SpyStepTester:
    """Single-step tester where every step passes unless scripted."""
    return SpyStepTester(journal=journal)


@pytest.fixture
def events(journal: list) -> RecordingDispatcher:
    return RecordingDispatcher(journal)


@pytest.fixture
def coordinator(
    spy: SpyStepTester, events: RecordingDispatcher, config: CoordinatorConfig
) -> ChainedStepTester:
    """Coordinator under test, wired to the spy and recording dispatcher."""
    return ChainedStepTester(spy, events, config)
