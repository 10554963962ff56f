"""Mock classes for unit testing the chained step tester."""

from .mock_events import RecordingDispatcher
from .mock_tester import EXCEPTIONS, WAIT, SpyStepTester, failed, passed, pending, skipped

__all__ = [
    "EXCEPTIONS",
    "WAIT",
    "RecordingDispatcher",
    "SpyStepTester",
    "failed",
    "passed",
    "pending",
    "skipped",
]
