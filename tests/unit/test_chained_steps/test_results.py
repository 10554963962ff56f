"""Unit tests for result classification and skip translation."""

import pytest

from chained_steps.exceptions import SkippedException
from chained_steps.results import (
    HookCall,
    Setup,
    SkippedStepResult,
    Teardown,
    UndefinedStepResult,
    result_status,
)
from chained_steps.tester import check_skip_result, is_fail
from tests.unit.mocks import failed, passed, pending, skipped


@pytest.mark.parametrize(
    ("result", "expected"),
    [
        (passed(), False),
        (passed(return_value="anything"), False),
        (failed(RuntimeError("boom")), True),
        (failed(SkippedException("skip")), True),
        (skipped(), True),
        (UndefinedStepResult(), True),
        (pending(), True),
    ],
    ids=["passed", "passed-with-value", "failed", "skip-exception", "skipped", "undefined", "pending"],
)
def test_is_fail(result, expected):
    assert is_fail(result) is expected


@pytest.mark.parametrize(
    ("result", "status"),
    [
        (passed(), "passed"),
        (failed(RuntimeError("boom")), "failed"),
        (skipped(), "skipped"),
        (UndefinedStepResult(), "undefined"),
        (pending(), "pending"),
    ],
)
def test_result_status(result, status):
    assert result_status(result) == status


def test_only_passed_executed_results_pass():
    assert passed().is_passed()
    assert not failed(RuntimeError("boom")).is_passed()
    assert not skipped().is_passed()
    assert not UndefinedStepResult().is_passed()
    assert not pending().is_passed()


@pytest.mark.parametrize(
    "exception",
    [SkippedException("disabled"), pytest.skip.Exception("not installed")],
    ids=["skipped-exception", "pytest-skip"],
)
def test_check_skip_result_translates_intentional_skips(exception):
    result = failed(exception, "the plugin is installed")

    translated = check_skip_result(result)

    assert isinstance(translated, SkippedStepResult)
    assert translated.search_result is result.search_result


@pytest.mark.parametrize(
    "result",
    [passed(), failed(RuntimeError("boom")), skipped(), UndefinedStepResult(), pending()],
    ids=["passed", "failed", "skipped", "undefined", "pending"],
)
def test_check_skip_result_leaves_other_results_alone(result):
    assert check_skip_result(result) is result


@pytest.mark.parametrize(
    "result",
    [failed(SkippedException("skip")), failed(ValueError("x")), passed(), UndefinedStepResult()],
)
def test_check_skip_result_is_idempotent(result):
    once = check_skip_result(result)

    assert check_skip_result(once) == once


def test_setup_and_teardown_success_follow_hook_calls():
    def hook(env, step):
        pass

    assert Setup().is_successful()
    assert Setup((HookCall(hook),)).is_successful()
    assert not Setup((HookCall(hook), HookCall(hook, RuntimeError("x")))).is_successful()
    assert not Teardown((HookCall(hook, RuntimeError("x")),)).is_successful()
