"""Unit tests for error classification, backoff and the retry controller."""

from __future__ import annotations

from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from ddb_wrapper.common.events import EventBus
from ddb_wrapper.config import RetryDelayOptions, WrapperConfig
from ddb_wrapper.exception import ErrorKind, FatalError, ThrottledError
from ddb_wrapper.retry import BackoffPolicy, ErrorClassifier, RetryController

from tests.unit.mocks import THROTTLED, VALIDATION, client_error


def _controller(max_retries: int = 2) -> RetryController:
    config = WrapperConfig(max_retries=max_retries, retry_delay_options=RetryDelayOptions(base=0))
    return RetryController(config, EventBus())


def test_classifier_marks_throughput_exceeded_as_throttled() -> None:
    assert ErrorClassifier.classify(client_error(THROTTLED)) is ErrorKind.THROTTLED


@pytest.mark.parametrize("code", [VALIDATION, "ConditionalCheckFailedException", "ResourceNotFoundException"])
def test_classifier_marks_other_codes_as_fatal(code: str) -> None:
    assert ErrorClassifier.classify(client_error(code)) is ErrorKind.FATAL


def test_default_backoff_is_exponential() -> None:
    policy = BackoffPolicy(RetryDelayOptions())

    assert [policy.delay(retry_count) for retry_count in (1, 2, 3, 4)] == [100, 200, 400, 800]


def test_default_backoff_uses_configured_base() -> None:
    policy = BackoffPolicy(RetryDelayOptions(base=25))

    assert [policy.delay(retry_count) for retry_count in (1, 2, 3)] == [25, 50, 100]


def test_custom_backoff_receives_retry_count() -> None:
    custom = MagicMock(return_value=7)
    policy = BackoffPolicy(RetryDelayOptions(base=25, custom_backoff=custom))

    assert policy.delay(3) == 7
    custom.assert_called_once_with(3)


def test_execute_returns_result_of_first_successful_call() -> None:
    call = MagicMock(return_value={"ok": True})

    assert _controller().execute("Test", "put_item", call) == {"ok": True}
    call.assert_called_once_with()


def test_execute_allows_max_retries_plus_one_attempts() -> None:
    call = MagicMock(side_effect=client_error(THROTTLED))
    controller = _controller(max_retries=3)
    events: List[Dict[str, Any]] = []
    controller.events.on("retry", events.append)

    with pytest.raises(ThrottledError):
        controller.execute("Test", "put_item", call)

    assert call.call_count == 4
    assert [event["retry_count"] for event in events] == [1, 2, 3]


def test_execute_with_zero_retries_tries_once() -> None:
    call = MagicMock(side_effect=client_error(THROTTLED))

    with pytest.raises(ThrottledError):
        _controller(max_retries=0).execute("Test", "put_item", call)

    assert call.call_count == 1


def test_execute_raises_fatal_error_immediately() -> None:
    call = MagicMock(side_effect=[client_error(THROTTLED), client_error(VALIDATION), {"ok": True}])

    with pytest.raises(FatalError) as excinfo:
        _controller().execute("Test", "put_item", call)

    assert call.call_count == 2
    assert excinfo.value.kind is ErrorKind.FATAL
    assert excinfo.value.code == VALIDATION


def test_execute_does_not_classify_non_client_errors() -> None:
    call = MagicMock(side_effect=ConnectionError("socket closed"))

    with pytest.raises(ConnectionError):
        _controller().execute("Test", "put_item", call)

    assert call.call_count == 1


def test_calls_do_not_share_retry_counts() -> None:
    controller = _controller()
    events: List[Dict[str, Any]] = []
    controller.events.on("retry", events.append)

    controller.execute("Test", "put_item", MagicMock(side_effect=[client_error(THROTTLED), {"ok": True}]))
    controller.execute("Test", "put_item", MagicMock(side_effect=[client_error(THROTTLED), {"ok": True}]))

    assert [event["retry_count"] for event in events] == [1, 1]


def test_execute_retries_results_accepted_by_retry_result() -> None:
    call = MagicMock(side_effect=[["leftover"], client_error(THROTTLED), []])
    controller = _controller(max_retries=2)
    events: List[Dict[str, Any]] = []
    controller.events.on("retry", events.append)

    assert controller.execute("Test", "batch_write_item", call, retry_result=bool) == []
    assert call.call_count == 3
    assert [event["retry_count"] for event in events] == [1, 2]


def test_execute_returns_last_result_when_budget_spent_on_results() -> None:
    call = MagicMock(side_effect=[["a", "b"], ["b"], ["b"]])

    assert _controller(max_retries=2).execute("Test", "batch_write_item", call, retry_result=bool) == ["b"]
    assert call.call_count == 3


def test_execute_sleeps_through_injected_sleep() -> None:
    sleep = MagicMock()
    controller = RetryController(
        WrapperConfig(max_retries=2, retry_delay_options=RetryDelayOptions(base=30)), EventBus(), sleep=sleep
    )
    call = MagicMock(side_effect=[client_error(THROTTLED), client_error(THROTTLED), {"ok": True}])

    controller.execute("Test", "put_item", call)

    assert [entry.args[0] for entry in sleep.call_args_list] == [0.03, 0.06]


def test_execute_skips_sleep_for_zero_delay() -> None:
    sleep = MagicMock()
    controller = RetryController(
        WrapperConfig(max_retries=1, retry_delay_options=RetryDelayOptions(base=0)), EventBus(), sleep=sleep
    )

    controller.execute("Test", "put_item", MagicMock(side_effect=[client_error(THROTTLED), {"ok": True}]))

    sleep.assert_not_called()
