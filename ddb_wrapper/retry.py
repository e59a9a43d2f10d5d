"""Retry controller for single DynamoDB calls.

Throttled calls are retried with exponential (or custom) backoff until the
configured budget is spent; any other store error is raised straight away.
Attempts are driven by tenacity. A ``RetryContext`` tracks one logical call,
and callers with their own recoverable outcomes (unprocessed batch items)
retry them through the same tenacity budget via ``retry_result``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from botocore.exceptions import ClientError
from tenacity import RetryCallState, Retrying, retry_if_exception, retry_if_result, stop_after_attempt
from tenacity.nap import sleep as tenacity_sleep

from ddb_wrapper.common.events import RETRY, EventBus
from ddb_wrapper.config import RetryDelayOptions, WrapperConfig
from ddb_wrapper.exception import (
    THROTTLING_ERROR_CODE,
    DynamodbWrapperError,
    ErrorKind,
    FatalError,
    ThrottledError,
)
from ddb_wrapper.types import RetryEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorClassifier:
    """Maps a botocore ClientError to Throttled or Fatal."""

    @staticmethod
    def code(error: ClientError) -> str:
        return str(error.response.get("Error", {}).get("Code", ""))

    @staticmethod
    def status_code(error: ClientError) -> Optional[int]:
        return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

    @staticmethod
    def message(error: ClientError) -> str:
        return str(error.response.get("Error", {}).get("Message") or error)

    @classmethod
    def classify(cls, error: ClientError) -> ErrorKind:
        if cls.code(error) == THROTTLING_ERROR_CODE:
            return ErrorKind.THROTTLED
        return ErrorKind.FATAL

    @classmethod
    def to_exception(cls, error: ClientError) -> DynamodbWrapperError:
        error_class = ThrottledError if cls.classify(error) is ErrorKind.THROTTLED else FatalError
        return error_class(cls.message(error), cls.code(error), cls.status_code(error))


class BackoffPolicy:
    def __init__(self, options: RetryDelayOptions) -> None:
        self.options = options

    def delay(self, retry_count: int) -> float:
        """Milliseconds to wait before the given 1-based retry."""

        if self.options.custom_backoff is not None:
            return self.options.custom_backoff(retry_count)
        return self.options.base * 2 ** (retry_count - 1)


@dataclass
class RetryContext:
    table_name: str
    method: str
    max_retries: int
    backoff: BackoffPolicy
    retry_count: int = 0
    retry_delay_ms: float = 0

    def wait(self, retry_state: RetryCallState) -> float:
        """tenacity wait hook: seconds before the next attempt."""

        self.retry_count = retry_state.attempt_number
        self.retry_delay_ms = self.backoff.delay(self.retry_count)
        return max(self.retry_delay_ms, 0) / 1000


class RetryController:
    """Runs one remote call at a time, retrying throttling per the shared config.

    ``execute`` accepts an optional ``retry_result`` predicate; a result it
    accepts is retried on the same budget as throttling, and is returned as-is
    once the budget is spent.
    """

    def __init__(self, config: WrapperConfig, events: EventBus, sleep: Callable[[float], Any] = tenacity_sleep) -> None:
        self.config = config
        self.events = events
        self.sleep = sleep
        self.backoff_policy = BackoffPolicy(config.retry_delay_options)

    def execute(
        self,
        table_name: str,
        method: str,
        call: Callable[[], T],
        retry_result: Optional[Callable[[T], bool]] = None,
    ) -> T:
        context = self.new_context(table_name, method)
        retry = retry_if_exception(_is_throttled)
        if retry_result is not None:
            retry = retry | retry_if_result(retry_result)
        retrying = Retrying(
            stop=stop_after_attempt(context.max_retries + 1),
            wait=context.wait,
            retry=retry,
            before=lambda retry_state: logger.debug(
                "%s on %s: attempt %d", method, table_name, retry_state.attempt_number
            ),
            before_sleep=lambda retry_state: self.__announce(context),
            retry_error_callback=_last_outcome,
            sleep=self.__pause,
            reraise=True,
        )
        try:
            return retrying(call)
        except ClientError as error:
            raise ErrorClassifier.to_exception(error) from error

    def new_context(self, table_name: str, method: str) -> RetryContext:
        return RetryContext(
            table_name=table_name,
            method=method,
            max_retries=self.config.max_retries,
            backoff=self.backoff_policy,
        )

    def __pause(self, seconds: float) -> None:
        if seconds > 0:
            self.sleep(seconds)

    def __announce(self, context: RetryContext) -> None:
        event: RetryEvent = {
            "table_name": context.table_name,
            "method": context.method,
            "retry_count": context.retry_count,
            "retry_delay_ms": context.retry_delay_ms,
        }
        logger.warning(
            "%s on %s: retry %d/%d in %sms",
            context.method,
            context.table_name,
            context.retry_count,
            context.max_retries,
            context.retry_delay_ms,
        )
        self.events.emit(RETRY, dict(event))


def _is_throttled(error: BaseException) -> bool:
    return isinstance(error, ClientError) and ErrorClassifier.classify(error) is ErrorKind.THROTTLED


def _last_outcome(retry_state: RetryCallState) -> Any:
    # re-raises the last exception, or hands back the last (still retryable) result
    return retry_state.outcome.result()  # type: ignore[union-attr]
