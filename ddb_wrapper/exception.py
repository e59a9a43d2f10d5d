"""Error taxonomy raised by the wrapper."""

from enum import Enum
from typing import Optional

THROTTLING_ERROR_CODE = "ProvisionedThroughputExceededException"
NOT_YET_IMPLEMENTED_CODE = "NotYetImplementedError"


class ErrorKind(str, Enum):
    THROTTLED = "Throttled"
    FATAL = "Fatal"
    NOT_YET_IMPLEMENTED = "NotYetImplemented"
    SYNTHESIZED_THROUGHPUT_EXCEEDED = "SynthesizedThroughputExceeded"


class DynamodbWrapperError(Exception):
    """Base class for every error surfaced by the wrapper."""

    kind: ErrorKind

    def __init__(self, message: str, code: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class ThrottledError(DynamodbWrapperError):
    """Store throttling that outlived the retry budget."""

    kind = ErrorKind.THROTTLED


class FatalError(DynamodbWrapperError):
    """Any non-throttling error reported by the store. Never retried."""

    kind = ErrorKind.FATAL


class NotYetImplementedError(DynamodbWrapperError):
    kind = ErrorKind.NOT_YET_IMPLEMENTED

    def __init__(self, message: str) -> None:
        super().__init__(message, NOT_YET_IMPLEMENTED_CODE)


class ThroughputExceededError(ThrottledError):
    """Raised when a batch group made no progress at all after every retry."""

    kind = ErrorKind.SYNTHESIZED_THROUGHPUT_EXCEEDED

    def __init__(self) -> None:
        super().__init__(
            "The level of configured provisioned throughput for the table was exceeded. "
            "Consider increasing your provisioning level with the UpdateTable API",
            THROTTLING_ERROR_CODE,
            400,
        )


class BatchItemException(DynamodbWrapperError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "BatchItemException")
