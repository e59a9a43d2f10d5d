"""Public interface for the ddb_wrapper package."""

from typing import Any

from .batch import PartitionStrategy
from .common.events import CONSUMED_CAPACITY, RETRY, EventBus
from .config import RetryDelayOptions, WrapperConfig
from .exception import (
    BatchItemException,
    DynamodbWrapperError,
    ErrorKind,
    FatalError,
    NotYetImplementedError,
    ThrottledError,
    ThroughputExceededError,
)
from .wrapper import DynamodbWrapper


def wrapper(client: Any = None, **kwargs: Any) -> DynamodbWrapper:
    """Factory helper building a DynamoDB wrapper around ``client``."""

    engine = kwargs.pop("engine", "dynamodb")
    if engine and engine != "dynamodb":
        raise ValueError(f"engine {engine} not supported; only 'dynamodb' is available")
    return DynamodbWrapper(client, **kwargs)


__all__ = [
    "CONSUMED_CAPACITY",
    "RETRY",
    "BatchItemException",
    "DynamodbWrapper",
    "DynamodbWrapperError",
    "ErrorKind",
    "EventBus",
    "FatalError",
    "NotYetImplementedError",
    "PartitionStrategy",
    "RetryDelayOptions",
    "ThrottledError",
    "ThroughputExceededError",
    "WrapperConfig",
    "wrapper",
]
