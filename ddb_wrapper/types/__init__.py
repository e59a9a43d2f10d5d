"""Type exports for ddb_wrapper."""

from .consumed_capacity import Capacity, ConsumedCapacity
from .dynamo_request import DynamoRequest, DynamoResponse, WriteRequests
from .events import ConsumedCapacityEvent, RetryEvent

__all__ = [
    "Capacity",
    "ConsumedCapacity",
    "ConsumedCapacityEvent",
    "DynamoRequest",
    "DynamoResponse",
    "RetryEvent",
    "WriteRequests",
]
