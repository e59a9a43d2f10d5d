"""Shared base wrapper that owns configuration and event publishing."""

from typing import Any, List, Optional, Union

from ddb_wrapper.config import RetryDelayOptions, WrapperConfig
from ddb_wrapper.types import ConsumedCapacity, ConsumedCapacityEvent

from .events import CONSUMED_CAPACITY, EventBus

READ_METHODS = frozenset({"get_item", "query", "scan", "batch_get_item"})


class BaseWrapper:
    """Provides config access and capacity event publishing for wrappers."""

    def __init__(self, **kwargs: Any) -> None:
        self.config: WrapperConfig = WrapperConfig.from_kwargs(**kwargs)
        self.events: EventBus = kwargs.get("events") or EventBus()

    @property
    def table_name_prefix(self) -> str:
        return self.config.table_name_prefix

    @property
    def group_delay_ms(self) -> float:
        return self.config.group_delay_ms

    @property
    def max_retries(self) -> int:
        return self.config.max_retries

    @property
    def retry_delay_options(self) -> RetryDelayOptions:
        return self.config.retry_delay_options

    def publish_capacity(
        self, method: str, capacity: Optional[Union[ConsumedCapacity, List[ConsumedCapacity]]]
    ) -> None:
        if not capacity:
            return
        event: ConsumedCapacityEvent = {
            "method": method,
            "capacity_type": self.capacity_type(method),
            "consumed_capacity": capacity,
        }
        self.events.emit(CONSUMED_CAPACITY, dict(event))

    @staticmethod
    def capacity_type(method: str) -> str:
        return "ReadCapacityUnits" if method in READ_METHODS else "WriteCapacityUnits"
