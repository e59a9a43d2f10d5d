from typing import List, TypedDict, Union

from .consumed_capacity import ConsumedCapacity


class RetryEvent(TypedDict):
    table_name: str
    method: str
    retry_count: int
    retry_delay_ms: float


class ConsumedCapacityEvent(TypedDict):
    method: str
    capacity_type: str
    consumed_capacity: Union[ConsumedCapacity, List[ConsumedCapacity]]
