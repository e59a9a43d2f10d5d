from .capacity import merge_capacity_lists, merge_consumed_capacity
from .events import CONSUMED_CAPACITY, RETRY, EventBus

__all__ = ["CONSUMED_CAPACITY", "RETRY", "EventBus", "merge_capacity_lists", "merge_consumed_capacity"]
