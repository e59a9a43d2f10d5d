"""Partitioned BatchWriteItem with unprocessed-item reconciliation.

A large write request is cut into groups, each group is written through the
retry controller, and any UnprocessedItems are resubmitted against the same
retry budget that throttling uses. Once the budget is spent a group that made
no progress at all raises ThroughputExceededError; a group that made some
progress hands its leftovers back to the caller as UnprocessedItems, the way
DynamoDB itself answers with 200 OK.
"""

import logging
import time
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple, Union

from ddb_wrapper.common.capacity import merge_capacity_lists
from ddb_wrapper.exception import (
    BatchItemException,
    NotYetImplementedError,
    ThroughputExceededError,
)
from ddb_wrapper.retry import RetryController
from ddb_wrapper.types import ConsumedCapacity, DynamoRequest, DynamoResponse, WriteRequests

logger = logging.getLogger(__name__)

BATCH_WRITE_ITEM = "batch_write_item"

ITEM_COLLECTION_METRICS_MESSAGE = (
    "ReturnItemCollectionMetrics is supported in the AWS DynamoDB API, "
    "but this capability is not yet implemented by this wrapper library."
)
MULTIPLE_TABLES_MESSAGE = (
    "Expected exactly 1 table name in RequestItems, but found 0 or 2+. "
    "Writing to more than 1 table with BatchWriteItem is supported in the AWS DynamoDB API, "
    "but this capability is not yet implemented by this wrapper library."
)


class PartitionStrategy(str, Enum):
    EQUAL_ITEM_COUNT = "EqualItemCount"
    EVENLY_DISTRIBUTED_GROUP_WCU = "EvenlyDistributedGroupWCU"


class GroupWrite:
    """One partition group; each call writes whatever the store has not processed yet."""

    def __init__(self, client: Any, table_name: str, group: WriteRequests, options: DynamoRequest) -> None:
        self.client = client
        self.table_name = table_name
        self.remaining = group
        self.options = options
        self.capacities: List[Optional[List[ConsumedCapacity]]] = []

    def __call__(self) -> WriteRequests:
        request = {**self.options, "RequestItems": {self.table_name: self.remaining}}
        response = self.client.batch_write_item(**request)
        self.capacities.append(response.get("ConsumedCapacity"))
        unprocessed: WriteRequests = response.get("UnprocessedItems", {}).get(self.table_name, [])
        if unprocessed:
            logger.debug("%s on %s: %d unprocessed items", BATCH_WRITE_ITEM, self.table_name, len(unprocessed))
            self.remaining = unprocessed
        return unprocessed


class BatchPartitioner:
    def __init__(self, client: Any, retry_controller: RetryController, group_delay_ms: float) -> None:
        self.client = client
        self.retry_controller = retry_controller
        self.group_delay_ms = group_delay_ms

    def execute(self, params: DynamoRequest, **kwargs: Any) -> DynamoResponse:
        table_name = self.__validate(params)
        group_size = self.__group_size(kwargs)
        write_requests: WriteRequests = list(params["RequestItems"][table_name])
        options = {key: value for key, value in params.items() if key != "RequestItems"}

        leftovers: WriteRequests = []
        capacities: List[Optional[List[ConsumedCapacity]]] = []
        for position, group in enumerate(self.__partition(write_requests, group_size)):
            if position > 0:
                _sleep_ms(self.group_delay_ms)
            unprocessed, group_capacities = self.__write_group(table_name, group, options)
            leftovers.extend(unprocessed)
            capacities.extend(group_capacities)

        result: DynamoResponse = {"UnprocessedItems": {table_name: leftovers} if leftovers else {}}
        merged = merge_capacity_lists(capacities)
        if merged is not None:
            result["ConsumedCapacity"] = merged
        return result

    def __write_group(
        self, table_name: str, group: WriteRequests, options: DynamoRequest
    ) -> Tuple[WriteRequests, List[Optional[List[ConsumedCapacity]]]]:
        write = GroupWrite(self.client, table_name, group, options)
        remaining = self.retry_controller.execute(table_name, BATCH_WRITE_ITEM, write, retry_result=bool)
        if remaining and len(remaining) == len(group):
            raise ThroughputExceededError()
        return remaining, write.capacities

    def __validate(self, params: DynamoRequest) -> str:
        if params.get("ReturnItemCollectionMetrics") not in (None, "NONE"):
            raise NotYetImplementedError(ITEM_COLLECTION_METRICS_MESSAGE)
        request_items = params.get("RequestItems") or {}
        if len(request_items) != 1:
            raise NotYetImplementedError(MULTIPLE_TABLES_MESSAGE)
        table_name = next(iter(request_items))
        if not isinstance(request_items[table_name], list):
            raise BatchItemException("Batched write requests must be contained within a list")
        return table_name

    def __group_size(self, kwargs: Any) -> Optional[int]:
        strategy: Union[PartitionStrategy, str, None] = kwargs.get("partition_strategy")
        if strategy is None:
            return None
        try:
            strategy = PartitionStrategy(strategy)
        except ValueError as exc:
            raise BatchItemException(f"unknown partition strategy {strategy!r}") from exc
        target_field = (
            "target_item_count" if strategy is PartitionStrategy.EQUAL_ITEM_COUNT else "target_group_wcu"
        )
        # each write request is accounted as exactly one WCU, so both targets are item counts
        target = kwargs.get(target_field)
        if not isinstance(target, int) or isinstance(target, bool) or target < 1:
            raise BatchItemException(f"{strategy.value} requires a positive integer {target_field}")
        return target

    @staticmethod
    def __partition(write_requests: WriteRequests, group_size: Optional[int]) -> Iterator[WriteRequests]:
        if not write_requests:
            return
        if not group_size:
            yield write_requests
            return
        for pos in range(0, len(write_requests), group_size):
            yield write_requests[pos: pos + group_size]


def _sleep_ms(delay_ms: float) -> None:
    if delay_ms > 0:
        time.sleep(delay_ms / 1000)
