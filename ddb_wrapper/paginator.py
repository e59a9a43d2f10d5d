"""Drives query/scan until LastEvaluatedKey runs out."""

import logging
from typing import Any, Callable, Dict, List, Optional

from ddb_wrapper.common.capacity import merge_consumed_capacity
from ddb_wrapper.retry import RetryController
from ddb_wrapper.types import ConsumedCapacity, DynamoRequest, DynamoResponse

logger = logging.getLogger(__name__)

COUNT_FIELDS = ("Count", "ScannedCount")


class Paginator:
    def __init__(self, client: Any, retry_controller: RetryController) -> None:
        self.client = client
        self.retry_controller = retry_controller

    def collect(self, table_name: str, method: str, params: DynamoRequest) -> DynamoResponse:
        """Fetch every page of a query or scan and merge them into one response.

        Items keep their page order. Count and ScannedCount are summed and
        ConsumedCapacity merged, each only if some page reported it.
        """

        operation: Callable[..., DynamoResponse] = getattr(self.client, method)
        request = dict(params)
        items: List[Dict[str, Any]] = []
        capacities: List[Optional[ConsumedCapacity]] = []
        counts: Dict[str, int] = {}
        pages = 0
        while True:
            response = self.retry_controller.execute(table_name, method, lambda: operation(**request))
            pages += 1
            items.extend(response.get("Items", []))
            capacities.append(response.get("ConsumedCapacity"))
            for count_field in COUNT_FIELDS:
                if count_field in response:
                    counts[count_field] = counts.get(count_field, 0) + response[count_field]
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            request = {**request, "ExclusiveStartKey": last_key}
        logger.debug("%s on %s: %d items over %d pages", method, table_name, len(items), pages)
        result: DynamoResponse = {"Items": items, **counts}
        merged = merge_consumed_capacity(capacities)
        if merged is not None:
            result["ConsumedCapacity"] = merged
        return result
