"""DynamoDB wrapper exposing retry-aware, prefix-aware low-level operations."""

from functools import lru_cache
from typing import Any, Optional

import boto3
from botocore.config import Config

from ddb_wrapper.prefixer import DynamodbTablePrefixer
from ddb_wrapper.types import DynamoRequest, DynamoResponse

from .batch import BATCH_WRITE_ITEM, BatchPartitioner
from .common.base_wrapper import BaseWrapper
from .paginator import Paginator
from .retry import RetryController


class DynamodbWrapper(BaseWrapper):
    """Wraps a boto3 DynamoDB client with retries, pagination and batch partitioning."""

    def __init__(self, client: Any = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.client = client or self.__get_dynamo_client(kwargs.get("region"), kwargs.get("endpoint"))
        self.prefixer = DynamodbTablePrefixer(self.config.table_name_prefix)
        self.retry_controller = RetryController(self.config, self.events)
        self.paginator = Paginator(self.client, self.retry_controller)
        self.batch_partitioner = BatchPartitioner(self.client, self.retry_controller, self.config.group_delay_ms)

    def get_item(self, params: DynamoRequest) -> DynamoResponse:
        return self.__pass_through("get_item", params)

    def update_item(self, params: DynamoRequest) -> DynamoResponse:
        return self.__pass_through("update_item", params)

    def delete_item(self, params: DynamoRequest) -> DynamoResponse:
        return self.__pass_through("delete_item", params)

    def put_item(self, params: DynamoRequest) -> DynamoResponse:
        request = self.__prefixed(params)
        response = self.retry_controller.execute(
            request.get("TableName", ""), "put_item", lambda: self.client.put_item(**request)
        )
        return self.__finish("put_item", response)

    def batch_get_item(self, params: DynamoRequest) -> DynamoResponse:
        request = self.__prefixed(params)
        table_names = ",".join(request.get("RequestItems") or {})
        response = self.retry_controller.execute(
            table_names, "batch_get_item", lambda: self.client.batch_get_item(**request)
        )
        return self.__finish("batch_get_item", response)

    def query(self, params: DynamoRequest) -> DynamoResponse:
        request = self.__prefixed(params)
        response = self.paginator.collect(request.get("TableName", ""), "query", request)
        return self.__finish("query", response)

    def scan(self, params: DynamoRequest) -> DynamoResponse:
        request = self.__prefixed(params)
        response = self.paginator.collect(request.get("TableName", ""), "scan", request)
        return self.__finish("scan", response)

    def batch_write_item(self, params: DynamoRequest, **kwargs: Any) -> DynamoResponse:
        """Write every request in ``params`` in sequential groups.

        Keyword arguments select the partitioning: ``partition_strategy`` is
        ``"EqualItemCount"`` (with ``target_item_count``) or
        ``"EvenlyDistributedGroupWCU"`` (with ``target_group_wcu``). Without a
        strategy the whole request is written in one call.
        """
        request = self.__prefixed(params)
        response = self.batch_partitioner.execute(request, **kwargs)
        return self.__finish(BATCH_WRITE_ITEM, response)

    @staticmethod
    @lru_cache(maxsize=128)
    def __get_dynamo_client(region: Optional[str] = None, endpoint: Optional[str] = None) -> Any:
        # retries belong to RetryController; botocore must not add its own attempts
        config = Config(retries={"mode": "standard", "total_max_attempts": 1})
        return boto3.client("dynamodb", region_name=region, endpoint_url=endpoint, config=config)

    def __pass_through(self, method: str, params: DynamoRequest) -> DynamoResponse:
        request = self.__prefixed(params)
        response = getattr(self.client, method)(**request)
        return self.__unprefixed(response)

    def __finish(self, method: str, response: DynamoResponse) -> DynamoResponse:
        cleaned = self.__unprefixed(response)
        self.publish_capacity(method, cleaned.get("ConsumedCapacity"))
        return cleaned

    def __prefixed(self, params: Optional[DynamoRequest]) -> DynamoRequest:
        prefixed = self.prefixer.add_prefix(params or {})
        return prefixed if isinstance(prefixed, dict) else {}

    def __unprefixed(self, response: Optional[DynamoResponse]) -> DynamoResponse:
        cleaned = self.prefixer.remove_prefix(response or {})
        return cleaned if isinstance(cleaned, dict) else {}
