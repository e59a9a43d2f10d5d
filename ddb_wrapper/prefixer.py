from __future__ import annotations

from typing import Any, Dict, Optional

from ddb_wrapper.types import DynamoRequest, DynamoResponse

TABLE_KEYED_RESPONSE_FIELDS = ("Responses", "UnprocessedKeys", "UnprocessedItems", "ItemCollectionMetrics")


class DynamodbTablePrefixer:

    def __init__(self, prefix: Optional[str] = None) -> None:
        self.prefix: str = prefix or ""

    def add_prefix(self, request: Optional[DynamoRequest]) -> Optional[DynamoRequest]:
        if request is None or not self.prefix:
            return request
        processed: Dict[str, Any] = dict(request)
        if isinstance(processed.get("TableName"), str):
            processed["TableName"] = self.__apply_prefix(processed["TableName"], add=True)
        if isinstance(processed.get("RequestItems"), dict):
            processed["RequestItems"] = self.__process_keys(processed["RequestItems"], add=True)
        return processed

    def remove_prefix(self, response: Optional[DynamoResponse]) -> Optional[DynamoResponse]:
        if response is None or not self.prefix:
            return response
        processed: Dict[str, Any] = dict(response)
        for field in TABLE_KEYED_RESPONSE_FIELDS:
            if isinstance(processed.get(field), dict):
                processed[field] = self.__process_keys(processed[field], add=False)
        capacity = processed.get("ConsumedCapacity")
        if isinstance(capacity, list):
            processed["ConsumedCapacity"] = [self.__process_capacity(entry) for entry in capacity]
        elif isinstance(capacity, dict):
            processed["ConsumedCapacity"] = self.__process_capacity(capacity)
        return processed

    def __process_keys(self, table_map: Dict[str, Any], add: bool) -> Dict[str, Any]:
        return {self.__apply_prefix(name, add): value for name, value in table_map.items()}

    def __process_capacity(self, capacity: Any) -> Any:
        if not isinstance(capacity, dict) or not isinstance(capacity.get("TableName"), str):
            return capacity
        return {**capacity, "TableName": self.__apply_prefix(capacity["TableName"], add=False)}

    def __apply_prefix(self, table_name: str, add: bool) -> str:
        if add:
            if not table_name.startswith(self.prefix):
                return f"{self.prefix}{table_name}"
        else:
            if table_name.startswith(self.prefix):
                return table_name[len(self.prefix):]
        return table_name
