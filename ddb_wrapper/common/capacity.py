"""Summation of ConsumedCapacity structures across several responses."""

from typing import Any, Dict, Iterable, List, Optional

from ddb_wrapper.types import Capacity, ConsumedCapacity

UNIT_FIELDS = ("CapacityUnits", "ReadCapacityUnits", "WriteCapacityUnits")
INDEX_FIELDS = ("LocalSecondaryIndexes", "GlobalSecondaryIndexes")


def merge_consumed_capacity(records: Iterable[Optional[ConsumedCapacity]]) -> Optional[ConsumedCapacity]:
    """Sum a sequence of capacity records into one.

    Returns None when no record is present. A field appears in the result only
    if at least one input reported it, and is summed over the reporting inputs.
    TableName is taken from the first record.
    """

    present = [record for record in records if record]
    if not present:
        return None
    merged: Dict[str, Any] = {}
    if "TableName" in present[0]:
        merged["TableName"] = present[0]["TableName"]
    merged.update(_sum_units(present))
    tables = [record["Table"] for record in present if "Table" in record]
    if tables:
        merged["Table"] = _sum_units(tables)
    for index_field in INDEX_FIELDS:
        indexes = [record[index_field] for record in present if index_field in record]  # type: ignore[literal-required]
        if indexes:
            merged[index_field] = _merge_indexes(indexes)
    return merged  # type: ignore[return-value]


def merge_capacity_lists(responses: Iterable[Optional[List[ConsumedCapacity]]]) -> Optional[List[ConsumedCapacity]]:
    """Merge the list-shaped ConsumedCapacity of single-table batch responses."""

    flattened: List[ConsumedCapacity] = []
    for capacities in responses:
        if capacities:
            flattened.extend(capacities)
    merged = merge_consumed_capacity(flattened)
    return [merged] if merged is not None else None


def _sum_units(capacities: List[Capacity]) -> Capacity:
    summed: Dict[str, Any] = {}
    for unit_field in UNIT_FIELDS:
        reported = [capacity[unit_field] for capacity in capacities if unit_field in capacity]  # type: ignore[literal-required]
        if reported:
            summed[unit_field] = sum(reported)
    return summed  # type: ignore[return-value]


def _merge_indexes(indexes: List[Dict[str, Capacity]]) -> Dict[str, Capacity]:
    names: List[str] = []
    for index in indexes:
        names.extend(name for name in index if name not in names)
    return {name: _sum_units([index[name] for index in indexes if name in index]) for name in names}
