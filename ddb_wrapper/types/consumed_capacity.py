from typing import Dict, TypedDict


class Capacity(TypedDict, total=False):
    CapacityUnits: float
    ReadCapacityUnits: float
    WriteCapacityUnits: float


class ConsumedCapacity(Capacity, total=False):
    TableName: str
    Table: Capacity
    LocalSecondaryIndexes: Dict[str, Capacity]
    GlobalSecondaryIndexes: Dict[str, Capacity]
