from typing import Any, Dict, List

DynamoRequest = Dict[str, Any]
DynamoResponse = Dict[str, Any]
WriteRequests = List[Dict[str, Any]]
