"""Per-wrapper publish/subscribe registry for retry and capacity notifications."""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

RETRY = "retry"
CONSUMED_CAPACITY = "consumed_capacity"
EVENT_KINDS = (RETRY, CONSUMED_CAPACITY)

# camelCase spelling used by the DynamoDB wire format
KIND_ALIASES = {"consumedCapacity": CONSUMED_CAPACITY}

Handler = Callable[[Dict[str, Any]], Any]


class EventBus:
    """Synchronous fan-out to subscribers, in registration order."""

    def __init__(self) -> None:
        self.__handlers: Dict[str, List[Handler]] = {kind: [] for kind in EVENT_KINDS}

    def on(self, kind: str, handler: Handler) -> Handler:
        self.__handlers[self.__kind(kind)].append(handler)
        return handler

    def off(self, kind: str, handler: Handler) -> None:
        handlers = self.__handlers[self.__kind(kind)]
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, kind: str, payload: Dict[str, Any]) -> None:
        kind = self.__kind(kind)
        for handler in list(self.__handlers[kind]):
            try:
                handler(payload)
            except Exception:  # pylint: disable=broad-except
                logger.exception("%s event handler %r failed", kind, handler)

    def handlers(self, kind: str) -> List[Handler]:
        return list(self.__handlers[self.__kind(kind)])

    def __kind(self, kind: str) -> str:
        kind = KIND_ALIASES.get(kind, kind)
        if kind not in self.__handlers:
            raise ValueError(f"unknown event kind {kind!r}; expected one of {EVENT_KINDS}")
        return kind
