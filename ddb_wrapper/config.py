"""Immutable construction options shared by every engine component."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

CustomBackoff = Callable[[int], float]

DEFAULT_GROUP_DELAY_MS = 100
DEFAULT_MAX_RETRIES = 10
DEFAULT_RETRY_BASE_MS = 100


@dataclass(frozen=True)
class RetryDelayOptions:
    base: float = DEFAULT_RETRY_BASE_MS
    custom_backoff: Optional[CustomBackoff] = None

    def __post_init__(self) -> None:
        if self.base < 0:
            raise ValueError("retry_delay_options.base must be >= 0")

    @classmethod
    def from_value(cls, value: Union["RetryDelayOptions", Dict[str, Any], None]) -> "RetryDelayOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls(
            base=value.get("base", DEFAULT_RETRY_BASE_MS),
            custom_backoff=value.get("custom_backoff"),
        )


@dataclass(frozen=True)
class WrapperConfig:
    table_name_prefix: str = ""
    group_delay_ms: float = DEFAULT_GROUP_DELAY_MS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay_options: RetryDelayOptions = field(default_factory=RetryDelayOptions)

    def __post_init__(self) -> None:
        if self.group_delay_ms < 0:
            raise ValueError("group_delay_ms must be >= 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> "WrapperConfig":
        """Build a config from wrapper keyword arguments, ignoring unrelated keys."""

        prefix = kwargs.get("table_name_prefix")
        group_delay_ms = kwargs.get("group_delay_ms")
        max_retries = kwargs.get("max_retries")
        return cls(
            table_name_prefix=prefix if prefix is not None else "",
            group_delay_ms=group_delay_ms if group_delay_ms is not None else DEFAULT_GROUP_DELAY_MS,
            max_retries=max_retries if max_retries is not None else DEFAULT_MAX_RETRIES,
            retry_delay_options=RetryDelayOptions.from_value(kwargs.get("retry_delay_options")),
        )
