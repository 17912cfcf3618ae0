"""Transaction context carried through rule evaluation and into the ledger."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .money import Money

# Reserved key under which the purchase amount is injected before earning rules run
AMOUNT_CONTEXT_KEY = "amount"


@dataclass(frozen=True)
class TransactionContext:
    """
    Immutable key/value data describing a single points operation.

    Holds rule inputs such as category, tier, source and recent activity
    counters. Deriving a new context keeps the original timestamp.
    """

    data: Mapping[str, Any] = field(default_factory=dict, hash=False)
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    @classmethod
    def create(cls, data: Optional[Mapping[str, Any]] = None) -> "TransactionContext":
        return cls(data=dict(data or {}))

    @classmethod
    def earning(
        cls,
        category: Optional[str] = None,
        source: Optional[str] = None,
        **extra: Any,
    ) -> "TransactionContext":
        data: dict[str, Any] = {}
        if category is not None:
            data["category"] = category
        if source is not None:
            data["source"] = source
        return cls(data={**data, **extra})

    @classmethod
    def redemption(cls, **extra: Any) -> "TransactionContext":
        return cls(data={"type": "redemption", **extra})

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self.data

    @property
    def category(self) -> Optional[str]:
        return self.get("category")

    @property
    def source(self) -> Optional[str]:
        return self.get("source")

    @property
    def tier(self) -> Optional[str]:
        return self.get("tier")

    @property
    def amount(self) -> Optional[Money]:
        value = self.get(AMOUNT_CONTEXT_KEY)
        return value if isinstance(value, Money) else None

    def with_value(self, key: str, value: Any) -> "TransactionContext":
        return TransactionContext(data={**self.data, key: value}, timestamp=self.timestamp)

    def merge(self, data: Mapping[str, Any]) -> "TransactionContext":
        return TransactionContext(data={**self.data, **data}, timestamp=self.timestamp)

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return {
            "data": {key: _serialize(value) for key, value in self.data.items()},
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "TransactionContext":
        timestamp = payload.get("timestamp")
        return cls(
            data=dict(payload.get("data") or {}),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else datetime.utcnow(),
        )


def _serialize(value: Any) -> Any:
    if isinstance(value, Money):
        return value.to_dict()
    if isinstance(value, datetime):
        return value.isoformat()
    return value
