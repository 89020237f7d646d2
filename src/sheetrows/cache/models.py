"""Cache entry and lookup result types."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class CacheEntry(BaseModel):
    """A cached value and the epoch-millisecond time it was stored."""

    model_config = ConfigDict(populate_by_name=True)

    data: Any = None
    last_update: int = Field(alias="lastUpdate")

    def age_seconds(self, now_ms: int) -> float:
        return abs(now_ms - self.last_update) / 1000

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class Found(Generic[T]):
    """A cache hit. ``value`` may be falsy."""

    value: T


class _Missing:
    """A cache miss: absent or expired."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

CacheResult = Union[Found[T], _Missing]
