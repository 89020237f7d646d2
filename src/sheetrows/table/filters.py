"""Row selection predicates."""

from typing import Any, Callable, Protocol, Union, runtime_checkable

Record = dict[str, Any]


@runtime_checkable
class RowFilter(Protocol):
    """Anything with a ``matches(record)`` method."""

    def matches(self, record: Record) -> bool: ...


RowPredicate = Union[Callable[[Record], bool], RowFilter]


class FieldMatcher:
    """Matches records whose fields equal the given values."""

    def __init__(self, **expected: Any):
        self.expected = expected

    def matches(self, record: Record) -> bool:
        return all(record.get(field) == value for field, value in self.expected.items())

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.expected.items())
        return f"where({fields})"


def where(**expected: Any) -> FieldMatcher:
    """Build a matcher, e.g. ``where(id="7")``."""
    return FieldMatcher(**expected)


def as_predicate(row_filter: RowPredicate) -> Callable[[Record], bool]:
    """Normalise a matcher object or a plain callable to a callable."""
    if isinstance(row_filter, RowFilter):
        return row_filter.matches
    if callable(row_filter):
        return row_filter
    raise TypeError(f"Expected a callable or an object with matches(), got {type(row_filter).__name__}")
