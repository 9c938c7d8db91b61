"""
Persistence query predicates.

Components describe reads with a small set of predicate values; the SQLite
repos translate them to SQL and in-memory stores evaluate them with
apply_query().
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Eq:
    """field == value"""

    field: str
    value: Any


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match against any of the fields."""

    fields: tuple[str, ...]
    text: str


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


Predicate = Eq | Contains


def matches(record: BaseModel, predicates: Iterable[Predicate]) -> bool:
    for predicate in predicates:
        if isinstance(predicate, Eq):
            if getattr(record, predicate.field) != predicate.value:
                return False
        else:
            needle = predicate.text.lower()
            haystacks = (str(getattr(record, f) or "").lower() for f in predicate.fields)
            if not any(needle in h for h in haystacks):
                return False
    return True


def apply_query(
    records: Iterable[T],
    predicates: Sequence[Predicate] = (),
    order: Sequence[OrderBy] = (),
    limit: int | None = None,
) -> list[T]:
    """Filter, sort and limit records in memory."""
    result = [r for r in records if matches(r, predicates)]
    # Stable sorts applied last key first give a multi-key ordering.
    for key in reversed(order):
        result.sort(key=lambda r, f=key.field: getattr(r, f), reverse=key.descending)
    if limit is not None:
        result = result[:limit]
    return result
