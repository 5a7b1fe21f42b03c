"""
Ordered list operations - Functional Core.

Pure helpers over item sequences. Every helper returns a new list and leaves
its input untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def in_range(items: Sequence[Any], index: int) -> bool:
    return 0 <= index < len(items)


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """
    Remove the element at `from_index` and reinsert it at `to_index`.

    Intervening elements shift by one. Out-of-range indices leave the order
    unchanged.
    """
    result = list(items)
    if not in_range(result, from_index) or not in_range(result, to_index):
        return result
    if from_index == to_index:
        return result

    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def swap_items(items: Sequence[T], i: int, j: int) -> list[T]:
    """Swap two positions; out-of-range indices leave the order unchanged."""
    result = list(items)
    if not in_range(result, i) or not in_range(result, j):
        return result
    result[i], result[j] = result[j], result[i]
    return result


def index_of(items: Sequence[BaseModel], item_id: str) -> int | None:
    for i, item in enumerate(items):
        if getattr(item, "id", None) == item_id:
            return i
    return None


def temporary_id(existing_ids: set[str], epoch_millis: int) -> str:
    """Timestamp-based id for items the server has not seen yet."""
    candidate = f"custom-{epoch_millis}"
    suffix = 1
    while candidate in existing_ids:
        candidate = f"custom-{epoch_millis}-{suffix}"
        suffix += 1
    return candidate


def clip_fields(values: dict[str, Any], limits: dict[str, int]) -> dict[str, Any]:
    """Truncate string fields to their maximum length, like an input maxLength."""
    clipped = dict(values)
    for name, max_len in limits.items():
        value = clipped.get(name)
        if isinstance(value, str) and len(value) > max_len:
            clipped[name] = value[:max_len]
    return clipped


def copy_items(items: Sequence[M]) -> list[M]:
    return [item.model_copy(deep=True) for item in items]


def same_items(a: Sequence[BaseModel], b: Sequence[BaseModel]) -> bool:
    """Value equality of two item arrays, order included."""
    if len(a) != len(b):
        return False
    return all(x.model_dump() == y.model_dump() for x, y in zip(a, b, strict=True))
