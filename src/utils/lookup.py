"""Predicate-based lookups over fetched collections."""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

T = TypeVar("T")


def find_first(items: Iterable[T] | None, predicate: Callable[[T], bool]) -> T | None:
    """
    Return the first item matching ``predicate``, or None.

    A None collection (404 from the server) is treated as empty.
    """
    if items is None:
        return None
    for item in items:
        if predicate(item):
            return item
    return None


def find_by_name(items: Iterable[dict[str, Any]] | None, name: str) -> dict[str, Any] | None:
    """
    Linear scan for exact name equality over raw JSON resources.

    Server-side filters are not trusted for equality, so callers fetch the
    whole collection and match here.
    """
    return find_first(
        items, lambda item: isinstance(item, dict) and item.get("name") == name
    )
