"""Fan-out helpers for asynchronous REST calls."""

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

T = TypeVar("T")


async def sequence(awaitables: Iterable[Awaitable[T]]) -> list[T]:
    """
    Turn a list of pending calls into one call returning a list.

    Waits for every call, returns the results in input order and raises
    the first failure. An empty input returns an empty list.
    """
    return list(await asyncio.gather(*awaitables))
