"""Bounded, deduplicated number window.

The store owns the single window shared by every request. Its only
mutation entry point is merge(), serialized via asyncio.Lock. The
read-modify-write inside the lock has no await, so a cancelled caller
either merged completely or not at all.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

log = structlog.get_logger()


@dataclass(frozen=True)
class WindowTransition:
    """Window contents immediately before and after one merge."""

    prev: tuple[int, ...]
    curr: tuple[int, ...]

    @property
    def changed(self) -> bool:
        return self.prev != self.curr


def merge_window(
    existing: Iterable[int],
    incoming: Iterable[int],
    capacity: int,
) -> list[int]:
    """Union existing and incoming in first-arrival order, keep the newest.

    Existing values keep their order; incoming values are appended in
    their given order unless already present. When the union exceeds
    capacity the oldest entries are dropped from the front.
    """
    if capacity < 1:
        raise ValueError(f"capacity must be >= 1, got {capacity}")

    # dict preserves insertion order and gives O(1) membership
    union: dict[int, None] = dict.fromkeys(existing)
    for value in incoming:
        if value not in union:
            union[value] = None

    merged = list(union)
    if len(merged) > capacity:
        merged = merged[-capacity:]
    return merged


class WindowStore:
    """Owns the process-wide number window.

    Created empty at startup and never persisted; a restart resets it.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._window: tuple[int, ...] = ()
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._window)

    def snapshot(self) -> list[int]:
        """Return a copy of the current window contents, oldest first."""
        return list(self._window)

    async def merge(self, incoming: Iterable[int]) -> WindowTransition:
        """Atomically merge incoming numbers into the window.

        Never fails. An empty or fully duplicate input leaves the window
        unchanged and returns prev == curr.
        """
        values = list(incoming)
        async with self._lock:
            prev = self._window
            curr = tuple(merge_window(prev, values, self._capacity))
            self._window = curr

        log.debug(
            "window_merged",
            incoming=len(values),
            prev_size=len(prev),
            curr_size=len(curr),
            evicted=max(0, len(prev) + len(set(values) - set(prev)) - len(curr)),
        )
        return WindowTransition(prev=prev, curr=curr)
