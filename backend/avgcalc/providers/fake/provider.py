"""FakeNumberProvider -- in-memory number source for testing.

Lightweight implementation of NumberProvider for unit testing the
aggregator and HTTP layer without an upstream server.
"""

from __future__ import annotations

import asyncio
from typing import Self

from avgcalc.providers.types import NumberKind


class FakeNumberProvider:
    """In-memory NumberProvider for testing.

    Supply canned results per kind at construction, or queue them during
    tests via push_result(). Queued results are consumed first, then the
    canned result for the kind, then an empty list. Every call is recorded
    in ``calls`` as (kind, window).
    """

    def __init__(
        self,
        results: dict[NumberKind, list[int]] | None = None,
        delay: float = 0.0,
    ) -> None:
        self._results: dict[NumberKind, list[int]] = (
            results if results is not None else {}
        )
        self._queued: dict[NumberKind, list[list[int]]] = {}
        self._delay = delay
        self._connected = False
        self.calls: list[tuple[NumberKind, list[int] | None]] = []

    @property
    def is_connected(self) -> bool:
        return self._connected

    def push_result(self, kind: NumberKind, numbers: list[int]) -> None:
        """Queue a one-shot result for the next fetch of kind."""
        self._queued.setdefault(kind, []).append(list(numbers))

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def fetch(
        self,
        kind: NumberKind,
        window: list[int] | None = None,
    ) -> list[int]:
        self.calls.append((kind, list(window) if window is not None else None))
        if self._delay:
            await asyncio.sleep(self._delay)
        queued = self._queued.get(kind)
        if queued:
            return queued.pop(0)
        return list(self._results.get(kind, []))

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.disconnect()
