"""Aggregator service -- one numbers request end-to-end.

Phases per request: validate kind -> fetch from provider -> merge into
the window -> compute average -> respond. An unrecognized kind is
rejected before any provider call or window mutation. No retries:
upstream failures arrive here as an empty fetch result.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from avgcalc.providers.number_provider import NumberProvider
from avgcalc.providers.types import NumberKind
from avgcalc.window.store import WindowStore

log = structlog.get_logger()


class InvalidKindError(Exception):
    """Raised when a request names an unrecognized number kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Invalid number kind: {kind!r}")


@dataclass(frozen=True)
class AggregateResponse:
    """Result of one accepted numbers request."""

    window_prev_state: list[int]
    window_curr_state: list[int]
    numbers: list[int]
    avg: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the wire field names."""
        return {
            "windowPrevState": list(self.window_prev_state),
            "windowCurrState": list(self.window_curr_state),
            "numbers": list(self.numbers),
            "avg": self.avg,
        }


def compute_average(values: Sequence[int]) -> float:
    """Arithmetic mean rounded to 2 decimal places; 0.0 for no values."""
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


class AggregatorService:
    """Orchestrates provider fetches and window merges.

    Holds no per-request state; the window store is the only shared
    state and the provider call happens outside its lock.
    """

    def __init__(self, store: WindowStore, provider: NumberProvider) -> None:
        self._store = store
        self._provider = provider

    @property
    def store(self) -> WindowStore:
        return self._store

    async def handle(self, kind: str) -> AggregateResponse:
        """Serve one request for kind.

        Raises:
            InvalidKindError: If kind is not a recognized NumberKind.
        """
        number_kind = NumberKind.parse(kind)
        if number_kind is None:
            log.info("numbers_request_rejected", kind=kind)
            raise InvalidKindError(kind)

        window = self._store.snapshot() if number_kind.is_derived else None
        numbers = await self._provider.fetch(number_kind, window)

        transition = await self._store.merge(numbers)
        curr = list(transition.curr)
        avg = compute_average(curr)

        log.info(
            "numbers_request_completed",
            kind=number_kind.value,
            fetched=len(numbers),
            window_size=len(curr),
            avg=avg,
        )
        return AggregateResponse(
            window_prev_state=list(transition.prev),
            window_curr_state=curr,
            numbers=list(numbers),
            avg=avg,
        )
