"""NumberProvider protocol -- abstract interface for upstream number sources.

The HTTP client and the in-memory fake both satisfy this protocol.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from avgcalc.providers.types import NumberKind


@runtime_checkable
class NumberProvider(Protocol):
    """Async interface for fetching numbers of a given kind.

    Implementations must support ``async with`` for lifecycle management.
    ``fetch`` is fail-open: upstream failures yield an empty list.
    """

    async def connect(self) -> None:
        """Open pooled connections to the upstream generators."""
        ...

    async def disconnect(self) -> None:
        """Close connections and release resources."""
        ...

    async def fetch(
        self,
        kind: NumberKind,
        window: list[int] | None = None,
    ) -> list[int]:
        """Fetch numbers for a kind.

        Args:
            kind: Which generator to call.
            window: Current window contents. Sent to derived kinds,
                ignored for the random kind.

        Returns:
            The numbers the upstream returned, in upstream order, or an
            empty list on any upstream failure.
        """
        ...

    async def __aenter__(self) -> NumberProvider:
        """Connect on context manager entry."""
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Disconnect on context manager exit."""
        ...
