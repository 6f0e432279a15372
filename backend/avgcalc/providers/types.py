"""Number kinds and their upstream fetch strategies."""

from __future__ import annotations

from enum import Enum


class FetchStrategy(str, Enum):
    """How a provider is called for a kind.

    DERIVED providers receive the current window and return related
    numbers (POST). RANDOM providers take no input (GET).
    """

    DERIVED = "derived"
    RANDOM = "random"


class NumberKind(str, Enum):
    """Recognized number sources. Values double as route and upstream path."""

    PRIMES = "primes"
    FIBO = "fibo"
    EVEN = "even"
    RAND = "rand"

    @property
    def strategy(self) -> FetchStrategy:
        return _STRATEGIES[self]

    @property
    def is_derived(self) -> bool:
        return self.strategy is FetchStrategy.DERIVED

    @classmethod
    def parse(cls, value: str) -> NumberKind | None:
        """Return the kind for a route label, or None if unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return None


_STRATEGIES: dict[NumberKind, FetchStrategy] = {
    NumberKind.PRIMES: FetchStrategy.DERIVED,
    NumberKind.FIBO: FetchStrategy.DERIVED,
    NumberKind.EVEN: FetchStrategy.DERIVED,
    NumberKind.RAND: FetchStrategy.RANDOM,
}

_missing = set(NumberKind) - set(_STRATEGIES)
if _missing:
    raise RuntimeError(f"no fetch strategy for {sorted(k.value for k in _missing)}")
