"""Window layer: the bounded, deduplicated number window."""

from avgcalc.window.store import WindowStore, WindowTransition, merge_window

__all__ = [
    "WindowStore",
    "WindowTransition",
    "merge_window",
]
