"""Tests for the bounded, deduplicated number window."""

from __future__ import annotations

import asyncio
import itertools
import random

import pytest

from avgcalc.window.store import WindowStore, WindowTransition, merge_window


def _assert_window_invariant(window: list[int] | tuple[int, ...], capacity: int) -> None:
    assert len(window) <= capacity
    assert len(set(window)) == len(window)


class TestMergeWindow:
    """Pure merge algorithm."""

    def test_empty_plus_empty(self) -> None:
        assert merge_window([], [], capacity=10) == []

    def test_appends_new_values_in_order(self) -> None:
        assert merge_window([1, 2], [3, 4], capacity=10) == [1, 2, 3, 4]

    def test_existing_order_kept_and_duplicates_skipped(self) -> None:
        assert merge_window([1, 3, 5, 7, 9], [3, 5, 11, 13], capacity=10) == [
            1, 3, 5, 7, 9, 11, 13,
        ]

    def test_duplicates_within_incoming_collapsed(self) -> None:
        assert merge_window([], [4, 4, 2, 4, 2], capacity=10) == [4, 2]

    def test_evicts_oldest_when_over_capacity(self) -> None:
        assert merge_window([1, 2, 3], [4, 5], capacity=3) == [3, 4, 5]

    def test_eleven_values_trimmed_to_last_ten(self) -> None:
        incoming = list(range(2, 23, 2))
        assert merge_window([], incoming, capacity=10) == [
            4, 6, 8, 10, 12, 14, 16, 18, 20, 22,
        ]

    def test_exactly_at_capacity_not_trimmed(self) -> None:
        assert merge_window([1, 2], [3], capacity=3) == [1, 2, 3]

    def test_does_not_mutate_inputs(self) -> None:
        existing = [1, 2]
        incoming = [2, 3]
        merge_window(existing, incoming, capacity=10)
        assert existing == [1, 2]
        assert incoming == [2, 3]

    def test_negative_and_zero_values(self) -> None:
        assert merge_window([0], [-1, 0, -2], capacity=10) == [0, -1, -2]

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            merge_window([], [1], capacity=0)

    def test_invariant_holds_for_random_inputs(self) -> None:
        rng = random.Random(1234)
        window: list[int] = []
        for _ in range(200):
            incoming = [rng.randint(-20, 20) for _ in range(rng.randint(0, 15))]
            window = merge_window(window, incoming, capacity=7)
            _assert_window_invariant(window, 7)


class TestWindowStoreConstruction:
    def test_starts_empty(self) -> None:
        store = WindowStore(capacity=10)
        assert store.snapshot() == []
        assert len(store) == 0
        assert store.capacity == 10

    def test_rejects_zero_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            WindowStore(capacity=0)

    def test_snapshot_is_a_copy(self) -> None:
        store = WindowStore(capacity=10)
        snap = store.snapshot()
        snap.append(99)
        assert store.snapshot() == []


class TestWindowStoreMerge:
    async def test_first_merge_scenario(self) -> None:
        store = WindowStore(capacity=10)
        transition = await store.merge(list(range(2, 23, 2)))
        assert transition.prev == ()
        assert transition.curr == (4, 6, 8, 10, 12, 14, 16, 18, 20, 22)
        assert store.snapshot() == [4, 6, 8, 10, 12, 14, 16, 18, 20, 22]

    async def test_union_without_eviction(self) -> None:
        store = WindowStore(capacity=10)
        await store.merge([1, 3, 5, 7, 9])
        transition = await store.merge([3, 5, 11, 13])
        assert transition.prev == (1, 3, 5, 7, 9)
        assert transition.curr == (1, 3, 5, 7, 9, 11, 13)

    async def test_empty_incoming_keeps_exact_previous_state(self) -> None:
        """prev must be the real pre-merge window, not derived from lengths."""
        store = WindowStore(capacity=10)
        await store.merge([5, 6, 7])
        transition = await store.merge([])
        assert transition.prev == (5, 6, 7)
        assert transition.curr == (5, 6, 7)
        assert transition.changed is False

    async def test_fully_duplicate_merge_is_idempotent(self) -> None:
        store = WindowStore(capacity=10)
        await store.merge([1, 2, 3])
        transition = await store.merge([3, 1, 2, 2])
        assert transition.curr == transition.prev == (1, 2, 3)

    async def test_prev_equals_previous_curr(self) -> None:
        store = WindowStore(capacity=4)
        last: WindowTransition | None = None
        for batch in ([1, 2], [3, 4, 5], [], [6], [6, 7, 8, 9]):
            transition = await store.merge(batch)
            if last is not None:
                assert transition.prev == last.curr
            last = transition

    async def test_accepts_any_iterable(self) -> None:
        store = WindowStore(capacity=10)
        transition = await store.merge(x for x in (1, 2, 2))
        assert transition.curr == (1, 2)


class TestWindowStoreConcurrency:
    """Concurrent merges must be serializable."""

    async def test_concurrent_merges_match_some_sequential_order(self) -> None:
        capacity = 6
        inputs = [[1, 2, 3], [3, 4, 5], [6, 7], [1, 8]]
        store = WindowStore(capacity=capacity)

        await asyncio.gather(*(store.merge(batch) for batch in inputs))

        possible = set()
        for order in itertools.permutations(inputs):
            window: list[int] = []
            for batch in order:
                window = merge_window(window, batch, capacity)
            possible.add(tuple(window))
        assert tuple(store.snapshot()) in possible

    async def test_no_update_lost_under_load(self) -> None:
        store = WindowStore(capacity=1000)
        batches = [[i * 10 + j for j in range(10)] for i in range(50)]

        transitions = await asyncio.gather(*(store.merge(b) for b in batches))

        assert sorted(store.snapshot()) == sorted(v for b in batches for v in b)
        # Each merge's prev is some other merge's curr (or empty): a chain
        currs = {t.curr for t in transitions}
        for t in transitions:
            assert t.prev == () or t.prev in currs

    async def test_cancelled_merge_leaves_window_untouched(self) -> None:
        store = WindowStore(capacity=10)
        await store.merge([1, 2])

        async with store._lock:
            task = asyncio.create_task(store.merge([3, 4]))
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert store.snapshot() == [1, 2]
