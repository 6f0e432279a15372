"""Shared test fixtures for the average calculator."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from avgcalc.providers.fake.provider import FakeNumberProvider
from avgcalc.service.aggregator import AggregatorService
from avgcalc.window.store import WindowStore


@pytest.fixture(autouse=True)
def _clean_avg_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep AVG_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("AVG_"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def store() -> WindowStore:
    return WindowStore(capacity=10)


@pytest.fixture
def fake_provider() -> FakeNumberProvider:
    return FakeNumberProvider()


@pytest.fixture
def service(
    store: WindowStore,
    fake_provider: FakeNumberProvider,
) -> AggregatorService:
    return AggregatorService(store=store, provider=fake_provider)
