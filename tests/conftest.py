"""
Shared fixtures: a controllable clock, an in-memory store and a
repository wired to both.
"""

import pytest

from ratekeeper.repository import UserRatingReviewRepository
from ratekeeper.store.memory_store import InMemoryRatingReviewStore


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int = 1000) -> int:
        self.now += millis
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryRatingReviewStore()


@pytest.fixture
def repository(store, clock):
    return UserRatingReviewRepository(store, clock=clock)
