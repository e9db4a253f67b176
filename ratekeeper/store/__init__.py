"""
Rating/Review Store Module.

Key-value persistence for per-game ratings and reviews.
In-memory and JSON-file backends share one abstract contract.
"""

from ratekeeper.store.base import (
    RatingReviewStore,
    RecordExistsError,
    RecordNotFoundError,
    StoreError,
    WriteMode,
)
from ratekeeper.store.json_store import JsonFileRatingReviewStore
from ratekeeper.store.memory_store import InMemoryRatingReviewStore

__all__ = [
    "InMemoryRatingReviewStore",
    "JsonFileRatingReviewStore",
    "RatingReviewStore",
    "RecordExistsError",
    "RecordNotFoundError",
    "StoreError",
    "WriteMode",
]
