"""
In-memory rating/review store.

Two dicts keyed by game_id, with one asyncio.Lock per (record kind, game_id)
so writes to different games never wait on each other.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, TypeVar

from ratekeeper.models.user_data import UserRating, UserReview
from ratekeeper.store.base import (
    RatingReviewStore,
    RecordExistsError,
    RecordNotFoundError,
    WriteMode,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", UserRating, UserReview)


class InMemoryRatingReviewStore(RatingReviewStore):
    """
    Process-local store.

    Records are immutable; a write replaces the dict entry, so readers
    always see either the old or the new record, never a mix.

    Per-game locks make each read-modify-write one critical section.
    Critical sections never suspend, so no task is ever queued on a held
    lock; delete and clear rely on that when they drop locks, which keeps
    the lock tables bounded by the live records.
    """

    def __init__(self):
        self._ratings: Dict[int, UserRating] = {}
        self._reviews: Dict[int, UserReview] = {}
        self._rating_locks: Dict[int, asyncio.Lock] = {}
        self._review_locks: Dict[int, asyncio.Lock] = {}

    # Ratings

    async def get_rating(self, game_id: int) -> Optional[UserRating]:
        return self._ratings.get(game_id)

    async def get_ratings(self, game_ids: Iterable[int]) -> Dict[int, UserRating]:
        return _select(self._ratings, game_ids)

    async def list_ratings(self) -> List[UserRating]:
        return list(self._ratings.values())

    async def put_rating(
        self,
        game_id: int,
        rating: int,
        timestamp: int,
        mode: WriteMode = WriteMode.UPSERT
    ) -> UserRating:
        async with _lock_for(self._rating_locks, game_id):
            existing = self._ratings.get(game_id)
            _check_mode(mode, existing, "Rating", game_id)

            if existing is None:
                record = UserRating(
                    game_id=game_id,
                    rating=rating,
                    created_at=timestamp,
                    updated_at=timestamp
                )
            else:
                record = replace(
                    existing,
                    rating=rating,
                    updated_at=max(timestamp, existing.updated_at)
                )

            self._commit(self._ratings, game_id, record, existing)
            logger.debug(f"Stored rating {rating} for game {game_id}")
            return record

    async def delete_rating(self, game_id: int) -> bool:
        async with _lock_for(self._rating_locks, game_id):
            try:
                existing = self._ratings.get(game_id)
                if existing is None:
                    return False
                self._commit(self._ratings, game_id, None, existing)
                return True
            finally:
                self._rating_locks.pop(game_id, None)

    # Reviews

    async def get_review(self, game_id: int) -> Optional[UserReview]:
        return self._reviews.get(game_id)

    async def get_reviews(self, game_ids: Iterable[int]) -> Dict[int, UserReview]:
        return _select(self._reviews, game_ids)

    async def list_reviews(self) -> List[UserReview]:
        return list(self._reviews.values())

    async def put_review(
        self,
        game_id: int,
        review_text: str,
        timestamp: int,
        mode: WriteMode = WriteMode.UPSERT
    ) -> UserReview:
        async with _lock_for(self._review_locks, game_id):
            existing = self._reviews.get(game_id)
            _check_mode(mode, existing, "Review", game_id)

            if existing is None:
                record = UserReview(
                    game_id=game_id,
                    review_text=review_text,
                    created_at=timestamp,
                    updated_at=timestamp
                )
            else:
                record = replace(
                    existing,
                    review_text=review_text,
                    updated_at=max(timestamp, existing.updated_at)
                )

            self._commit(self._reviews, game_id, record, existing)
            logger.debug(f"Stored review for game {game_id} ({len(review_text)} chars)")
            return record

    async def delete_review(self, game_id: int) -> bool:
        async with _lock_for(self._review_locks, game_id):
            try:
                existing = self._reviews.get(game_id)
                if existing is None:
                    return False
                self._commit(self._reviews, game_id, None, existing)
                return True
            finally:
                self._review_locks.pop(game_id, None)

    async def clear(self) -> None:
        ratings, reviews = dict(self._ratings), dict(self._reviews)
        self._ratings.clear()
        self._reviews.clear()
        try:
            self._persist()
        except Exception:
            self._ratings.update(ratings)
            self._reviews.update(reviews)
            raise
        self._rating_locks.clear()
        self._review_locks.clear()
        logger.info(f"Cleared {len(ratings)} ratings and {len(reviews)} reviews")

    def size(self) -> tuple:
        """(number of ratings, number of reviews)."""
        return len(self._ratings), len(self._reviews)

    def _commit(
        self,
        records: Dict[int, RecordT],
        game_id: int,
        record: Optional[RecordT],
        previous: Optional[RecordT]
    ) -> None:
        """Apply a write, persist it, and undo it if persisting fails."""
        if record is None:
            records.pop(game_id, None)
        else:
            records[game_id] = record

        try:
            self._persist()
        except Exception:
            if previous is None:
                records.pop(game_id, None)
            else:
                records[game_id] = previous
            raise

    def _persist(self) -> None:
        """Hook for durable subclasses; called after every mutation."""


def _lock_for(locks: Dict[int, asyncio.Lock], game_id: int) -> asyncio.Lock:
    lock = locks.get(game_id)
    if lock is None:
        lock = locks[game_id] = asyncio.Lock()
    return lock


def _select(records: Dict[int, RecordT], game_ids: Iterable[int]) -> Dict[int, RecordT]:
    selected = {}
    for game_id in game_ids:
        record = records.get(game_id)
        if record is not None:
            selected[game_id] = record
    return selected


def _check_mode(mode: WriteMode, existing, record_type: str, game_id: int) -> None:
    if mode is WriteMode.CREATE and existing is not None:
        raise RecordExistsError(record_type, game_id)
    if mode is WriteMode.UPDATE and existing is None:
        raise RecordNotFoundError(record_type, game_id)


# Design Rationale and Trade-offs:
#
# 1. Why a lock per game instead of one global lock?
#    - Writes to different games never wait on each other
#    - Trade-off: Lock tables need pruning on delete and clear
#
# 2. Why roll back in memory when _persist fails?
#    - Memory and disk must agree after an error
#    - Trade-off: A failed write is invisible to readers, even briefly
#
# 3. Why max(timestamp, previous.updated_at)?
#    - Keeps updated_at >= created_at if the clock steps backwards
#    - Trade-off: Clock skew shows up as an unchanged updated_at
