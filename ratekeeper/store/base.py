"""
Store contract for ratings and reviews.

Both maps are keyed by game_id. Stores do no input validation beyond what
the record models enforce; callers validate first.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ratekeeper.models.user_data import UserRating, UserReview


class WriteMode(Enum):
    UPSERT = "upsert"  # Create or update
    CREATE = "create"  # Fail if a record exists
    UPDATE = "update"  # Fail if no record exists


class StoreError(Exception):
    """Base exception for store failures."""


class RecordExistsError(StoreError):
    """A CREATE write hit an existing record."""

    def __init__(self, record_type: str, game_id: int):
        self.record_type = record_type
        self.game_id = game_id
        super().__init__(f"{record_type} already exists for game {game_id}")


class RecordNotFoundError(StoreError):
    """An UPDATE write found no record."""

    def __init__(self, record_type: str, game_id: int):
        self.record_type = record_type
        self.game_id = game_id
        super().__init__(f"{record_type} not found for game {game_id}")


class RatingReviewStore(ABC):
    """
    Abstract key-value store for UserRating and UserReview records.

    Writes for one game_id are atomic read-modify-write operations:
    an update keeps the record's created_at and sets updated_at.
    """

    # Ratings

    @abstractmethod
    async def get_rating(self, game_id: int) -> Optional[UserRating]:
        """Return the rating for game_id, or None."""

    @abstractmethod
    async def get_ratings(self, game_ids: Iterable[int]) -> Dict[int, UserRating]:
        """Return the existing ratings among game_ids, keyed by id."""

    @abstractmethod
    async def list_ratings(self) -> List[UserRating]:
        """Snapshot of all ratings, in no particular order."""

    @abstractmethod
    async def put_rating(
        self,
        game_id: int,
        rating: int,
        timestamp: int,
        mode: WriteMode = WriteMode.UPSERT
    ) -> UserRating:
        """
        Write a rating.

        Args:
            game_id: Target game
            rating: Rating value (already validated)
            timestamp: Write time in epoch milliseconds
            mode: Upsert, create-only or update-only

        Returns:
            The stored record

        Raises:
            RecordExistsError: mode is CREATE and a rating exists
            RecordNotFoundError: mode is UPDATE and no rating exists
        """

    @abstractmethod
    async def delete_rating(self, game_id: int) -> bool:
        """Delete the rating. Returns False if there was none."""

    # Reviews

    @abstractmethod
    async def get_review(self, game_id: int) -> Optional[UserReview]:
        """Return the review for game_id, or None."""

    @abstractmethod
    async def get_reviews(self, game_ids: Iterable[int]) -> Dict[int, UserReview]:
        """Return the existing reviews among game_ids, keyed by id."""

    @abstractmethod
    async def list_reviews(self) -> List[UserReview]:
        """Snapshot of all reviews, in no particular order."""

    @abstractmethod
    async def put_review(
        self,
        game_id: int,
        review_text: str,
        timestamp: int,
        mode: WriteMode = WriteMode.UPSERT
    ) -> UserReview:
        """Write a review. Same semantics as put_rating."""

    @abstractmethod
    async def delete_review(self, game_id: int) -> bool:
        """Delete the review. Returns False if there was none."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every rating and review."""


# Design Rationale and Trade-offs:
#
# 1. Why an abstract store instead of using dicts directly?
#    - The repository only sees this contract, so backends swap freely
#    - Trade-off: Extra layer between the facade and the data
#
# 2. Why WriteMode instead of separate create/update methods?
#    - Existence check and write happen under the same per-game lock
#    - Trade-off: One method covers three behaviours
#
# 3. Why store-level exceptions separate from UserRatingReviewError?
#    - Stores know nothing about user-facing messages
#    - The repository maps them to error kinds
