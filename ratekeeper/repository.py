"""
User Rating/Review Repository.

Use-case facade over the store: one coroutine per operation, each
validating input, delegating to the store or an aggregator, and turning
every failure into a UserRatingReviewError.
"""

import functools
import logging
from typing import Any, List, Optional, Sequence

import config.settings as settings
from ratekeeper.aggregators.activity import ActivityMerger, GameInfoResolver
from ratekeeper.aggregators.batch import BatchRetriever
from ratekeeper.aggregators.statistics import StatisticsAggregator
from ratekeeper.models.activity import RecentActivity
from ratekeeper.models.errors import ErrorKind, UserRatingReviewError
from ratekeeper.models.stats import UserRatingStats
from ratekeeper.models.user_data import GameWithUserData, UserRating, UserReview
from ratekeeper.store.base import (
    RatingReviewStore,
    RecordExistsError,
    RecordNotFoundError,
    StoreError,
    WriteMode,
)
from ratekeeper.utils.clock import Clock, now_millis
from ratekeeper.validation.sanitizer import find_unsafe_content, sanitize_review_text
from ratekeeper.validation.validator import (
    validate_game_id,
    validate_limit,
    validate_rating,
    validate_review_text,
)

logger = logging.getLogger(__name__)

_CONFLICT_KINDS = {
    "Rating": ErrorKind.RATING_ALREADY_EXISTS,
    "Review": ErrorKind.REVIEW_ALREADY_EXISTS,
}
_NOT_FOUND_KINDS = {
    "Rating": ErrorKind.RATING_NOT_FOUND,
    "Review": ErrorKind.REVIEW_NOT_FOUND,
}


def _normalize_errors(operation):
    """Re-raise any failure of a repository coroutine as UserRatingReviewError."""

    @functools.wraps(operation)
    async def wrapper(self, *args, **kwargs):
        try:
            return await operation(self, *args, **kwargs)
        except UserRatingReviewError:
            raise
        except RecordExistsError as e:
            raise UserRatingReviewError(
                _CONFLICT_KINDS[e.record_type], cause=e, game_id=e.game_id
            ) from e
        except RecordNotFoundError as e:
            raise UserRatingReviewError(
                _NOT_FOUND_KINDS[e.record_type], cause=e, game_id=e.game_id
            ) from e
        except StoreError as e:
            logger.error(f"{operation.__name__} failed with store error: {e}", exc_info=True)
            raise UserRatingReviewError(ErrorKind.DATABASE_ERROR, cause=e) from e
        except ConnectionError as e:
            logger.error(f"{operation.__name__} failed with network error: {e}", exc_info=True)
            raise UserRatingReviewError(ErrorKind.NETWORK_ERROR, cause=e) from e
        except Exception as e:
            logger.error(f"{operation.__name__} failed unexpectedly: {e}", exc_info=True)
            raise UserRatingReviewError.unknown(e) from e

    return wrapper


class UserRatingReviewRepository:
    """
    Entry point for everything the presentation layer does with ratings
    and reviews.

    Validation always runs before the store is touched, so invalid input
    never causes a partial write. Reads of a missing record return None.
    """

    def __init__(
        self,
        store: RatingReviewStore,
        clock: Clock = now_millis,
        game_info_resolver: Optional[GameInfoResolver] = None,
        batch_size: int = settings.BATCH_SIZE,
        sanitize_reviews: bool = settings.SANITIZE_REVIEW_TEXT,
        reject_unsafe_content: bool = settings.REJECT_UNSAFE_REVIEW_CONTENT
    ):
        """
        Initialize repository.

        Args:
            store: Rating/review store backend
            clock: Returns the current time in epoch milliseconds
            game_info_resolver: Catalog lookup for activity feed names/images
            batch_size: Max ids per store round-trip in batch retrieval
            sanitize_reviews: Clean review text before validating it
            reject_unsafe_content: Reject HTML/script-like review text
        """
        self.store = store
        self.clock = clock
        self.sanitize_reviews = sanitize_reviews
        self.reject_unsafe_content = reject_unsafe_content

        self.statistics = StatisticsAggregator(store)
        self.activity_merger = ActivityMerger(store, game_info_resolver=game_info_resolver)
        self.batch_retriever = BatchRetriever(store, batch_size=batch_size)

        logger.info(
            f"Initialized UserRatingReviewRepository with store={type(store).__name__}, "
            f"batch_size={batch_size}, sanitize_reviews={sanitize_reviews}"
        )

    # Ratings

    @_normalize_errors
    async def set_user_rating(self, game_id: int, rating: int) -> None:
        """Create or update the rating for a game."""
        await self._write_rating(game_id, rating, WriteMode.UPSERT)

    @_normalize_errors
    async def create_user_rating(self, game_id: int, rating: int) -> None:
        """Create a rating; RATING_ALREADY_EXISTS if the game is already rated."""
        await self._write_rating(game_id, rating, WriteMode.CREATE)

    @_normalize_errors
    async def update_user_rating(self, game_id: int, rating: int) -> None:
        """Change an existing rating; RATING_NOT_FOUND if the game is not rated."""
        await self._write_rating(game_id, rating, WriteMode.UPDATE)

    @_normalize_errors
    async def get_user_rating(self, game_id: int) -> Optional[UserRating]:
        validate_game_id(game_id)
        return await self.store.get_rating(game_id)

    @_normalize_errors
    async def delete_user_rating(self, game_id: int) -> None:
        """Delete the rating; a no-op if the game is not rated."""
        validate_game_id(game_id)
        if await self.store.delete_rating(game_id):
            logger.info(f"Deleted rating for game {game_id}")

    @_normalize_errors
    async def get_all_user_ratings(self) -> List[UserRating]:
        """All ratings, most recently updated first."""
        ratings = await self.store.list_ratings()
        return sorted(ratings, key=lambda r: (-r.updated_at, r.game_id))

    # Reviews

    @_normalize_errors
    async def set_user_review(self, game_id: int, review_text: str) -> None:
        """Create or update the review for a game."""
        await self._write_review(game_id, review_text, WriteMode.UPSERT)

    @_normalize_errors
    async def create_user_review(self, game_id: int, review_text: str) -> None:
        """Create a review; REVIEW_ALREADY_EXISTS if the game is already reviewed."""
        await self._write_review(game_id, review_text, WriteMode.CREATE)

    @_normalize_errors
    async def update_user_review(self, game_id: int, review_text: str) -> None:
        """Change an existing review; REVIEW_NOT_FOUND if there is none."""
        await self._write_review(game_id, review_text, WriteMode.UPDATE)

    @_normalize_errors
    async def get_user_review(self, game_id: int) -> Optional[UserReview]:
        validate_game_id(game_id)
        return await self.store.get_review(game_id)

    @_normalize_errors
    async def delete_user_review(self, game_id: int) -> None:
        """Delete the review; a no-op if there is none."""
        validate_game_id(game_id)
        if await self.store.delete_review(game_id):
            logger.info(f"Deleted review for game {game_id}")

    @_normalize_errors
    async def get_all_user_reviews(self) -> List[UserReview]:
        """All reviews, most recently updated first."""
        reviews = await self.store.list_reviews()
        return sorted(reviews, key=lambda r: (-r.updated_at, r.game_id))

    # Aggregates

    @_normalize_errors
    async def get_user_rating_stats(self) -> UserRatingStats:
        return await self.statistics.compute()

    @_normalize_errors
    async def get_game_with_user_data(self, game_id: int) -> GameWithUserData:
        """
        Rating and review for one game.
        Always returns an entry; both fields are None for an untouched game.
        """
        validate_game_id(game_id)
        return GameWithUserData(
            game_id=game_id,
            user_rating=await self.store.get_rating(game_id),
            user_review=await self.store.get_review(game_id)
        )

    @_normalize_errors
    async def get_games_with_user_data(self, game_ids: Sequence[int]) -> List[GameWithUserData]:
        return await self.batch_retriever.get_games_with_user_data(game_ids)

    @_normalize_errors
    async def get_recent_user_activity(
        self,
        limit: int = settings.DEFAULT_ACTIVITY_LIMIT
    ) -> List[RecentActivity]:
        """
        Newest ratings and reviews as one feed.

        Args:
            limit: Maximum entries; must be positive, values above
                MAX_ACTIVITY_LIMIT are clamped
        """
        limit = validate_limit(limit)
        return await self.activity_merger.recent_activity(limit)

    # Helpers

    async def _write_rating(self, game_id: Any, rating: Any, mode: WriteMode) -> None:
        validate_game_id(game_id)
        validate_rating(rating)

        record = await self.store.put_rating(game_id, rating, self.clock(), mode=mode)
        logger.info(f"Saved rating {record.rating} for game {game_id} ({mode.value})")

    async def _write_review(self, game_id: Any, review_text: Any, mode: WriteMode) -> None:
        validate_game_id(game_id)
        review_text = self._prepare_review_text(review_text)

        await self.store.put_review(game_id, review_text, self.clock(), mode=mode)
        logger.info(f"Saved review for game {game_id} ({len(review_text)} chars, {mode.value})")

    def _prepare_review_text(self, review_text: Any) -> str:
        if self.sanitize_reviews and isinstance(review_text, str):
            review_text = sanitize_review_text(review_text)

        validate_review_text(review_text)

        if self.reject_unsafe_content:
            fragment = find_unsafe_content(review_text)
            if fragment:
                raise UserRatingReviewError.invalid_review_content(
                    f"Contains inappropriate content: {fragment!r}"
                )
        return review_text


# Design Rationale and Trade-offs:
#
# 1. Why a decorator for error normalization?
#    - Every public operation maps failures the same way
#    - Trade-off: Helpers called from decorated methods are not wrapped themselves
#
# 2. Why validate before touching the store?
#    - Invalid input never causes a partial write
#
# 3. Why an injected clock?
#    - Tests control timestamps exactly
#    - Trade-off: Callers must pass epoch milliseconds
