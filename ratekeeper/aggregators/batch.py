"""
Batch Retriever.

Joins lists of game ids against the store, chunking large requests.
"""

import logging
from typing import List, Sequence

import config.settings as settings
from ratekeeper.models.user_data import GameWithUserData
from ratekeeper.store.base import RatingReviewStore
from ratekeeper.validation.validator import validate_game_id

logger = logging.getLogger(__name__)


class BatchRetriever:
    """
    Resolves game ids to GameWithUserData, preserving input order.

    Every id yields an entry, including ids with no rating or review and
    repeated ids. Requests above batch_size are split into chunks, and the
    first failing chunk aborts the whole request.
    """

    def __init__(self, store: RatingReviewStore, batch_size: int = settings.BATCH_SIZE):
        if batch_size <= 0:
            raise ValueError(f"Batch size must be positive, got: {batch_size}")
        self.store = store
        self.batch_size = batch_size

    async def get_games_with_user_data(self, game_ids: Sequence[int]) -> List[GameWithUserData]:
        """
        Args:
            game_ids: Ids to resolve

        Returns:
            One GameWithUserData per input id, in input order

        Raises:
            UserRatingReviewError: INVALID_GAME_ID for the first non-positive id
        """
        game_ids = list(game_ids)
        if not game_ids:
            return []

        for game_id in game_ids:
            validate_game_id(game_id)

        if len(game_ids) <= self.batch_size:
            return await self._resolve_chunk(game_ids)

        results: List[GameWithUserData] = []
        chunk_count = (len(game_ids) + self.batch_size - 1) // self.batch_size
        for index, start in enumerate(range(0, len(game_ids), self.batch_size), 1):
            chunk = game_ids[start:start + self.batch_size]
            logger.debug(f"Resolving chunk {index}/{chunk_count} ({len(chunk)} ids)")
            results.extend(await self._resolve_chunk(chunk))

        logger.info(f"Resolved {len(results)} games in {chunk_count} chunks")
        return results

    async def _resolve_chunk(self, chunk: List[int]) -> List[GameWithUserData]:
        ratings = await self.store.get_ratings(chunk)
        reviews = await self.store.get_reviews(chunk)
        return [
            GameWithUserData(
                game_id=game_id,
                user_rating=ratings.get(game_id),
                user_review=reviews.get(game_id)
            )
            for game_id in chunk
        ]


# Design Rationale and Trade-offs:
#
# 1. Why validate every id before the first chunk?
#    - An invalid id fails the call without any store access
#
# 2. Why stop at the first failing chunk?
#    - Callers get all results or an error, never a partial list
#    - Trade-off: Earlier chunks' work is discarded
