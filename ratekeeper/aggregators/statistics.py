"""
Statistics Aggregator.

Computes rating totals, mean and distribution from the current store
contents.
"""

import logging
from collections import Counter

from ratekeeper.models.stats import RATING_VALUES, UserRatingStats
from ratekeeper.store.base import RatingReviewStore

logger = logging.getLogger(__name__)


class StatisticsAggregator:
    """
    Recomputes UserRatingStats with a full scan on every call.
    No counters are cached between calls.
    """

    def __init__(self, store: RatingReviewStore):
        self.store = store

    async def compute(self) -> UserRatingStats:
        """
        Aggregate all ratings and reviews.

        Returns:
            UserRatingStats; average_rating is 0.0 when nothing is rated
        """
        ratings = await self.store.list_ratings()
        reviews = await self.store.list_reviews()

        values = [r.rating for r in ratings]
        total_rated_games = len(values)
        average_rating = sum(values) / total_rated_games if total_rated_games else 0.0

        value_counts = Counter(values)
        distribution = {value: value_counts.get(value, 0) for value in RATING_VALUES}

        stats = UserRatingStats(
            total_rated_games=total_rated_games,
            total_reviews=len(reviews),
            average_rating=average_rating,
            rating_distribution=distribution
        )

        logger.debug(
            f"Computed stats: {total_rated_games} rated, {len(reviews)} reviews, "
            f"avg={average_rating:.2f}"
        )
        return stats


# Design Rationale and Trade-offs:
#
# 1. Why a full scan on every call instead of running counters?
#    - No counter can drift out of sync with the store
#    - Trade-off: O(n) per query, fine for one user's library
