"""
Activity Merger.

Combines the most recently updated ratings and reviews into one
time-ordered, size-bounded feed.
"""

import logging
from typing import Callable, List, Optional, Tuple

import config.settings as settings
from ratekeeper.models.activity import ActivityType, RecentActivity
from ratekeeper.store.base import RatingReviewStore
from ratekeeper.utils.text import truncate_utf16

logger = logging.getLogger(__name__)

# game_id -> (game_name, game_image)
GameInfoResolver = Callable[[int], Tuple[str, str]]


def placeholder_game_info(game_id: int) -> Tuple[str, str]:
    """Stand-in catalog data for when no catalog resolver is configured."""
    return (
        settings.PLACEHOLDER_GAME_NAME.format(game_id=game_id),
        settings.PLACEHOLDER_GAME_IMAGE.format(game_id=game_id)
    )


def _most_recent_first(record) -> Tuple[int, int]:
    return (-record.updated_at, record.game_id)


class ActivityMerger:
    """
    Builds the recent activity feed.

    Takes up to limit // 2 of the newest ratings and limit // 2 of the
    newest reviews, merges them newest first and cuts to limit.
    Equal dates keep ratings ahead of reviews; within a list, equal dates
    order by game_id.
    """

    def __init__(
        self,
        store: RatingReviewStore,
        game_info_resolver: Optional[GameInfoResolver] = None,
        preview_length: int = settings.REVIEW_PREVIEW_LENGTH
    ):
        """
        Initialize activity merger.

        Args:
            store: Store to read ratings and reviews from
            game_info_resolver: Maps game_id to (name, image); placeholders if None
            preview_length: UTF-16 code units of review text kept in the feed
        """
        self.store = store
        self.game_info_resolver = game_info_resolver or placeholder_game_info
        self.preview_length = preview_length

    async def recent_activity(self, limit: int) -> List[RecentActivity]:
        """
        Args:
            limit: Maximum feed length (already validated, > 0)

        Returns:
            Activities sorted by activity_date descending, at most limit long
        """
        per_type = limit // 2

        ratings = sorted(await self.store.list_ratings(), key=_most_recent_first)[:per_type]
        reviews = sorted(await self.store.list_reviews(), key=_most_recent_first)[:per_type]

        activities = []
        for rating in ratings:
            game_name, game_image = self.game_info_resolver(rating.game_id)
            activities.append(RecentActivity(
                activity_type=ActivityType.RATING,
                game_id=rating.game_id,
                game_name=game_name,
                game_image=game_image,
                activity_date=rating.updated_at,
                rating=rating.rating,
                review_text=None
            ))

        for review in reviews:
            game_name, game_image = self.game_info_resolver(review.game_id)
            activities.append(RecentActivity(
                activity_type=ActivityType.REVIEW,
                game_id=review.game_id,
                game_name=game_name,
                game_image=game_image,
                activity_date=review.updated_at,
                rating=None,
                review_text=truncate_utf16(review.review_text, self.preview_length)
            ))

        # sorted() is stable, so ties keep ratings before reviews
        activities = sorted(activities, key=lambda a: a.activity_date, reverse=True)[:limit]

        logger.debug(
            f"Merged {len(ratings)} ratings and {len(reviews)} reviews "
            f"into {len(activities)} activities (limit={limit})"
        )
        return activities


# Design Rationale and Trade-offs:
#
# 1. Why limit // 2 of each type?
#    - Neither ratings nor reviews can crowd the other out of the feed
#    - Trade-off: A limit of 1 yields an empty feed
#
# 2. Why truncate previews here rather than in presentation?
#    - Feed consumers get a bounded payload
#    - Trade-off: Full text needs a separate get_user_review call
#
# 3. Why an injectable game info resolver?
#    - The store has no catalog; placeholders keep the feed usable without one
