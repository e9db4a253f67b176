"""
Recent activity model.

One entry of the merged rating/review activity feed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ActivityType(Enum):
    RATING = "rating"
    REVIEW = "review"


@dataclass(frozen=True)
class RecentActivity:
    """
    A rating or review event, enriched with display data for the game.
    Ephemeral: produced only by the activity merger.
    """
    activity_type: ActivityType
    game_id: int
    game_name: str  # Resolved by the catalog, or a placeholder
    game_image: str
    activity_date: int  # updated_at of the underlying record (epoch ms)
    rating: Optional[int] = None  # Set for RATING entries
    review_text: Optional[str] = None  # Preview for REVIEW entries

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "activity_type": self.activity_type.value,
            "game_id": self.game_id,
            "game_name": self.game_name,
            "game_image": self.game_image,
            "rating": self.rating,
            "review_text": self.review_text,
            "activity_date": self.activity_date
        }


# Design Rationale and Trade-offs:
#
# 1. Why one class with optional rating/review_text instead of two classes?
#    - The feed is a single sorted list
#    - activity_type tells consumers which field is set
#    - Trade-off: Both optional fields exist on every entry
