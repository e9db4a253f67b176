"""
Rating statistics model.

Aggregated view over every rating and review in the store.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

import config.settings as settings

RATING_VALUES = tuple(range(settings.MIN_RATING, settings.MAX_RATING + 1))


def empty_distribution() -> Dict[int, int]:
    """Distribution with every rating value present and zero counts."""
    return {value: 0 for value in RATING_VALUES}


@dataclass(frozen=True)
class UserRatingStats:
    """
    Totals, mean and 1-5 histogram of the user's ratings.
    Recomputed from the store on every query.
    """
    total_rated_games: int
    total_reviews: int
    average_rating: float
    rating_distribution: Dict[int, int] = field(default_factory=empty_distribution)

    def __post_init__(self):
        if self.total_rated_games < 0:
            raise ValueError(
                f"Total rated games must be non-negative, got: {self.total_rated_games}"
            )
        if self.total_reviews < 0:
            raise ValueError(f"Total reviews must be non-negative, got: {self.total_reviews}")

        if self.total_rated_games == 0:
            if self.average_rating != 0.0:
                raise ValueError(
                    f"Average rating must be 0.0 when no games are rated, got: {self.average_rating}"
                )
        elif not (settings.MIN_RATING <= self.average_rating <= settings.MAX_RATING):
            raise ValueError(
                f"Average rating must be between {settings.MIN_RATING} and "
                f"{settings.MAX_RATING} when games are rated, got: {self.average_rating}"
            )

        unknown_keys = set(self.rating_distribution) - set(RATING_VALUES)
        if unknown_keys:
            raise ValueError(f"Rating distribution keys must be 1-5, got: {sorted(unknown_keys)}")
        if any(count < 0 for count in self.rating_distribution.values()):
            raise ValueError("Rating distribution counts must be non-negative")
        if sum(self.rating_distribution.values()) != self.total_rated_games:
            raise ValueError(
                f"Rating distribution sum ({sum(self.rating_distribution.values())}) "
                f"must equal total rated games ({self.total_rated_games})"
            )

    def percentage_for_rating(self, rating: int) -> float:
        """Share of rated games (0-100) that received the given rating."""
        if rating not in RATING_VALUES:
            raise ValueError(f"Rating must be between 1 and 5, got: {rating}")
        if self.total_rated_games == 0:
            return 0.0
        return self.rating_distribution.get(rating, 0) * 100.0 / self.total_rated_games

    def most_common_rating(self) -> Optional[int]:
        """Most frequent rating value; lowest value wins ties. None if nothing is rated."""
        if self.total_rated_games == 0:
            return None
        return max(RATING_VALUES, key=lambda value: (self.rating_distribution.get(value, 0), -value))

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "total_rated_games": self.total_rated_games,
            "total_reviews": self.total_reviews,
            "average_rating": self.average_rating,
            "rating_distribution": {str(k): v for k, v in self.rating_distribution.items()}
        }


# Design Rationale and Trade-offs:
#
# 1. Why check invariants on construction?
#    - Distribution sum and average range mismatches point at aggregation bugs
#    - Trade-off: Hand-built stats in tests must be internally consistent
#
# 2. Why string keys in to_dict()?
#    - JSON object keys are strings
#    - Trade-off: Consumers convert back to int
