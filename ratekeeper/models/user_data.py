"""
User data models.

A user's personal rating and review for a game, plus the combined
per-game view assembled on demand from both.
"""

from dataclasses import dataclass
from typing import Optional

import config.settings as settings
from ratekeeper.utils.text import utf16_length


def _validate_timestamps(created_at: int, updated_at: int) -> None:
    if created_at <= 0:
        raise ValueError(f"Created timestamp must be positive, got: {created_at}")
    if updated_at < created_at:
        raise ValueError(
            f"Updated timestamp ({updated_at}) must be >= created timestamp ({created_at})"
        )


@dataclass(frozen=True)
class UserRating:
    """
    A user's rating for one game.
    At most one exists per game_id; updates replace the instance.
    """
    game_id: int  # Opaque catalog id, never checked against the catalog
    rating: int  # 1-5 stars
    created_at: int  # Epoch milliseconds, fixed at creation
    updated_at: int  # Epoch milliseconds, refreshed on every write

    def __post_init__(self):
        if self.game_id <= 0:
            raise ValueError(f"Game ID must be positive, got: {self.game_id}")
        if not (settings.MIN_RATING <= self.rating <= settings.MAX_RATING):
            raise ValueError(
                f"Invalid rating: {self.rating}. "
                f"Must be {settings.MIN_RATING}-{settings.MAX_RATING}"
            )
        _validate_timestamps(self.created_at, self.updated_at)

    @classmethod
    def from_dict(cls, data: dict) -> "UserRating":
        """Create UserRating from JSON dict."""
        return cls(
            game_id=data["game_id"],
            rating=data["rating"],
            created_at=data["created_at"],
            updated_at=data["updated_at"]
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "game_id": self.game_id,
            "rating": self.rating,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }


@dataclass(frozen=True)
class UserReview:
    """
    A user's free-text review for one game.
    At most one exists per game_id; updates replace the instance.
    """
    game_id: int
    review_text: str  # 1-1000 UTF-16 code units
    created_at: int
    updated_at: int

    def __post_init__(self):
        if self.game_id <= 0:
            raise ValueError(f"Game ID must be positive, got: {self.game_id}")
        if not self.review_text.strip():
            raise ValueError("Review text cannot be blank")
        length = utf16_length(self.review_text)
        if length > settings.MAX_REVIEW_LENGTH:
            raise ValueError(
                f"Review text must be at most {settings.MAX_REVIEW_LENGTH} characters, "
                f"got: {length}"
            )
        _validate_timestamps(self.created_at, self.updated_at)

    @classmethod
    def from_dict(cls, data: dict) -> "UserReview":
        """Create UserReview from JSON dict."""
        return cls(
            game_id=data["game_id"],
            review_text=data["review_text"],
            created_at=data["created_at"],
            updated_at=data["updated_at"]
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "game_id": self.game_id,
            "review_text": self.review_text,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }


@dataclass(frozen=True)
class GameWithUserData:
    """
    A game id joined with whatever rating and review the user has for it.
    Derived on demand; never persisted.
    """
    game_id: int
    user_rating: Optional[UserRating] = None
    user_review: Optional[UserReview] = None

    @property
    def has_user_rating(self) -> bool:
        return self.user_rating is not None

    @property
    def has_user_review(self) -> bool:
        return self.user_review is not None

    @property
    def has_user_data(self) -> bool:
        """True if the user rated or reviewed this game."""
        return self.has_user_rating or self.has_user_review


# Design Rationale and Trade-offs:
#
# 1. Why frozen dataclasses?
#    - Updates replace the stored instance, so readers never see a half-written record
#    - Trade-off: Every update allocates a new object
#
# 2. Why validate in __post_init__ as well as in the validator?
#    - Records loaded from disk bypass the repository
#    - Trade-off: Raises ValueError here, UserRatingReviewError at the facade
#
# 3. Why is GameWithUserData never persisted?
#    - It is a join over two maps and would go stale on every write
