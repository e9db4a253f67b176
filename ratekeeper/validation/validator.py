"""
Input validation for ratings and reviews.

Each validate_* function returns normally for valid input and raises
UserRatingReviewError with the matching kind otherwise.
"""

from typing import Any, Optional

import config.settings as settings
from ratekeeper.models.errors import ErrorKind, UserRatingReviewError
from ratekeeper.utils.text import utf16_length


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_game_id(game_id: Any) -> None:
    """Game ids are opaque positive integers."""
    if not _is_int(game_id) or game_id <= 0:
        raise UserRatingReviewError.invalid_game_id(game_id)


def validate_rating(rating: Any) -> None:
    """Ratings are whole stars from MIN_RATING to MAX_RATING inclusive."""
    if not _is_int(rating) or not (settings.MIN_RATING <= rating <= settings.MAX_RATING):
        raise UserRatingReviewError.invalid_rating(rating)


def validate_review_text(review_text: Any) -> None:
    """
    Validate review text length.

    Args:
        review_text: Review body; length is counted in UTF-16 code units

    Raises:
        UserRatingReviewError: EMPTY_REVIEW for empty or whitespace-only text,
            REVIEW_TOO_LONG above MAX_REVIEW_LENGTH (the limit itself is valid),
            VALIDATION_ERROR if the value is not a string
    """
    if not isinstance(review_text, str):
        raise UserRatingReviewError.validation_error(
            f"Review text must be a string, got: {type(review_text).__name__}"
        )

    length = utf16_length(review_text)
    if length < settings.MIN_REVIEW_LENGTH or not review_text.strip():
        raise UserRatingReviewError.empty_review()
    if length > settings.MAX_REVIEW_LENGTH:
        raise UserRatingReviewError.review_too_long(length, settings.MAX_REVIEW_LENGTH)


def validate_limit(limit: Any, max_limit: int = settings.MAX_ACTIVITY_LIMIT) -> int:
    """
    Validate an activity feed limit.

    Returns:
        The limit, clamped to max_limit

    Raises:
        UserRatingReviewError: VALIDATION_ERROR unless limit is a positive integer
    """
    if not _is_int(limit) or limit <= 0:
        raise UserRatingReviewError.validation_error(f"Limit must be positive, got: {limit}")
    return min(limit, max_limit)


def remaining_characters(review_text: str) -> int:
    """Characters left before the review hits MAX_REVIEW_LENGTH."""
    return max(settings.MAX_REVIEW_LENGTH - utf16_length(review_text), 0)


def is_approaching_limit(
    review_text: str,
    warning_threshold: float = settings.APPROACHING_LIMIT_THRESHOLD
) -> bool:
    return utf16_length(review_text) >= settings.MAX_REVIEW_LENGTH * warning_threshold


def suggest_correction(error: UserRatingReviewError) -> Optional[str]:
    """Input-specific hint for validation errors, None for other kinds."""
    if error.kind is ErrorKind.INVALID_RATING:
        return f"Please select a rating between {settings.MIN_RATING} and {settings.MAX_RATING} stars"
    if error.kind is ErrorKind.EMPTY_REVIEW:
        return "Please write something in your review"
    if error.kind is ErrorKind.REVIEW_TOO_LONG:
        return (
            f"Please shorten your review to {error.details['max_length']} characters or less "
            f"(currently {error.details['length']} characters)"
        )
    if error.kind is ErrorKind.INVALID_REVIEW_CONTENT:
        return "Please remove any HTML tags or special characters from your review"
    if error.kind in (ErrorKind.INVALID_GAME_ID, ErrorKind.GAME_NOT_FOUND):
        return "Please select a valid game to rate or review"
    return None


# Design Rationale and Trade-offs:
#
# 1. Why raise instead of returning a validation result?
#    - The facade re-raises UserRatingReviewError unchanged
#    - Trade-off: Only the first problem is reported
#
# 2. Why reject bool for ids and ratings?
#    - bool is an int subclass; True would pass as rating 1
#
# 3. Why clamp large feed limits but reject non-positive ones?
#    - A limit above the maximum still has a sensible answer
#    - A non-positive limit is a caller bug
