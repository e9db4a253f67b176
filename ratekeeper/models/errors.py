"""
Error taxonomy for rating and review operations.

Every failure surfaced by the repository is a UserRatingReviewError tagged
with an ErrorKind. Per-kind behaviour (messages, retryability, suggested
action) lives in ERROR_CATALOG.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import config.settings as settings


class ErrorCategory(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INFRASTRUCTURE = "infrastructure"


class ErrorKind(Enum):
    # Input validation
    INVALID_GAME_ID = "invalid_game_id"
    INVALID_RATING = "invalid_rating"
    EMPTY_REVIEW = "empty_review"
    REVIEW_TOO_LONG = "review_too_long"
    INVALID_REVIEW_CONTENT = "invalid_review_content"
    VALIDATION_ERROR = "validation_error"
    # Missing data
    GAME_NOT_FOUND = "game_not_found"
    RATING_NOT_FOUND = "rating_not_found"
    REVIEW_NOT_FOUND = "review_not_found"
    # Create-only conflicts
    RATING_ALREADY_EXISTS = "rating_already_exists"
    REVIEW_ALREADY_EXISTS = "review_already_exists"
    # Infrastructure
    DATABASE_ERROR = "database_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN_ERROR = "unknown_error"


@dataclass(frozen=True)
class ErrorInfo:
    """Static description of one error kind. Templates use the error's details."""
    category: ErrorCategory
    message: str
    user_message: str
    technical_message: str
    suggested_action: str
    can_retry: bool


ERROR_CATALOG: Dict[ErrorKind, ErrorInfo] = {
    ErrorKind.INVALID_GAME_ID: ErrorInfo(
        category=ErrorCategory.VALIDATION,
        message="Invalid game ID: {game_id}",
        user_message="Invalid game",
        technical_message="Game ID must be positive, got: {game_id}",
        suggested_action="Please select a valid game to rate",
        can_retry=False
    ),
    ErrorKind.INVALID_RATING: ErrorInfo(
        category=ErrorCategory.VALIDATION,
        message="Invalid rating: {rating}",
        user_message="Invalid rating",
        technical_message="Rating must be between 1 and 5 stars, got: {rating}",
        suggested_action="Please select a rating between 1 and 5 stars",
        can_retry=False
    ),
    ErrorKind.EMPTY_REVIEW: ErrorInfo(
        category=ErrorCategory.VALIDATION,
        message="Review text is empty",
        user_message="Review cannot be empty",
        technical_message="Review text is blank or empty",
        suggested_action="Please write something in your review before saving",
        can_retry=False
    ),
    ErrorKind.REVIEW_TOO_LONG: ErrorInfo(
        category=ErrorCategory.VALIDATION,
        message="Review too long: {length} characters (max: {max_length})",
        user_message="Review is too long",
        technical_message="Review text exceeds maximum length of {max_length} characters, got: {length}",
        suggested_action="Please shorten your review to {max_length} characters or less",
        can_retry=False
    ),
    ErrorKind.INVALID_REVIEW_CONTENT: ErrorInfo(
        category=ErrorCategory.VALIDATION,
        message="Invalid review content: {reason}",
        user_message="Invalid review content",
        technical_message="Review content validation failed: {reason}",
        suggested_action="Please check your review content and try again",
        can_retry=False
    ),
    ErrorKind.VALIDATION_ERROR: ErrorInfo(
        category=ErrorCategory.VALIDATION,
        message="Validation error: {reason}",
        user_message="Invalid input",
        technical_message="Input validation failed: {reason}",
        suggested_action="Please check your input and try again",
        can_retry=False
    ),
    ErrorKind.GAME_NOT_FOUND: ErrorInfo(
        category=ErrorCategory.NOT_FOUND,
        message="Game not found",
        user_message="Game not found",
        technical_message="Referenced game does not exist",
        suggested_action="The game you're trying to rate doesn't exist. Please refresh and try again",
        can_retry=False
    ),
    ErrorKind.RATING_NOT_FOUND: ErrorInfo(
        category=ErrorCategory.NOT_FOUND,
        message="Rating not found",
        user_message="No rating found",
        technical_message="User rating does not exist for game {game_id}",
        suggested_action="You haven't rated this game yet",
        can_retry=False
    ),
    ErrorKind.REVIEW_NOT_FOUND: ErrorInfo(
        category=ErrorCategory.NOT_FOUND,
        message="Review not found",
        user_message="No review found",
        technical_message="User review does not exist for game {game_id}",
        suggested_action="You haven't written a review for this game yet",
        can_retry=False
    ),
    ErrorKind.RATING_ALREADY_EXISTS: ErrorInfo(
        category=ErrorCategory.CONFLICT,
        message="Rating already exists",
        user_message="You've already rated this game",
        technical_message="User rating already exists for game {game_id}",
        suggested_action="You can update your existing rating instead",
        can_retry=False
    ),
    ErrorKind.REVIEW_ALREADY_EXISTS: ErrorInfo(
        category=ErrorCategory.CONFLICT,
        message="Review already exists",
        user_message="You've already reviewed this game",
        technical_message="User review already exists for game {game_id}",
        suggested_action="You can edit your existing review instead",
        can_retry=False
    ),
    ErrorKind.DATABASE_ERROR: ErrorInfo(
        category=ErrorCategory.INFRASTRUCTURE,
        message="Database error occurred",
        user_message="Failed to save your data",
        technical_message="Database operation failed",
        suggested_action="There was a problem saving your rating/review. Please try again",
        can_retry=True
    ),
    ErrorKind.NETWORK_ERROR: ErrorInfo(
        category=ErrorCategory.INFRASTRUCTURE,
        message="Network error occurred",
        user_message="Connection failed",
        technical_message="Network operation failed",
        suggested_action="Check your internet connection and try again",
        can_retry=True
    ),
    ErrorKind.UNKNOWN_ERROR: ErrorInfo(
        category=ErrorCategory.INFRASTRUCTURE,
        message="{reason}",
        user_message="Something went wrong",
        technical_message="Unexpected error: {reason}",
        suggested_action="An unexpected error occurred. Please try again",
        can_retry=True
    ),
}

# Kinds that the user can fix by changing their input
_USER_ACTION_KINDS = frozenset({
    ErrorKind.INVALID_GAME_ID,
    ErrorKind.INVALID_RATING,
    ErrorKind.EMPTY_REVIEW,
    ErrorKind.REVIEW_TOO_LONG,
    ErrorKind.INVALID_REVIEW_CONTENT,
})


class UserRatingReviewError(Exception):
    """
    Failure of a rating/review operation.

    Args:
        kind: Which error occurred
        cause: Underlying exception, if this wraps one
        **details: Payload for the kind's message templates
            (e.g. rating=7, or length=1001 and max_length=1000)
    """

    def __init__(self, kind: ErrorKind, cause: Optional[BaseException] = None, **details: Any):
        self.kind = kind
        self.cause = cause
        self.details = details
        super().__init__(self._render(self.info.message))

    @property
    def info(self) -> ErrorInfo:
        return ERROR_CATALOG[self.kind]

    @property
    def category(self) -> ErrorCategory:
        return self.info.category

    @property
    def message(self) -> str:
        return str(self)

    @property
    def user_message(self) -> str:
        return self.info.user_message

    @property
    def technical_message(self) -> str:
        return self._render(self.info.technical_message)

    @property
    def suggested_action(self) -> str:
        return self._render(self.info.suggested_action)

    @property
    def can_retry(self) -> bool:
        return self.info.can_retry

    def is_validation_error(self) -> bool:
        return self.category is ErrorCategory.VALIDATION

    def is_data_not_found_error(self) -> bool:
        return self.category is ErrorCategory.NOT_FOUND

    def is_conflict_error(self) -> bool:
        return self.category is ErrorCategory.CONFLICT

    def requires_user_action(self) -> bool:
        return self.kind in _USER_ACTION_KINDS

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for presentation layers."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "user_message": self.user_message,
            "suggested_action": self.suggested_action,
            "can_retry": self.can_retry,
            "details": dict(self.details)
        }

    def _render(self, template: str) -> str:
        try:
            return template.format(**self.details)
        except KeyError:
            # Missing payload field: show the template unformatted
            return template

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserRatingReviewError):
            return NotImplemented
        return self.kind is other.kind and self.details == other.details

    def __hash__(self) -> int:
        return hash((self.kind, tuple(sorted(self.details.items()))))

    def __repr__(self) -> str:
        payload = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"UserRatingReviewError({self.kind.name}{', ' + payload if payload else ''})"

    # Constructors for the common kinds

    @classmethod
    def invalid_game_id(cls, game_id: Any) -> "UserRatingReviewError":
        return cls(ErrorKind.INVALID_GAME_ID, game_id=game_id)

    @classmethod
    def invalid_rating(cls, rating: Any) -> "UserRatingReviewError":
        return cls(ErrorKind.INVALID_RATING, rating=rating)

    @classmethod
    def empty_review(cls) -> "UserRatingReviewError":
        return cls(ErrorKind.EMPTY_REVIEW)

    @classmethod
    def review_too_long(
        cls,
        length: int,
        max_length: int = settings.MAX_REVIEW_LENGTH
    ) -> "UserRatingReviewError":
        return cls(ErrorKind.REVIEW_TOO_LONG, length=length, max_length=max_length)

    @classmethod
    def invalid_review_content(cls, reason: str) -> "UserRatingReviewError":
        return cls(ErrorKind.INVALID_REVIEW_CONTENT, reason=reason)

    @classmethod
    def validation_error(cls, reason: str) -> "UserRatingReviewError":
        return cls(ErrorKind.VALIDATION_ERROR, reason=reason)

    @classmethod
    def unknown(cls, cause: BaseException) -> "UserRatingReviewError":
        reason = str(cause) or type(cause).__name__
        return cls(ErrorKind.UNKNOWN_ERROR, cause=cause, reason=reason)


# Design Rationale and Trade-offs:
#
# 1. Why one exception class plus a catalog instead of a subclass per kind?
#    - Messages, retryability and actions live in one table
#    - except UserRatingReviewError catches every repository failure
#    - Trade-off: Callers branch on error.kind rather than on type
#
# 2. Why templates with details instead of preformatted strings?
#    - Details stay machine-readable (to_dict, equality)
#    - Trade-off: A missing detail leaves the placeholder visible
