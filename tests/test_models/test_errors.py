"""
Unit tests for the error taxonomy.
"""

import pytest

from ratekeeper.models.errors import (
    ERROR_CATALOG,
    ErrorCategory,
    ErrorKind,
    UserRatingReviewError,
)


def test_every_kind_has_catalog_entry():
    """Test every kind has catalog entry."""
    assert set(ERROR_CATALOG) == set(ErrorKind)


def test_review_too_long_renders_payload():
    """Test review too long renders payload."""
    error = UserRatingReviewError.review_too_long(1001)

    assert error.kind is ErrorKind.REVIEW_TOO_LONG
    assert error.details == {"length": 1001, "max_length": 1000}
    assert str(error) == "Review too long: 1001 characters (max: 1000)"
    assert error.suggested_action == "Please shorten your review to 1000 characters or less"
    assert "1001" in error.technical_message


def test_invalid_rating_message():
    """Test invalid rating message."""
    error = UserRatingReviewError.invalid_rating(7)

    assert error.message == "Invalid rating: 7"
    assert error.user_message == "Invalid rating"
    assert error.is_validation_error()
    assert error.requires_user_action()
    assert not error.can_retry


@pytest.mark.parametrize("kind,category", [
    (ErrorKind.INVALID_GAME_ID, ErrorCategory.VALIDATION),
    (ErrorKind.VALIDATION_ERROR, ErrorCategory.VALIDATION),
    (ErrorKind.RATING_NOT_FOUND, ErrorCategory.NOT_FOUND),
    (ErrorKind.GAME_NOT_FOUND, ErrorCategory.NOT_FOUND),
    (ErrorKind.REVIEW_ALREADY_EXISTS, ErrorCategory.CONFLICT),
    (ErrorKind.DATABASE_ERROR, ErrorCategory.INFRASTRUCTURE),
    (ErrorKind.NETWORK_ERROR, ErrorCategory.INFRASTRUCTURE),
])
def test_categories(kind, category):
    """Test error kind to category mapping."""
    assert ERROR_CATALOG[kind].category is category


def test_category_predicates():
    """Test category predicates."""
    not_found = UserRatingReviewError(ErrorKind.REVIEW_NOT_FOUND, game_id=3)
    conflict = UserRatingReviewError(ErrorKind.RATING_ALREADY_EXISTS, game_id=3)

    assert not_found.is_data_not_found_error()
    assert not not_found.is_validation_error()
    assert conflict.is_conflict_error()
    assert not conflict.requires_user_action()


def test_infrastructure_errors_are_retryable():
    """Test infrastructure errors are retryable."""
    for kind in (ErrorKind.DATABASE_ERROR, ErrorKind.NETWORK_ERROR, ErrorKind.UNKNOWN_ERROR):
        assert ERROR_CATALOG[kind].can_retry


def test_unknown_keeps_cause():
    """Test unknown keeps cause."""
    cause = RuntimeError("disk on fire")

    error = UserRatingReviewError.unknown(cause)

    assert error.kind is ErrorKind.UNKNOWN_ERROR
    assert error.cause is cause
    assert error.message == "disk on fire"


def test_unknown_without_message_uses_type_name():
    """Test unknown without message uses type name."""
    error = UserRatingReviewError.unknown(KeyError())

    assert error.message == "KeyError"


def test_missing_template_payload_does_not_raise():
    """Test missing template payload does not raise."""
    error = UserRatingReviewError(ErrorKind.INVALID_RATING)

    assert error.message == "Invalid rating: {rating}"


def test_equality_by_kind_and_details():
    """Test equality by kind and details."""
    assert UserRatingReviewError.invalid_rating(0) == UserRatingReviewError.invalid_rating(0)
    assert UserRatingReviewError.invalid_rating(0) != UserRatingReviewError.invalid_rating(6)
    assert UserRatingReviewError.empty_review() != UserRatingReviewError.validation_error("x")
    assert len({UserRatingReviewError.empty_review(), UserRatingReviewError.empty_review()}) == 1


def test_to_dict():
    """Test error serialization for presentation layers."""
    data = UserRatingReviewError.invalid_game_id(-1).to_dict()

    assert data["kind"] == "invalid_game_id"
    assert data["details"] == {"game_id": -1}
    assert data["can_retry"] is False
