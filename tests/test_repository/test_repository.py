"""
Tests for UserRatingReviewRepository.
End-to-end behaviour of every operation over the in-memory store.
"""

import asyncio
from unittest import mock

import pytest

from ratekeeper.models.activity import ActivityType
from ratekeeper.models.errors import ErrorKind, UserRatingReviewError
from ratekeeper.repository import UserRatingReviewRepository
from ratekeeper.store.base import StoreError


def run(coro):
    return asyncio.run(coro)


def error_kind(coro) -> ErrorKind:
    with pytest.raises(UserRatingReviewError) as exc_info:
        run(coro)
    return exc_info.value.kind


# Ratings

def test_set_then_get_rating(repository, clock):
    """Test set then get rating."""
    async def scenario():
        await repository.set_user_rating(42, 4)
        return await repository.get_user_rating(42)

    rating = run(scenario())

    assert rating.game_id == 42
    assert rating.rating == 4
    assert rating.created_at == rating.updated_at == clock.now


def test_update_rating_keeps_created_at(repository, clock):
    """Test that a second set keeps created_at and refreshes updated_at."""
    async def scenario():
        await repository.set_user_rating(42, 4)
        created = clock.now
        clock.advance(5000)
        await repository.set_user_rating(42, 2)
        return created, await repository.get_user_rating(42)

    created, rating = run(scenario())

    assert rating.rating == 2
    assert rating.created_at == created
    assert rating.updated_at == created + 5000
    assert rating.updated_at > rating.created_at


def test_get_missing_rating_returns_none(repository):
    """Test that reading an unrated game returns None."""
    assert run(repository.get_user_rating(99)) is None


@pytest.mark.parametrize("bad_rating", [0, 6, -1])
def test_invalid_rating_leaves_store_untouched(repository, store, bad_rating):
    """Test invalid rating leaves store untouched."""
    assert error_kind(repository.set_user_rating(1, bad_rating)) is ErrorKind.INVALID_RATING
    assert store.size() == (0, 0)


def test_invalid_rating_does_not_change_existing(repository):
    """Test invalid rating does not change existing."""
    async def scenario():
        await repository.set_user_rating(1, 3)
        with pytest.raises(UserRatingReviewError):
            await repository.set_user_rating(1, 7)
        return await repository.get_user_rating(1)

    assert run(scenario()).rating == 3


def test_invalid_game_id(repository):
    """Test invalid game id."""
    assert error_kind(repository.set_user_rating(0, 3)) is ErrorKind.INVALID_GAME_ID
    assert error_kind(repository.get_user_review(-4)) is ErrorKind.INVALID_GAME_ID


def test_delete_rating_is_idempotent(repository):
    """Test delete rating is idempotent."""
    async def scenario():
        await repository.set_user_rating(5, 5)
        await repository.delete_user_rating(5)
        await repository.delete_user_rating(5)
        await repository.delete_user_rating(77)
        return await repository.get_user_rating(5)

    assert run(scenario()) is None


def test_all_ratings_most_recent_first(repository, clock):
    """Test all ratings most recent first."""
    async def scenario():
        await repository.set_user_rating(1, 5)
        clock.advance()
        await repository.set_user_rating(2, 3)
        clock.advance()
        await repository.set_user_rating(1, 4)
        return await repository.get_all_user_ratings()

    assert [r.game_id for r in run(scenario())] == [1, 2]


def test_create_and_update_variants(repository):
    """Test create and update variants."""
    async def scenario():
        await repository.create_user_rating(1, 3)
        await repository.update_user_rating(1, 4)
        return await repository.get_user_rating(1)

    assert run(scenario()).rating == 4
    assert error_kind(repository.update_user_rating(2, 4)) is ErrorKind.RATING_NOT_FOUND
    assert error_kind(repository.create_user_rating(1, 5)) is ErrorKind.RATING_ALREADY_EXISTS
    assert error_kind(repository.update_user_review(1, "x")) is ErrorKind.REVIEW_NOT_FOUND


def test_conflict_error_carries_game_id(repository):
    """Test conflict error carries game id."""
    async def scenario():
        await repository.create_user_review(8, "First")
        await repository.create_user_review(8, "Second")

    with pytest.raises(UserRatingReviewError) as exc_info:
        run(scenario())

    error = exc_info.value
    assert error.kind is ErrorKind.REVIEW_ALREADY_EXISTS
    assert error.details == {"game_id": 8}
    assert error.is_conflict_error()


# Reviews

def test_review_round_trips_unchanged(repository):
    """Test review round trips unchanged."""
    text = "  Loved the <i>soundtrack</i>\n\n10/10  "

    async def scenario():
        await repository.set_user_review(3, text)
        return await repository.get_user_review(3)

    assert run(scenario()).review_text == text


@pytest.mark.parametrize("text", [
    "Отличная игра, рекомендую",
    "很好玩的游戏，画面很漂亮",
    "Très réussi, ça vaut le détour",
    "Great co-op \U0001F3AE\U0001F525 10/10 \U0001F600",
])
def test_international_review_round_trips(repository, text):
    """Test that multi-byte review text comes back identical."""
    async def scenario():
        await repository.set_user_review(11, text)
        return await repository.get_user_review(11)

    review = run(scenario())

    assert review.review_text == text
    assert len(review.review_text) == len(text)


def test_non_bmp_review_length_boundary(repository, store):
    """Test the 1000-unit limit with emoji, which count as two units."""
    async def scenario():
        await repository.set_user_review(1, "\U0001F600" * 500)
        return await repository.get_user_review(1)

    assert run(scenario()).review_text == "\U0001F600" * 500

    with pytest.raises(UserRatingReviewError) as exc_info:
        run(repository.set_user_review(2, "\U0001F600" * 500 + "!"))
    assert exc_info.value.kind is ErrorKind.REVIEW_TOO_LONG
    assert exc_info.value.details == {"length": 1001, "max_length": 1000}

    with pytest.raises(UserRatingReviewError) as exc_info:
        run(repository.set_user_review(3, "\U0001F600" * 600))
    assert exc_info.value.details == {"length": 1200, "max_length": 1000}
    assert store.size() == (0, 1)


def test_review_length_limits(repository):
    """Test review length limits."""
    async def scenario():
        await repository.set_user_review(1, "x" * 1000)
        return await repository.get_user_review(1)

    assert len(run(scenario()).review_text) == 1000

    with pytest.raises(UserRatingReviewError) as exc_info:
        run(repository.set_user_review(2, "x" * 1001))
    assert exc_info.value.details == {"length": 1001, "max_length": 1000}


@pytest.mark.parametrize("text", ["", "   "])
def test_empty_review_rejected(repository, store, text):
    """Test empty review rejected."""
    assert error_kind(repository.set_user_review(1, text)) is ErrorKind.EMPTY_REVIEW
    assert store.size() == (0, 0)


def test_all_reviews_most_recent_first(repository, clock):
    """Test all reviews most recent first."""
    async def scenario():
        await repository.set_user_review(1, "Old")
        clock.advance()
        await repository.set_user_review(2, "New")
        return await repository.get_all_user_reviews()

    assert [r.game_id for r in run(scenario())] == [2, 1]


def test_delete_review_keeps_rating(repository):
    """Test delete review keeps rating."""
    async def scenario():
        await repository.set_user_rating(4, 4)
        await repository.set_user_review(4, "Good")
        await repository.delete_user_review(4)
        return await repository.get_game_with_user_data(4)

    game = run(scenario())

    assert game.has_user_rating
    assert not game.has_user_review


def test_sanitizing_repository(store, clock):
    """Test sanitizing repository."""
    repository = UserRatingReviewRepository(store, clock=clock, sanitize_reviews=True)

    async def scenario():
        await repository.set_user_review(1, "  Nice   <b>game</b>  ")
        return await repository.get_user_review(1)

    assert run(scenario()).review_text == "Nice game"
    assert error_kind(repository.set_user_review(2, "<p>   </p>")) is ErrorKind.EMPTY_REVIEW


def test_unsafe_content_rejected_when_enabled(store, clock):
    """Test unsafe content rejected when enabled."""
    repository = UserRatingReviewRepository(store, clock=clock, reject_unsafe_content=True)

    kind = error_kind(repository.set_user_review(1, "<script>alert(1)</script>"))

    assert kind is ErrorKind.INVALID_REVIEW_CONTENT
    assert store.size() == (0, 0)


# Aggregates

def test_stats(repository):
    """Test rating stats through the repository."""
    async def scenario():
        await repository.set_user_rating(1, 5)
        await repository.set_user_rating(2, 3)
        await repository.set_user_review(1, "Great")
        return await repository.get_user_rating_stats()

    stats = run(scenario())

    assert stats.total_rated_games == 2
    assert stats.total_reviews == 1
    assert stats.average_rating == 4.0
    assert stats.rating_distribution == {1: 0, 2: 0, 3: 1, 4: 0, 5: 1}


def test_game_with_user_data_for_untouched_game(repository):
    """Test game with user data for untouched game."""
    game = run(repository.get_game_with_user_data(123))

    assert game.game_id == 123
    assert game.user_rating is None
    assert game.user_review is None


def test_games_with_user_data_preserves_order(repository):
    """Test games with user data preserves order."""
    async def scenario():
        await repository.set_user_rating(2, 4)
        return await repository.get_games_with_user_data([5, 2, 5])

    games = run(scenario())

    assert [g.game_id for g in games] == [5, 2, 5]
    assert games[1].user_rating.rating == 4


def test_games_with_user_data_empty(repository):
    """Test games with user data empty."""
    assert run(repository.get_games_with_user_data([])) == []


def test_recent_activity(repository, clock):
    """Test the merged activity feed through the repository."""
    async def scenario():
        await repository.set_user_rating(1, 5)
        clock.advance()
        await repository.set_user_review(2, "r" * 150)
        clock.advance()
        await repository.set_user_rating(3, 1)
        return await repository.get_recent_user_activity()

    activities = run(scenario())

    assert [a.game_id for a in activities] == [3, 2, 1]
    assert activities[1].activity_type is ActivityType.REVIEW
    assert activities[1].review_text == "r" * 100
    assert activities[0].game_image == "https://example.com/game3.jpg"


def test_recent_activity_limit_validation(repository):
    """Test recent activity limit validation."""
    assert error_kind(repository.get_recent_user_activity(0)) is ErrorKind.VALIDATION_ERROR
    assert run(repository.get_recent_user_activity(1000)) == []


# Error normalization

def test_store_error_becomes_database_error(repository, store):
    """Test store error becomes database error."""
    with mock.patch.object(store, "put_rating", side_effect=StoreError("disk full")):
        with pytest.raises(UserRatingReviewError) as exc_info:
            run(repository.set_user_rating(1, 3))

    error = exc_info.value
    assert error.kind is ErrorKind.DATABASE_ERROR
    assert error.can_retry
    assert isinstance(error.cause, StoreError)
    assert error.__cause__ is error.cause


def test_connection_error_becomes_network_error(repository, store):
    """Test connection error becomes network error."""
    with mock.patch.object(store, "list_ratings", side_effect=ConnectionError("unreachable")):
        assert error_kind(repository.get_user_rating_stats()) is ErrorKind.NETWORK_ERROR


def test_unexpected_error_becomes_unknown(repository, store):
    """Test unexpected error becomes unknown."""
    with mock.patch.object(store, "get_review", side_effect=RuntimeError("surprise")):
        with pytest.raises(UserRatingReviewError) as exc_info:
            run(repository.get_user_review(1))

    assert exc_info.value.kind is ErrorKind.UNKNOWN_ERROR
    assert exc_info.value.message == "surprise"


# Concurrency

def test_concurrent_writes_same_game_leave_one_record(repository, store):
    """Test concurrent writes same game leave one record."""
    async def scenario():
        await asyncio.gather(*(repository.set_user_rating(9, value) for value in range(1, 6)))
        return await repository.get_all_user_ratings()

    ratings = run(scenario())

    assert len(ratings) == 1
    assert ratings[0].rating in range(1, 6)


def test_concurrent_writes_different_games(repository):
    """Test concurrent writes different games."""
    async def scenario():
        await asyncio.gather(
            *(repository.set_user_rating(game_id, game_id % 5 + 1) for game_id in range(1, 51)),
            *(repository.set_user_review(game_id, f"Review {game_id}") for game_id in range(1, 51))
        )
        return await repository.get_user_rating_stats()

    stats = run(scenario())

    assert stats.total_rated_games == 50
    assert stats.total_reviews == 50
