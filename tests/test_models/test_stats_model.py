"""
Unit tests for UserRatingStats invariants and derived values.
"""

import pytest

from ratekeeper.models.stats import UserRatingStats, empty_distribution


def test_empty_stats():
    """Test empty stats."""
    stats = UserRatingStats(total_rated_games=0, total_reviews=0, average_rating=0.0)

    assert stats.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    assert stats.most_common_rating() is None
    assert stats.percentage_for_rating(5) == 0.0


def test_distribution_must_match_total():
    """Test distribution must match total."""
    with pytest.raises(ValueError):
        UserRatingStats(
            total_rated_games=2,
            total_reviews=0,
            average_rating=3.0,
            rating_distribution={1: 0, 2: 0, 3: 1, 4: 0, 5: 0}
        )


def test_average_must_be_zero_without_ratings():
    """Test average must be zero without ratings."""
    with pytest.raises(ValueError):
        UserRatingStats(total_rated_games=0, total_reviews=1, average_rating=2.5)


def test_average_must_be_in_range_with_ratings():
    """Test average must be in range with ratings."""
    with pytest.raises(ValueError):
        UserRatingStats(
            total_rated_games=1,
            total_reviews=0,
            average_rating=0.5,
            rating_distribution={1: 1, 2: 0, 3: 0, 4: 0, 5: 0}
        )


def test_distribution_keys_restricted_to_rating_values():
    """Test distribution keys restricted to rating values."""
    distribution = empty_distribution()
    distribution[6] = 0

    with pytest.raises(ValueError):
        UserRatingStats(
            total_rated_games=0,
            total_reviews=0,
            average_rating=0.0,
            rating_distribution=distribution
        )


def test_percentage_and_most_common():
    """Test percentage and most common."""
    stats = UserRatingStats(
        total_rated_games=4,
        total_reviews=2,
        average_rating=4.0,
        rating_distribution={1: 0, 2: 1, 3: 0, 4: 1, 5: 2}
    )

    assert stats.percentage_for_rating(5) == 50.0
    assert stats.percentage_for_rating(2) == 25.0
    assert stats.most_common_rating() == 5

    with pytest.raises(ValueError):
        stats.percentage_for_rating(0)


def test_most_common_tie_prefers_lowest_value():
    """Test most common tie prefers lowest value."""
    stats = UserRatingStats(
        total_rated_games=2,
        total_reviews=0,
        average_rating=3.0,
        rating_distribution={1: 0, 2: 1, 3: 0, 4: 1, 5: 0}
    )

    assert stats.most_common_rating() == 2


def test_stats_to_dict():
    """Test stats to dict."""
    stats = UserRatingStats(
        total_rated_games=1,
        total_reviews=0,
        average_rating=4.0,
        rating_distribution={1: 0, 2: 0, 3: 0, 4: 1, 5: 0}
    )

    data = stats.to_dict()

    assert data["total_rated_games"] == 1
    assert data["average_rating"] == 4.0
    assert data["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 0}
