"""Review statistics aggregation.

Reduces a user's verified reviews to counts, mean rating, a five-bucket
rating histogram and per-category means.
Domain logic is pure - the review store is injected.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, Sequence

from taskmarket.db.repo import DbSession, SessionReviewStore
from taskmarket.models.domain import (
    CATEGORY_NAMES,
    RATING_MIN,
    RATING_VALUES,
    CategoryAverages,
    RatingHistogram,
    ReviewEntity,
    ReviewStats,
)

logger = logging.getLogger(__name__)


class ReviewStore(Protocol):
    """Read access to reviews needed for statistics."""

    def find_verified_reviews_for_user(self, user_id: str) -> Sequence[ReviewEntity]: ...


class ReviewStatsAggregator:
    """Computes review statistics for users from an injected store.

    Store failures propagate unchanged; nothing is retried and no partial
    result is returned.
    """

    def __init__(self, store: ReviewStore):
        self.store = store

    def compute_stats(self, user_id: str) -> ReviewStats:
        """Summarize the verified reviews of a user.

        Args:
            user_id: Reviewed user. Unknown ids yield the empty summary.

        Returns:
            ReviewStats for the user.
        """
        reviews = self.store.find_verified_reviews_for_user(user_id)
        stats = aggregate_reviews(reviews)
        logger.debug(f"Computed stats for user {user_id}: {stats.total_reviews} reviews")
        return stats

    def average_rating_for_user(self, user_id: str) -> float:
        """Mean overall rating of a user's verified reviews, 0 if none."""
        reviews = self.store.find_verified_reviews_for_user(user_id)
        return average_rating(reviews)


def average_rating(reviews: Iterable[ReviewEntity]) -> float:
    """Mean rating of reviews, 0.0 for an empty collection.

    Pure function - no database access.
    """
    ratings = [review.rating for review in reviews]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def aggregate_reviews(reviews: Iterable[ReviewEntity]) -> ReviewStats:
    """Reduce reviews to a ReviewStats summary.

    Pure function - no database access. Ratings are trusted to be in
    1..5; the result does not depend on iteration order.

    Args:
        reviews: Verified reviews of a single user.

    Returns:
        ReviewStats. Empty input gives all-zero stats.
    """
    reviews = list(reviews)
    if not reviews:
        return ReviewStats()

    counts = [0] * len(RATING_VALUES)
    rating_total = 0
    category_totals = dict.fromkeys(CATEGORY_NAMES, 0)

    for review in reviews:
        counts[review.rating - RATING_MIN] += 1
        rating_total += review.rating
        for name, score in review.categories.as_dict().items():
            category_totals[name] += score

    total = len(reviews)
    return ReviewStats(
        total_reviews=total,
        average_rating=rating_total / total,
        rating_distribution=RatingHistogram(counts=tuple(counts)),
        category_averages=CategoryAverages(
            **{name: value / total for name, value in category_totals.items()}
        ),
    )


def compute_review_stats(session: DbSession, user_id: str) -> ReviewStats:
    """Compute review stats for a user using a database session."""
    return ReviewStatsAggregator(SessionReviewStore(session)).compute_stats(user_id)


def average_rating_for_user(session: DbSession, user_id: str) -> float:
    """Compute a user's average rating using a database session."""
    return ReviewStatsAggregator(SessionReviewStore(session)).average_rating_for_user(user_id)
