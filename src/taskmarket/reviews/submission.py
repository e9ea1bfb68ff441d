"""Review submission and moderation.

Handles review storage and the verify/report workflows.
Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from taskmarket.db import repo
from taskmarket.db.repo import DbSession
from taskmarket.models.domain import (
    COMMENT_MAX_LENGTH,
    RATING_MAX,
    RATING_MIN,
    ReviewCategories,
    ReviewEntity,
)

logger = logging.getLogger(__name__)


class ReviewNotFoundError(ValueError):
    """No review with the given id."""


class DuplicateReviewError(ValueError):
    """The reviewer already reviewed this task."""


@dataclass
class ReviewInput:
    """Input for review submission."""

    task_id: str
    reviewer_id: str
    reviewed_user_id: str
    rating: int
    comment: str
    categories: ReviewCategories | None = None


@dataclass
class ReviewResult:
    """Result of review submission."""

    review_id: str
    task_id: str
    success: bool


def submit_review(session: DbSession, review_input: ReviewInput) -> ReviewResult:
    """Submit a review for a completed task.

    New reviews start unverified and do not count toward statistics
    until verified.

    Args:
        session: Database session.
        review_input: Review data.

    Returns:
        ReviewResult with the new review ID.

    Raises:
        DuplicateReviewError: If the reviewer already reviewed this task.
        ValueError: If the review is invalid (self-review, bad rating or comment).
    """
    existing = repo.get_review_for_task_and_reviewer(
        session, review_input.task_id, review_input.reviewer_id
    )
    if existing is not None:
        raise DuplicateReviewError(
            f"Reviewer {review_input.reviewer_id} already reviewed task {review_input.task_id}"
        )

    review = _create_review_entity(review_input)

    repo.create_review(session, review)
    try:
        repo.commit(session)
    except IntegrityError as e:
        # Lost a race with a concurrent submission for the same pair
        session.rollback()
        raise DuplicateReviewError(
            f"Reviewer {review_input.reviewer_id} already reviewed task {review_input.task_id}"
        ) from e

    logger.info(
        f"Review {review.review_id} created for user {review.reviewed_user_id} "
        f"(task {review.task_id}, rating {review.rating})"
    )
    return ReviewResult(review_id=review.review_id, task_id=review.task_id, success=True)


def _create_review_entity(review_input: ReviewInput) -> ReviewEntity:
    """Create review entity from input.

    Pure function - no database access.
    """
    if review_input.reviewer_id == review_input.reviewed_user_id:
        raise ValueError("Users cannot review themselves")

    rating = review_input.rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValueError(f"Rating must be an integer, got {rating!r}")
    if not RATING_MIN <= rating <= RATING_MAX:
        raise ValueError(f"Rating must be between {RATING_MIN} and {RATING_MAX}")

    comment = review_input.comment.strip()
    if not comment:
        raise ValueError("Review comment is required")
    if len(comment) > COMMENT_MAX_LENGTH:
        raise ValueError(f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters")

    return ReviewEntity(
        review_id=str(uuid.uuid4()),
        task_id=review_input.task_id,
        reviewer_id=review_input.reviewer_id,
        reviewed_user_id=review_input.reviewed_user_id,
        rating=rating,
        comment=comment,
        categories=review_input.categories or ReviewCategories(),
    )


def verify_review(session: DbSession, review_id: str) -> ReviewEntity:
    """Mark a review as verified so it counts toward statistics.

    Raises:
        ReviewNotFoundError: If the review does not exist.
    """
    if not repo.set_review_verified(session, review_id, True):
        raise ReviewNotFoundError(f"Review not found: {review_id}")
    repo.commit(session)
    logger.info(f"Review {review_id} verified")
    return repo.get_review(session, review_id)


def report_review(session: DbSession, review_id: str, reason: str | None = None) -> ReviewEntity:
    """Flag a review for moderation.

    Reporting does not change verification; a reported review keeps
    counting until a moderator unverifies it.

    Raises:
        ReviewNotFoundError: If the review does not exist.
    """
    if not repo.set_review_reported(session, review_id, reason):
        raise ReviewNotFoundError(f"Review not found: {review_id}")
    repo.commit(session)
    logger.info(f"Review {review_id} reported: {reason or 'no reason given'}")
    return repo.get_review(session, review_id)
