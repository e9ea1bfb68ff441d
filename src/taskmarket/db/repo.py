"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping domain logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Generator

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from taskmarket.db.schema import Review
from taskmarket.models.domain import ReviewCategories, ReviewEntity

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession", "SessionReviewStore", "StoreUnavailableError"]

logger = logging.getLogger(__name__)


class StoreUnavailableError(RuntimeError):
    """The review store could not be reached or queried."""


@contextmanager
def _store_errors() -> Generator[None, None, None]:
    """Translate driver-level failures into StoreUnavailableError."""
    try:
        yield
    except OperationalError as e:
        logger.warning(f"Review store unavailable: {e.orig}")
        raise StoreUnavailableError(str(e.orig)) from e


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _review_to_entity(review: Review) -> ReviewEntity:
    """Convert SQLAlchemy Review to domain entity."""
    return ReviewEntity(
        review_id=review.review_id,
        task_id=review.task_id,
        reviewer_id=review.reviewer_id,
        reviewed_user_id=review.reviewed_user_id,
        rating=review.rating,
        comment=review.comment,
        categories=ReviewCategories(
            professionalism=review.professionalism,
            quality=review.quality,
            punctuality=review.punctuality,
            communication=review.communication,
        ),
        is_verified=review.is_verified,
        is_reported=review.is_reported,
        report_reason=review.report_reason,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


# ============================================================================
# Review Repository
# ============================================================================


def get_review(session: DbSession, review_id: str) -> ReviewEntity | None:
    """Get review by ID."""
    with _store_errors():
        review = session.query(Review).filter(Review.review_id == review_id).first()
    return _review_to_entity(review) if review else None


def get_review_for_task_and_reviewer(
    session: DbSession, task_id: str, reviewer_id: str
) -> ReviewEntity | None:
    """Get the review a reviewer left for a task, if any."""
    with _store_errors():
        review = (
            session.query(Review)
            .filter(
                Review.task_id == task_id,
                Review.reviewer_id == reviewer_id,
            )
            .first()
        )
    return _review_to_entity(review) if review else None


def find_verified_reviews_for_user(session: DbSession, user_id: str) -> list[ReviewEntity]:
    """Get all verified reviews where user_id is the reviewed party."""
    with _store_errors():
        reviews = (
            session.query(Review)
            .filter(
                Review.reviewed_user_id == user_id,
                Review.is_verified.is_(True),
            )
            .all()
        )
    return [_review_to_entity(r) for r in reviews]


def get_reviews_for_user(
    session: DbSession, user_id: str, *, verified_only: bool = True
) -> list[ReviewEntity]:
    """Get reviews received by a user, newest first."""
    with _store_errors():
        query = session.query(Review).filter(Review.reviewed_user_id == user_id)
        if verified_only:
            query = query.filter(Review.is_verified.is_(True))
        reviews = query.order_by(Review.created_at.desc()).all()
    return [_review_to_entity(r) for r in reviews]


def get_reviews_by_reviewer(session: DbSession, reviewer_id: str) -> list[ReviewEntity]:
    """Get reviews written by a user, newest first."""
    with _store_errors():
        reviews = (
            session.query(Review)
            .filter(Review.reviewer_id == reviewer_id)
            .order_by(Review.created_at.desc())
            .all()
        )
    return [_review_to_entity(r) for r in reviews]


def create_review(session: DbSession, entity: ReviewEntity) -> ReviewEntity:
    """Create a new review."""
    review = Review(
        review_id=entity.review_id,
        task_id=entity.task_id,
        reviewer_id=entity.reviewer_id,
        reviewed_user_id=entity.reviewed_user_id,
        rating=entity.rating,
        comment=entity.comment,
        professionalism=entity.categories.professionalism,
        quality=entity.categories.quality,
        punctuality=entity.categories.punctuality,
        communication=entity.categories.communication,
        is_verified=entity.is_verified,
        is_reported=entity.is_reported,
        report_reason=entity.report_reason,
    )
    session.add(review)
    return entity


def set_review_verified(session: DbSession, review_id: str, verified: bool = True) -> bool:
    """Set the verification flag. Returns False if the review does not exist."""
    with _store_errors():
        review = session.query(Review).filter(Review.review_id == review_id).first()
    if review is None:
        return False
    review.is_verified = verified
    review.updated_at = datetime.now(timezone.utc)
    return True


def set_review_reported(session: DbSession, review_id: str, reason: str | None) -> bool:
    """Flag a review as reported. Returns False if the review does not exist."""
    with _store_errors():
        review = session.query(Review).filter(Review.review_id == review_id).first()
    if review is None:
        return False
    review.is_reported = True
    review.report_reason = reason
    review.updated_at = datetime.now(timezone.utc)
    return True


# ============================================================================
# Store adapter
# ============================================================================


class SessionReviewStore:
    """Review store backed by a SQLAlchemy session.

    Satisfies the ReviewStore protocol used by the stats aggregator.
    """

    def __init__(self, session: DbSession):
        self.session = session

    def find_verified_reviews_for_user(self, user_id: str) -> list[ReviewEntity]:
        return find_verified_reviews_for_user(self.session, user_id)


# ============================================================================
# Batch Operations
# ============================================================================


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    with _store_errors():
        session.commit()
