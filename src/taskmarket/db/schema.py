"""Database schema for taskmarket reviews.

Users and tasks live in other services; reviews reference them by id.
The unique constraint on (task_id, reviewer_id) enforces one review per
reviewer per task.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Review(Base):
    """A review left by one user for another after a task.

    Invariant: UNIQUE(task_id, reviewer_id)
    Category columns carry no server default; values are set by the
    domain layer when the review is built.
    """

    __tablename__ = "reviews"

    review_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    task_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reviewer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reviewed_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)

    professionalism: Mapped[int] = mapped_column(Integer, nullable=False)
    quality: Mapped[int] = mapped_column(Integer, nullable=False)
    punctuality: Mapped[int] = mapped_column(Integer, nullable=False)
    communication: Mapped[int] = mapped_column(Integer, nullable=False)

    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_reported: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    report_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        UniqueConstraint("task_id", "reviewer_id", name="uq_review_task_reviewer"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
        CheckConstraint("professionalism BETWEEN 1 AND 5", name="ck_review_professionalism"),
        CheckConstraint("quality BETWEEN 1 AND 5", name="ck_review_quality"),
        CheckConstraint("punctuality BETWEEN 1 AND 5", name="ck_review_punctuality"),
        CheckConstraint("communication BETWEEN 1 AND 5", name="ck_review_communication"),
        CheckConstraint("length(comment) <= 500", name="ck_review_comment_length"),
        Index("ix_reviews_task_id", "task_id"),
        Index("ix_reviews_reviewer_id", "reviewer_id"),
        Index("ix_reviews_reviewed_user_id", "reviewed_user_id"),
        Index("ix_reviews_rating", "rating"),
    )
