"""Pydantic models for the taskmarket API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from taskmarket.models.domain import (
    COMMENT_MAX_LENGTH,
    DEFAULT_CATEGORY_SCORE,
    RATING_MAX,
    RATING_MIN,
    ReviewCategories,
    ReviewEntity,
    ReviewStats,
)


class CategoryScores(BaseModel):
    """Category scores on a review. Unset categories default to 5."""

    professionalism: int = Field(DEFAULT_CATEGORY_SCORE, ge=RATING_MIN, le=RATING_MAX)
    quality: int = Field(DEFAULT_CATEGORY_SCORE, ge=RATING_MIN, le=RATING_MAX)
    punctuality: int = Field(DEFAULT_CATEGORY_SCORE, ge=RATING_MIN, le=RATING_MAX)
    communication: int = Field(DEFAULT_CATEGORY_SCORE, ge=RATING_MIN, le=RATING_MAX)

    def to_domain(self) -> ReviewCategories:
        return ReviewCategories(**self.model_dump())


class ReviewSubmission(BaseModel):
    """Review submission."""

    task_id: str
    reviewer_id: str
    reviewed_user_id: str
    rating: int = Field(ge=RATING_MIN, le=RATING_MAX)
    comment: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=COMMENT_MAX_LENGTH),
    ]
    categories: CategoryScores = Field(default_factory=CategoryScores)


class ReviewReport(BaseModel):
    """Report of an inappropriate review."""

    reason: str | None = None


class ReviewDetail(BaseModel):
    """Review details for API response."""

    review_id: str
    task_id: str
    reviewer_id: str
    reviewed_user_id: str
    rating: int
    comment: str
    categories: CategoryScores
    category_average: float  # mean of the four category scores
    is_verified: bool
    is_reported: bool
    report_reason: str | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, review: ReviewEntity) -> ReviewDetail:
        return cls(
            review_id=review.review_id,
            task_id=review.task_id,
            reviewer_id=review.reviewer_id,
            reviewed_user_id=review.reviewed_user_id,
            rating=review.rating,
            comment=review.comment,
            categories=CategoryScores(**review.categories.as_dict()),
            category_average=review.categories.mean(),
            is_verified=review.is_verified,
            is_reported=review.is_reported,
            report_reason=review.report_reason,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class CategoryAveragesDetail(BaseModel):
    """Mean score per category."""

    professionalism: float
    quality: float
    punctuality: float
    communication: float


class ReviewStatsResponse(BaseModel):
    """Summary of a user's verified reviews."""

    user_id: str
    total_reviews: int
    average_rating: float
    rating_distribution: dict[int, int]  # rating (1..5) -> count
    category_averages: CategoryAveragesDetail

    @classmethod
    def from_stats(cls, user_id: str, stats: ReviewStats) -> ReviewStatsResponse:
        return cls(
            user_id=user_id,
            total_reviews=stats.total_reviews,
            average_rating=stats.average_rating,
            rating_distribution=stats.rating_distribution.as_dict(),
            category_averages=CategoryAveragesDetail(**stats.category_averages.as_dict()),
        )


class AverageRatingResponse(BaseModel):
    """Mean overall rating of a user's verified reviews."""

    user_id: str
    average_rating: float
