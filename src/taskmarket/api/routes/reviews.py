"""Reviews API endpoint.

POST /api/reviews - Submit a review
GET /api/reviews/{review_id} - Get review detail
POST /api/reviews/{review_id}/verify - Verify a review
POST /api/reviews/{review_id}/report - Report a review
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from taskmarket.api.app import get_db_session
from taskmarket.db import repo
from taskmarket.db.repo import DbSession
from taskmarket.models.types import ReviewDetail, ReviewReport, ReviewSubmission
from taskmarket.reviews.submission import (
    DuplicateReviewError,
    ReviewInput,
    ReviewNotFoundError,
    report_review,
    submit_review,
    verify_review,
)

router = APIRouter()


class ReviewCreatedResponse(BaseModel):
    """Response for review submission."""

    review_id: str
    task_id: str


@router.post("/reviews", response_model=ReviewCreatedResponse, status_code=201)
def create_review(
    review: ReviewSubmission,
    session: DbSession = Depends(get_db_session),
) -> ReviewCreatedResponse:
    """Submit a review for a completed task.

    Raises:
        HTTPException: 409 if the reviewer already reviewed the task,
            400 if the review is otherwise invalid.
    """
    review_input = ReviewInput(
        task_id=review.task_id,
        reviewer_id=review.reviewer_id,
        reviewed_user_id=review.reviewed_user_id,
        rating=review.rating,
        comment=review.comment,
        categories=review.categories.to_domain(),
    )

    try:
        result = submit_review(session=session, review_input=review_input)
    except DuplicateReviewError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ReviewCreatedResponse(review_id=result.review_id, task_id=result.task_id)


@router.get("/reviews/{review_id}", response_model=ReviewDetail)
def get_review(
    review_id: str,
    session: DbSession = Depends(get_db_session),
) -> ReviewDetail:
    """Get review detail.

    Raises:
        HTTPException: 404 if review not found.
    """
    review = repo.get_review(session, review_id)

    if review is None:
        raise HTTPException(status_code=404, detail="Review not found")

    return ReviewDetail.from_entity(review)


@router.post("/reviews/{review_id}/verify", response_model=ReviewDetail)
def verify(
    review_id: str,
    session: DbSession = Depends(get_db_session),
) -> ReviewDetail:
    """Verify a review so it counts toward the reviewed user's stats."""
    try:
        review = verify_review(session, review_id)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=404, detail="Review not found") from e

    return ReviewDetail.from_entity(review)


@router.post("/reviews/{review_id}/report", response_model=ReviewDetail)
def report(
    review_id: str,
    body: ReviewReport,
    session: DbSession = Depends(get_db_session),
) -> ReviewDetail:
    """Report a review for moderation."""
    try:
        review = report_review(session, review_id, body.reason)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=404, detail="Review not found") from e

    return ReviewDetail.from_entity(review)
