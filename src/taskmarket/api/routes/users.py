"""User review endpoints.

GET /api/users/{user_id}/reviews - Verified reviews received by a user
GET /api/users/{user_id}/reviews/written - Reviews written by a user
GET /api/users/{user_id}/reviews/stats - Review statistics
GET /api/users/{user_id}/reviews/average - Average rating
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from taskmarket.aggregation.review_stats import average_rating_for_user, compute_review_stats
from taskmarket.api.app import get_db_session
from taskmarket.db import repo
from taskmarket.db.repo import DbSession
from taskmarket.models.types import AverageRatingResponse, ReviewDetail, ReviewStatsResponse

router = APIRouter()


@router.get("/users/{user_id}/reviews", response_model=list[ReviewDetail])
def list_user_reviews(
    user_id: str,
    session: DbSession = Depends(get_db_session),
) -> list[ReviewDetail]:
    """List verified reviews received by a user, newest first."""
    reviews = repo.get_reviews_for_user(session, user_id)
    return [ReviewDetail.from_entity(r) for r in reviews]


@router.get("/users/{user_id}/reviews/written", response_model=list[ReviewDetail])
def list_reviews_written(
    user_id: str,
    session: DbSession = Depends(get_db_session),
) -> list[ReviewDetail]:
    """List reviews a user has written, verified or not, newest first."""
    reviews = repo.get_reviews_by_reviewer(session, user_id)
    return [ReviewDetail.from_entity(r) for r in reviews]


@router.get("/users/{user_id}/reviews/stats", response_model=ReviewStatsResponse)
def get_user_review_stats(
    user_id: str,
    session: DbSession = Depends(get_db_session),
) -> ReviewStatsResponse:
    """Get review statistics for a user.

    Unknown users get the empty summary. Store outages surface as 503.
    """
    stats = compute_review_stats(session, user_id)
    return ReviewStatsResponse.from_stats(user_id, stats)


@router.get("/users/{user_id}/reviews/average", response_model=AverageRatingResponse)
def get_user_average_rating(
    user_id: str,
    session: DbSession = Depends(get_db_session),
) -> AverageRatingResponse:
    """Get the average rating of a user's verified reviews."""
    return AverageRatingResponse(
        user_id=user_id,
        average_rating=average_rating_for_user(session, user_id),
    )
