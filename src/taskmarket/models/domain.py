"""Domain models for taskmarket.

Pure Python dataclasses representing domain entities.
These models are independent of SQLAlchemy and used throughout
the application for clean separation from the database layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

RATING_MIN = 1
RATING_MAX = 5
RATING_VALUES = tuple(range(RATING_MIN, RATING_MAX + 1))

CATEGORY_NAMES = ("professionalism", "quality", "punctuality", "communication")
DEFAULT_CATEGORY_SCORE = 5

COMMENT_MAX_LENGTH = 500


def _check_score(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not RATING_MIN <= value <= RATING_MAX:
        raise ValueError(f"{name} must be between {RATING_MIN} and {RATING_MAX}, got {value}")


# ============================================================================
# Review Domain
# ============================================================================


@dataclass(frozen=True)
class ReviewCategories:
    """Per-category scores of a single review.

    Unset categories default to 5 here, at construction time.
    """

    professionalism: int = DEFAULT_CATEGORY_SCORE
    quality: int = DEFAULT_CATEGORY_SCORE
    punctuality: int = DEFAULT_CATEGORY_SCORE
    communication: int = DEFAULT_CATEGORY_SCORE

    def __post_init__(self) -> None:
        for name in CATEGORY_NAMES:
            _check_score(name, getattr(self, name))

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in CATEGORY_NAMES}

    def mean(self) -> float:
        """Mean of the four category scores."""
        return sum(self.as_dict().values()) / len(CATEGORY_NAMES)


@dataclass
class ReviewEntity:
    """Domain model for a review."""

    review_id: str
    task_id: str
    reviewer_id: str
    reviewed_user_id: str
    rating: int
    comment: str
    categories: ReviewCategories = field(default_factory=ReviewCategories)
    is_verified: bool = False
    is_reported: bool = False
    report_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ============================================================================
# Review Statistics Domain
# ============================================================================


@dataclass(frozen=True)
class RatingHistogram:
    """Review counts for ratings 1..5.

    Always holds exactly five buckets; index 0 is rating 1.
    """

    counts: tuple[int, int, int, int, int] = (0, 0, 0, 0, 0)

    def __post_init__(self) -> None:
        if len(self.counts) != len(RATING_VALUES):
            raise ValueError(f"Expected {len(RATING_VALUES)} buckets, got {len(self.counts)}")

    def count_for(self, rating: int) -> int:
        return self.counts[rating - RATING_MIN]

    def total(self) -> int:
        return sum(self.counts)

    def as_dict(self) -> dict[int, int]:
        return dict(zip(RATING_VALUES, self.counts))


@dataclass(frozen=True)
class CategoryAverages:
    """Mean score per category across a set of reviews."""

    professionalism: float = 0.0
    quality: float = 0.0
    punctuality: float = 0.0
    communication: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in CATEGORY_NAMES}


@dataclass(frozen=True)
class ReviewStats:
    """Summary of a user's verified reviews. Computed on demand."""

    total_reviews: int = 0
    average_rating: float = 0.0
    rating_distribution: RatingHistogram = field(default_factory=RatingHistogram)
    category_averages: CategoryAverages = field(default_factory=CategoryAverages)
