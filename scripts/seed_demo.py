#!/usr/bin/env python3
"""Seed a demo database with reviews.

Creates a handful of reviews for a demo user, verifies most of them and
prints the resulting review statistics.

Usage:
    python scripts/seed_demo.py

Set TASKMARKET_DEMO_DB_PATH to write the demo database elsewhere.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from taskmarket.aggregation.review_stats import compute_review_stats  # noqa: E402
from taskmarket.db.schema import Review  # noqa: E402
from taskmarket.db.session import get_session, init_db  # noqa: E402
from taskmarket.models.domain import ReviewCategories  # noqa: E402
from taskmarket.reviews.submission import ReviewInput, submit_review, verify_review  # noqa: E402

# Constants
DEMO_DB_PATH = Path(os.environ.get("TASKMARKET_DEMO_DB_PATH", PROJECT_ROOT / "demo.db"))
DEMO_USER_ID = "demo_provider"

# (task_id, reviewer_id, rating, comment, categories, verified)
DEMO_REVIEWS = [
    ("task-001", "client-a", 5, "Fixed the sink in an hour.", ReviewCategories(), True),
    ("task-002", "client-b", 4, "Good work, arrived late.", ReviewCategories(punctuality=3), True),
    (
        "task-003",
        "client-c",
        5,
        "Very professional.",
        ReviewCategories(communication=4),
        True,
    ),
    ("task-004", "client-d", 2, "Left a mess.", ReviewCategories(quality=2), False),
]


def seed_database() -> None:
    """Seed the demo database with reviews for the demo user."""
    init_db(DEMO_DB_PATH)
    session = get_session(DEMO_DB_PATH)

    try:
        existing = session.query(Review).filter(Review.reviewed_user_id == DEMO_USER_ID).count()
        if existing:
            print(f"Demo reviews already exist for {DEMO_USER_ID}")
            return

        print("Creating reviews...")
        for task_id, reviewer_id, rating, comment, categories, verified in DEMO_REVIEWS:
            result = submit_review(
                session,
                ReviewInput(
                    task_id=task_id,
                    reviewer_id=reviewer_id,
                    reviewed_user_id=DEMO_USER_ID,
                    rating=rating,
                    comment=comment,
                    categories=categories,
                ),
            )
            if verified:
                verify_review(session, result.review_id)
            print(f"  {result.review_id} ({rating} stars, verified={verified})")
    finally:
        session.close()


def print_stats() -> None:
    """Print review statistics for the demo user."""
    session = get_session(DEMO_DB_PATH)
    try:
        stats = compute_review_stats(session, DEMO_USER_ID)
    finally:
        session.close()

    print(f"\nStats for {DEMO_USER_ID}:")
    print(f"  total_reviews: {stats.total_reviews}")
    print(f"  average_rating: {stats.average_rating:.2f}")
    print(f"  rating_distribution: {stats.rating_distribution.as_dict()}")
    for name, value in stats.category_averages.as_dict().items():
        print(f"  {name}: {value:.2f}")


def main() -> int:
    seed_database()
    print_stats()
    return 0


if __name__ == "__main__":
    sys.exit(main())
