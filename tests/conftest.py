"""Shared pytest fixtures for taskmarket tests."""

import itertools

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taskmarket.db.schema import Base, Review


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def add_review(session):
    """Insert a Review row with sensible defaults; returns the row."""
    counter = itertools.count(1)

    def _add(
        reviewed_user_id: str = "user-u",
        rating: int = 5,
        is_verified: bool = True,
        professionalism: int = 5,
        quality: int = 5,
        punctuality: int = 5,
        communication: int = 5,
        **overrides,
    ) -> Review:
        n = next(counter)
        review = Review(
            review_id=overrides.pop("review_id", f"review-{n:03d}"),
            task_id=overrides.pop("task_id", f"task-{n:03d}"),
            reviewer_id=overrides.pop("reviewer_id", f"reviewer-{n:03d}"),
            reviewed_user_id=reviewed_user_id,
            rating=rating,
            comment=overrides.pop("comment", "Great job"),
            professionalism=professionalism,
            quality=quality,
            punctuality=punctuality,
            communication=communication,
            is_verified=is_verified,
            **overrides,
        )
        session.add(review)
        session.commit()
        return review

    return _add
