"""Tests for reviews and user review stats API endpoints."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from taskmarket.db.schema import Base, Review


def create_test_app_and_client(create_tables: bool = True):
    """Create app with test database and return (client, engine)."""
    from taskmarket.api.app import create_app, get_db_session

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if create_tables:
        Base.metadata.create_all(engine)

    app = create_app()

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db
    client = TestClient(app)

    return client, engine


def review_payload(**overrides) -> dict:
    payload = {
        "task_id": "task-001",
        "reviewer_id": "client-001",
        "reviewed_user_id": "provider-001",
        "rating": 5,
        "comment": "Excellent work",
        "categories": {"professionalism": 5, "quality": 4},
    }
    payload.update(overrides)
    return payload


def submit_and_verify(client: TestClient, **overrides) -> str:
    """Submit a review, verify it, return its id."""
    response = client.post("/api/reviews", json=review_payload(**overrides))
    assert response.status_code == 201
    review_id = response.json()["review_id"]
    assert client.post(f"/api/reviews/{review_id}/verify").status_code == 200
    return review_id


class TestSubmitReviewEndpoint:
    """Test POST /api/reviews."""

    def test_returns_201_for_valid_review(self):
        """Returns 201 Created with the review id."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/reviews", json=review_payload())

        assert response.status_code == 201
        data = response.json()
        assert "review_id" in data
        assert data["task_id"] == "task-001"

    def test_creates_review_record(self):
        """Creates review record with category defaults."""
        client, engine = create_test_app_and_client()

        client.post("/api/reviews", json=review_payload())

        with Session(engine) as session:
            reviews = session.query(Review).all()
            assert len(reviews) == 1
            assert reviews[0].quality == 4
            assert reviews[0].punctuality == 5
            assert reviews[0].is_verified is False

    def test_returns_409_for_duplicate(self):
        """Second review of a task by the same reviewer conflicts."""
        client, _ = create_test_app_and_client()
        client.post("/api/reviews", json=review_payload())

        response = client.post("/api/reviews", json=review_payload(rating=1))

        assert response.status_code == 409

    def test_padded_max_length_comment_accepted(self):
        """Length is checked after trimming surrounding whitespace."""
        client, engine = create_test_app_and_client()

        response = client.post("/api/reviews", json=review_payload(comment="  " + "x" * 500 + "  "))

        assert response.status_code == 201
        with Session(engine) as session:
            assert session.query(Review).one().comment == "x" * 500

    def test_returns_400_for_self_review(self):
        """Self-reviews are rejected."""
        client, _ = create_test_app_and_client()

        response = client.post(
            "/api/reviews", json=review_payload(reviewed_user_id="client-001")
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rating": 0},
            {"rating": 6},
            {"comment": ""},
            {"comment": "    "},
            {"comment": "x" * 501},
            {"categories": {"quality": 7}},
        ],
    )
    def test_returns_422_for_invalid_body(self, overrides):
        """Invalid fields fail request validation."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/reviews", json=review_payload(**overrides))

        assert response.status_code == 422


class TestReviewDetailEndpoints:
    """Test GET /api/reviews/{id}, verify and report."""

    def test_get_review(self):
        """Returns review detail."""
        client, _ = create_test_app_and_client()
        review_id = client.post("/api/reviews", json=review_payload()).json()["review_id"]

        response = client.get(f"/api/reviews/{review_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["review_id"] == review_id
        assert data["categories"]["professionalism"] == 5
        assert data["is_verified"] is False
        assert data["category_average"] == 4.75

    def test_get_review_404(self):
        """Returns 404 for nonexistent review."""
        client, _ = create_test_app_and_client()
        assert client.get("/api/reviews/nonexistent").status_code == 404

    def test_verify_review(self):
        """Verify endpoint marks the review verified."""
        client, _ = create_test_app_and_client()
        review_id = client.post("/api/reviews", json=review_payload()).json()["review_id"]

        response = client.post(f"/api/reviews/{review_id}/verify")

        assert response.status_code == 200
        assert response.json()["is_verified"] is True

    def test_verify_review_404(self):
        """Verifying an unknown review returns 404."""
        client, _ = create_test_app_and_client()
        assert client.post("/api/reviews/nonexistent/verify").status_code == 404

    def test_report_review(self):
        """Report endpoint stores the reason."""
        client, _ = create_test_app_and_client()
        review_id = client.post("/api/reviews", json=review_payload()).json()["review_id"]

        response = client.post(f"/api/reviews/{review_id}/report", json={"reason": "Spam"})

        assert response.status_code == 200
        data = response.json()
        assert data["is_reported"] is True
        assert data["report_reason"] == "Spam"

    def test_report_review_404(self):
        """Reporting an unknown review returns 404."""
        client, _ = create_test_app_and_client()
        response = client.post("/api/reviews/nonexistent/report", json={"reason": "Spam"})
        assert response.status_code == 404


class TestUserReviewEndpoints:
    """Test /api/users/{user_id}/reviews endpoints."""

    def test_stats_for_user_without_reviews(self):
        """Unknown users get the exact empty summary."""
        client, _ = create_test_app_and_client()

        response = client.get("/api/users/nobody/reviews/stats")

        assert response.status_code == 200
        assert response.json() == {
            "user_id": "nobody",
            "total_reviews": 0,
            "average_rating": 0.0,
            "rating_distribution": {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0},
            "category_averages": {
                "professionalism": 0.0,
                "quality": 0.0,
                "punctuality": 0.0,
                "communication": 0.0,
            },
        }

    def test_stats_count_only_verified_reviews(self):
        """Unverified reviews and other users' reviews are ignored."""
        client, _ = create_test_app_and_client()
        submit_and_verify(client, task_id="t1", rating=5, categories={"professionalism": 5})
        submit_and_verify(client, task_id="t2", rating=5, categories={"professionalism": 5})
        submit_and_verify(client, task_id="t3", rating=4, categories={"professionalism": 3})
        client.post("/api/reviews", json=review_payload(task_id="t4", rating=1))
        submit_and_verify(client, task_id="t5", rating=1, reviewed_user_id="provider-002")

        data = client.get("/api/users/provider-001/reviews/stats").json()

        assert data["total_reviews"] == 3
        assert data["average_rating"] == pytest.approx(14 / 3)
        assert data["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 2}
        assert data["category_averages"]["professionalism"] == pytest.approx(13 / 3)
        assert data["category_averages"]["communication"] == 5.0

    def test_average_rating(self):
        """Average endpoint returns the mean verified rating."""
        client, _ = create_test_app_and_client()
        submit_and_verify(client, task_id="t1", rating=3)
        submit_and_verify(client, task_id="t2", rating=4)

        response = client.get("/api/users/provider-001/reviews/average")

        assert response.status_code == 200
        assert response.json() == {"user_id": "provider-001", "average_rating": 3.5}

    def test_list_user_reviews(self):
        """Lists only verified reviews received by the user."""
        client, _ = create_test_app_and_client()
        verified_id = submit_and_verify(client, task_id="t1")
        client.post("/api/reviews", json=review_payload(task_id="t2"))

        response = client.get("/api/users/provider-001/reviews")

        assert response.status_code == 200
        assert [r["review_id"] for r in response.json()] == [verified_id]

    def test_list_reviews_written(self):
        """Lists every review the user wrote, verified or not."""
        client, _ = create_test_app_and_client()
        verified_id = submit_and_verify(client, task_id="t1")
        pending_id = client.post("/api/reviews", json=review_payload(task_id="t2")).json()[
            "review_id"
        ]
        client.post("/api/reviews", json=review_payload(task_id="t3", reviewer_id="client-002"))

        response = client.get("/api/users/client-001/reviews/written")

        assert response.status_code == 200
        assert {r["review_id"] for r in response.json()} == {verified_id, pending_id}
        assert all(r["reviewer_id"] == "client-001" for r in response.json())

    def test_stats_503_when_store_unavailable(self):
        """Store outages are reported as 503, not as zero reviews."""
        client, _ = create_test_app_and_client(create_tables=False)

        response = client.get("/api/users/provider-001/reviews/stats")

        assert response.status_code == 503


class TestHealth:
    """Test GET /health."""

    def test_health(self):
        """Health check returns ok."""
        client, _ = create_test_app_and_client()
        assert client.get("/health").json() == {"status": "ok"}
