"""
API tests for the v1 analytics endpoints.

Each request gets its own in-memory database seeded with one runner,
their activity history and an active training plan.
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.session import get_async_db
from app.models import Base, register_models
from app.features.activities import Activity
from app.features.plans.models import TrainingPlan, TrainingPlanWorkout
from app.features.users import User


def _seed_rows():
    today = date.today()
    user = User(id="u1", email="runner@example.com", name="Runner")
    plan = TrainingPlan(id="plan-1", user_id="u1", status="active", goal_type="10k")
    workouts = [
        TrainingPlanWorkout(
            plan_id="plan-1", week_number=1, title="Easy", workout_type="easy",
            target_pace_min_per_km=6.0, duration_minutes=40,
        ),
        TrainingPlanWorkout(
            plan_id="plan-1", week_number=1, title="Tempo", workout_type="tempo",
            target_pace_min_per_km=7.5, duration_minutes=40, description="Tempo 40min",
        ),
    ]
    activities = [
        Activity(
            user_id="u1", activity_id=f"a{i}", activity_type="Run",
            activity_date=today - timedelta(days=3 * i + 1),
            distance_m=8000.0, duration_min=46.0, pace_min_per_km=5.75,
            avg_hr=140.0, max_hr=190.0,
        )
        for i in range(2)
    ]
    return [user, plan, *workouts, *activities]


async def override_get_async_db():
    register_models()
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        session.add_all(_seed_rows())
        await session.commit()
        try:
            yield session
        finally:
            await session.close()
    await engine.dispose()


@pytest.fixture
def client():
    app.dependency_overrides[get_async_db] = override_get_async_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Test Health
# =============================================================================

class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}


# =============================================================================
# Test Classification
# =============================================================================

class TestClassificationRoute:

    def test_run(self, client):
        response = client.post("/api/v1/classification/run", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["processed"] == 2
        assert data["updated"] == 2
        assert data["errors"] == []
        assert {r["activity_id"] for r in data["results"]} == {"a0", "a1"}

    def test_user_filter(self, client):
        response = client.post("/api/v1/classification/run", json={"user_id": "nobody"})

        assert response.status_code == 200
        assert response.json()["processed"] == 0


# =============================================================================
# Test Skill Level
# =============================================================================

class TestSkillLevelRoute:

    def test_known_runner(self, client):
        response = client.post("/api/v1/skill-level", json={"user_id": "u1"})

        assert response.status_code == 200
        data = response.json()
        assert data["tier"] == "Beginner"
        assert data["population_size"] == 1
        assert data["method"] == "kmeans+pca+percentiles"
        assert data["reason_if_no_data"] is None

    def test_no_data(self, client):
        response = client.post("/api/v1/skill-level", json={"user_id": "ghost"})

        assert response.status_code == 200
        data = response.json()
        assert data["tier"] == "Beginner"
        assert data["reason_if_no_data"] == "no_data"
        assert data["lookback_days_used"] == 180

    def test_invalid_lookback(self, client):
        response = client.post("/api/v1/skill-level", json={"user_id": "u1", "lookback_days": 0})
        assert response.status_code == 422


# =============================================================================
# Test Variation
# =============================================================================

class TestVariationRoute:

    def test_analyze(self, client):
        response = client.post("/api/v1/variation/analyze", json={
            "user_id": "u1",
            "activity_id": "a0",
            "samples": [
                {"heart_rate": 150, "pace_min_km": 5.0},
                {"heart_rate": 160, "pace_min_km": 5.5},
                {"heart_rate": 300, "speed_m_s": 3.0},
            ],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["heart_rate"]["count"] == 2
        assert data["pace"]["count"] == 3
        assert data["hr_category"] == "low"
        assert data["persisted"] is True

    def test_insufficient(self, client):
        response = client.post("/api/v1/variation/analyze", json={
            "user_id": "u1",
            "activity_id": "a0",
            "samples": [{"heart_rate": 150}],
            "persist": False,
        })

        data = response.json()
        assert data["heart_rate"]["status"] == "insufficient_data"
        assert data["diagnosis"] is None


# =============================================================================
# Test Safety
# =============================================================================

class TestSafetyRoutes:

    def test_recalibrate(self, client):
        response = client.post("/api/v1/safety/recalibrate", json={"plan_id": "plan-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["total_workouts_processed"] == 2
        assert data["critical_issues_fixed"] == 1
        assert data["safe_paces"]["source"] == "age_defaults"
        tempo = data["per_workout_corrections"][1]
        assert tempo["safe_duration"] == 30.0
        assert tempo["description"] == "Tempo 30min"

    def test_recalibrate_by_email(self, client):
        response = client.post(
            "/api/v1/safety/recalibrate", json={"user_email": "runner@example.com"}
        )

        assert response.status_code == 200
        assert response.json()["plan_id"] == "plan-1"

    def test_recalibrate_missing_plan(self, client):
        response = client.post("/api/v1/safety/recalibrate", json={"plan_id": "missing"})
        assert response.status_code == 404

    def test_recalibrate_requires_target(self, client):
        response = client.post("/api/v1/safety/recalibrate", json={})
        assert response.status_code == 422

    def test_clamp_with_defaults(self, client):
        response = client.post("/api/v1/safety/clamp", json={
            "user_id": "ghost",
            "workout_type": "easy",
            "pace_min_km": 5.0,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["pace_min_km"] == 9.75
        assert data["changed"] is True
        assert data["safe_paces"]["pace_10k"] == 7.02

    def test_sanitize(self, client):
        response = client.post("/api/v1/safety/sanitize", json={
            "user_id": "ghost",
            "workouts": [
                {"workout_type": "interval", "target_pace_min_per_km": 2.5},
                {"workout_type": "tempo", "target_pace_min_per_km": 8.0, "duration_minutes": 40},
            ],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["critical_issues_fixed"] == 1
        assert data["workouts"][0]["safe_pace"] == 3.0
        assert data["workouts"][1]["safe_duration"] == 40

    def test_service_uses_configured_page_size(self, monkeypatch):
        from app.api.v1.routes import safety as safety_routes

        monkeypatch.setattr(safety_routes.settings, "history_page_size", 7)

        service = safety_routes._service(object())
        assert service.activity_repo.page_size == 7
