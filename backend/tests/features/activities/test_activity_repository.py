"""
Integration tests for the activity repositories.

Runs against an in-memory SQLite database through aiosqlite.
"""

import asyncio
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Base, register_models
from app.features.activities import (
    Activity,
    ActivityRepository,
    VariationRepository,
)
from app.shared.calculator_types import VariationRow


def run_with_session(scenario):
    """Create a fresh schema, run scenario(session), dispose the engine."""
    register_models()

    async def main():
        engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with session_factory() as session:
                return await scenario(session)
        finally:
            await engine.dispose()

    return asyncio.run(main())


def _activity(user_id, activity_id, **kwargs):
    defaults = {
        "activity_type": "Run",
        "activity_date": date(2026, 5, 20),
        "distance_m": 8000.0,
        "pace_min_per_km": 5.5,
    }
    defaults.update(kwargs)
    return Activity(user_id=user_id, activity_id=activity_id, **defaults)


async def _seed(session, activities):
    session.add_all(activities)
    await session.commit()


# =============================================================================
# Test Classification Targets
# =============================================================================

class TestClassificationTargets:

    def test_paginates_through_all_rows(self):
        async def scenario(session):
            await _seed(session, [_activity("u1", f"a{i}") for i in range(5)])
            repo = ActivityRepository(session, page_size=2)
            return await repo.list_classification_targets()

        records = run_with_session(scenario)
        assert [r.activity_id for r in records] == ["a0", "a1", "a2", "a3", "a4"]

    def test_exact_page_multiple(self):
        async def scenario(session):
            await _seed(session, [_activity("u1", f"a{i}") for i in range(4)])
            repo = ActivityRepository(session, page_size=2)
            return await repo.list_classification_targets()

        assert len(run_with_session(scenario)) == 4

    def test_only_unlabeled_by_default(self):
        async def scenario(session):
            await _seed(session, [
                _activity("u1", "a1"),
                _activity("u1", "a2", detected_workout_type="easy_run"),
            ])
            repo = ActivityRepository(session)
            return (
                await repo.list_classification_targets(),
                await repo.list_classification_targets(reclassify=True),
            )

        unlabeled, everything = run_with_session(scenario)
        assert [r.activity_id for r in unlabeled] == ["a1"]
        assert len(everything) == 2

    def test_user_filter(self):
        async def scenario(session):
            await _seed(session, [_activity("u1", "a1"), _activity("u2", "b1")])
            return await ActivityRepository(session).list_classification_targets(user_id="u2")

        assert [r.user_id for r in run_with_session(scenario)] == ["u2"]


class TestWriteBack:

    def test_set_workout_type(self):
        async def scenario(session):
            await _seed(session, [_activity("u1", "a1")])
            repo = ActivityRepository(session)
            updated = await repo.set_workout_type("u1", "a1", "tempo_run")
            missing = await repo.set_workout_type("u1", "nope", "tempo_run")
            await repo.commit()
            remaining = await repo.list_classification_targets()
            return updated, missing, remaining

        updated, missing, remaining = run_with_session(scenario)
        assert updated is True
        assert missing is False
        assert remaining == []

    def test_rollback_discards_uncommitted_labels(self):
        async def scenario(session):
            await _seed(session, [_activity("u1", "a1"), _activity("u1", "a2")])
            repo = ActivityRepository(session)
            await repo.set_workout_type("u1", "a1", "tempo_run")
            await repo.rollback()
            return await repo.list_classification_targets()

        assert [r.activity_id for r in run_with_session(scenario)] == ["a1", "a2"]


# =============================================================================
# Test History Reads
# =============================================================================

class TestHistoryReads:

    def test_history_paces_filtered(self):
        async def scenario(session):
            await _seed(session, [
                _activity("u1", "ok", pace_min_per_km=5.0),
                _activity("u1", "short", pace_min_per_km=4.0, distance_m=800.0),
                _activity("u1", "stopped", pace_min_per_km=75.0),
                _activity("u1", "zero", pace_min_per_km=0.0),
                _activity("u1", "no-pace", pace_min_per_km=None),
                _activity("u1", "ride", pace_min_per_km=2.0, activity_type="Ride"),
                _activity("u2", "other", pace_min_per_km=4.5),
            ])
            return await ActivityRepository(session, page_size=2).get_history_paces("u1")

        assert sorted(run_with_session(scenario)) == [2.0, 5.0]

    def test_count_user_runs(self):
        async def scenario(session):
            await _seed(session, [
                _activity("u1", "a1", activity_type="Run"),
                _activity("u1", "a2", activity_type="TrailRun"),
                _activity("u1", "a3", activity_type="Ride"),
                _activity("u1", "a4", activity_date=date(2026, 1, 1)),
                _activity("u2", "b1"),
            ])
            return await ActivityRepository(session).count_user_runs("u1", date(2026, 5, 1))

        assert run_with_session(scenario) == 2

    def test_runs_since(self):
        async def scenario(session):
            await _seed(session, [
                _activity("u1", "a1"),
                _activity("u2", "b1", activity_type="treadmill_running"),
                _activity("u2", "b2", activity_type="Walk"),
                _activity("u3", "c1", activity_date=date(2025, 12, 1)),
            ])
            repo = ActivityRepository(session, page_size=1)
            return (
                await repo.get_runs_since(date(2026, 5, 1)),
                await repo.get_user_runs_since("u2", date(2026, 5, 1)),
            )

        everyone, u2 = run_with_session(scenario)
        assert [r.activity_id for r in everyone] == ["a1", "b1"]
        assert [r.activity_id for r in u2] == ["b1"]
        assert everyone[0].activity_date == date(2026, 5, 20)


# =============================================================================
# Test Variation Store
# =============================================================================

class TestVariationRepository:

    def test_upsert_and_chunked_get(self):
        async def scenario(session):
            repo = VariationRepository(session)
            for row in [
                VariationRow("u1", "a1", cv_pace=0.1, cv_hr=0.05),
                VariationRow("u1", "a2", cv_pace=0.2, cv_hr=None),
                VariationRow("u1", "a3", cv_pace=None, cv_hr=None),
                VariationRow("u2", "a1", cv_pace=0.9, cv_hr=0.9),
            ]:
                await repo.upsert(row)
            await repo.upsert(VariationRow("u1", "a1", cv_pace=0.12, cv_hr=0.06))
            await repo.commit()
            return await repo.get_for_activities("u1", ["a1", "a2", "a3", "missing"], chunk_size=2)

        rows = run_with_session(scenario)
        assert set(rows) == {"a1", "a2", "a3"}
        assert rows["a1"].cv_pace == 0.12
        assert rows["a1"].cv_hr == 0.06
        assert rows["a2"].cv_hr is None

    def test_empty_id_list(self):
        async def scenario(session):
            return await VariationRepository(session).get_for_activities("u1", [])

        assert run_with_session(scenario) == {}
