"""
Tests for SkillLevelService.

Uses an in-memory activity repository keyed by activity date.
"""

import asyncio
from datetime import date, timedelta

import pytest

from app.features.skill_level import SkillLevelService, SkillTier
from app.shared.calculator_types import ActivityRecord
from app.shared.exceptions import HistoryUnavailableError


TODAY = date(2026, 6, 1)


class FakeActivityRepository:

    def __init__(self, records):
        self.records = records
        self.count_calls = []
        self.population_loads = 0
        self.fail = False

    async def count_user_runs(self, user_id, since):
        if self.fail:
            raise RuntimeError("database is locked")
        self.count_calls.append((since - TODAY).days * -1)
        return sum(
            1 for r in self.records
            if r.user_id == user_id and r.is_run and r.activity_date >= since
        )

    async def get_runs_since(self, since):
        self.population_loads += 1
        return [r for r in self.records if r.is_run and r.activity_date >= since]


def _runs(user_id, days_ago, distance_m=8000, duration_min=45, pace=5.6):
    return [
        ActivityRecord(
            user_id=user_id,
            activity_id=f"{user_id}-{d}",
            activity_date=TODAY - timedelta(days=d),
            distance_m=distance_m,
            duration_min=duration_min,
            pace_min_per_km=pace,
            activity_type="Run",
        )
        for d in days_ago
    ]


def _estimate(repo, user_id, lookback_days=None):
    service = SkillLevelService(repo, seed=42)
    return asyncio.run(service.estimate(user_id, lookback_days=lookback_days, today=TODAY))


class TestAdaptiveLookback:

    def test_widens_to_120(self):
        records = (
            _runs("target", [60, 70, 80, 90, 100, 110])
            + _runs("other", [5, 10, 15], distance_m=12000, pace=4.8)
        )
        repo = FakeActivityRepository(records)

        result = _estimate(repo, "target", lookback_days=56)

        assert repo.count_calls == [56, 120]
        assert result.lookback_days_used == 120
        assert result.population_size == 2
        assert result.reason_if_no_data is None

    def test_stops_at_first_sufficient_window(self):
        repo = FakeActivityRepository(_runs("target", [1, 2, 3, 4, 5, 6]))

        result = _estimate(repo, "target", lookback_days=56)

        assert repo.count_calls == [56]
        assert result.lookback_days_used == 56

    def test_reaches_180_with_few_runs(self):
        repo = FakeActivityRepository(_runs("target", [150, 160]))

        result = _estimate(repo, "target", lookback_days=56)

        assert result.lookback_days_used == 180
        assert result.reason_if_no_data is None
        assert result.tier == SkillTier.BEGINNER

    def test_short_request_clamped(self):
        repo = FakeActivityRepository(_runs("target", [1, 2, 3, 4, 5, 6]))

        result = _estimate(repo, "target", lookback_days=7)

        assert result.lookback_days_used == 14


class TestNoData:

    def test_no_runs(self):
        repo = FakeActivityRepository(_runs("someone-else", [3, 4]))

        result = _estimate(repo, "target")

        assert result.tier == SkillTier.BEGINNER
        assert result.reason_if_no_data == "no_data"
        assert result.lookback_days_used == 180
        assert repo.population_loads == 0

    def test_repository_failure(self):
        repo = FakeActivityRepository([])
        repo.fail = True

        with pytest.raises(HistoryUnavailableError):
            _estimate(repo, "target")
