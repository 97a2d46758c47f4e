"""
Tests for WorkoutTypeClassifier.

Covers each rule of the cascade, rule ordering and metric derivation.
"""

import dataclasses

import pytest

from app.features.classification import (
    WorkoutTypeClassifier,
    WorkoutType,
    ClassifierThresholds,
    ActivityMetrics,
    UserHistoryBaseline,
)
from app.shared.calculator_types import ActivityRecord, VariationRow


@pytest.fixture
def classifier():
    return WorkoutTypeClassifier()


@pytest.fixture
def baseline():
    return UserHistoryBaseline(best_pace=4.5, p75_pace=6.0)


def _metrics(**kwargs) -> ActivityMetrics:
    """Running-speed defaults so the walk rule stays quiet."""
    defaults = {"avg_speed_m_s": 3.0}
    defaults.update(kwargs)
    return ActivityMetrics(**defaults)


# =============================================================================
# Test Rules
# =============================================================================

class TestWalkOrInvalid:
    """Rule 1: slow or low heart rate."""

    def test_slow_speed(self, classifier, baseline):
        result = classifier.classify(_metrics(avg_speed_m_s=1.2, distance_km=5), baseline)
        assert result.workout_type == WorkoutType.WALK_OR_INVALID

    def test_low_heart_rate(self, classifier, baseline):
        result = classifier.classify(_metrics(avg_hr=85, distance_km=5), baseline)
        assert result.workout_type == WorkoutType.WALK_OR_INVALID

    def test_walk_wins_over_long_run(self, classifier, baseline):
        metrics = _metrics(
            avg_speed_m_s=1.4, distance_km=16, pace_cv=0.05, avg_hr=156, max_hr=200
        )
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.WALK_OR_INVALID


class TestLongRun:
    """Rule 2: long, steady, aerobic."""

    def test_long_run(self, classifier, baseline):
        metrics = _metrics(
            distance_km=16, avg_pace_min_km=5.5, pace_cv=0.05, avg_hr=156, max_hr=200
        )
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.LONG_RUN

    def test_hr_outside_aerobic_band(self, classifier, baseline):
        metrics = _metrics(distance_km=16, pace_cv=0.05, avg_hr=180, max_hr=200)
        assert classifier.classify(metrics, baseline).workout_type != WorkoutType.LONG_RUN

    def test_missing_pace_cv_never_matches(self, classifier, baseline):
        metrics = _metrics(distance_km=16, avg_hr=156, max_hr=200)
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.UNCLASSIFIED


class TestInterval:
    """Rule 3: uneven pace, under 70 minutes."""

    def test_interval(self, classifier, baseline):
        metrics = _metrics(distance_km=9, pace_cv=0.25, duration_s=3000)
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.INTERVAL_OR_FARTLEK

    def test_duration_cutoff_is_exclusive(self, classifier):
        metrics = _metrics(distance_km=9, pace_cv=0.25, duration_s=4200)
        assert classifier.classify(metrics).workout_type == WorkoutType.UNCLASSIFIED


class TestTempo:
    """Rule 4: near best pace at threshold heart rate."""

    def test_tempo(self, classifier, baseline):
        metrics = _metrics(distance_km=8, avg_pace_min_km=4.7, avg_hr=170, max_hr=200)
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.TEMPO_RUN

    def test_needs_history(self, classifier):
        metrics = _metrics(distance_km=8, avg_pace_min_km=4.7, avg_hr=170, max_hr=200)
        assert classifier.classify(metrics, UserHistoryBaseline()).workout_type == WorkoutType.UNCLASSIFIED


class TestEasy:
    """Rule 5: well slower than best pace, steady heart rate."""

    def test_easy(self, classifier, baseline):
        metrics = _metrics(
            distance_km=8, avg_pace_min_km=6.0, hr_cv=0.05, avg_hr=140, max_hr=200
        )
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.EASY_RUN

    def test_unsteady_heart_rate(self, classifier, baseline):
        metrics = _metrics(
            distance_km=8, avg_pace_min_km=6.0, hr_cv=0.12, avg_hr=140, max_hr=200
        )
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.UNCLASSIFIED


class TestRecovery:
    """Rule 6: short, slow, low heart rate."""

    def test_recovery(self, classifier, baseline):
        metrics = _metrics(distance_km=4, avg_pace_min_km=7.0, avg_hr=120, max_hr=190)
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.RECOVERY_RUN

    def test_low_fraction_of_max(self, classifier, baseline):
        """130 bpm is above the absolute cutoff but under 65% of 210."""
        metrics = _metrics(distance_km=4, avg_pace_min_km=7.0, avg_hr=130, max_hr=210)
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.RECOVERY_RUN

    def test_not_slower_than_usual(self, classifier, baseline):
        metrics = _metrics(distance_km=4, avg_pace_min_km=5.8, avg_hr=120, max_hr=190)
        assert classifier.classify(metrics, baseline).workout_type == WorkoutType.UNCLASSIFIED


class TestUnclassified:

    def test_all_missing(self, classifier):
        result = classifier.classify(ActivityMetrics())

        assert result.workout_type == WorkoutType.UNCLASSIFIED
        assert result.reason == "No rule matched"


# =============================================================================
# Test Metrics
# =============================================================================

class TestActivityMetrics:
    """Tests for ActivityMetrics.from_record()."""

    def test_duration_from_pace(self):
        record = ActivityRecord(user_id="u1", activity_id="a1", distance_m=10000, pace_min_per_km=5.0)
        metrics = ActivityMetrics.from_record(record)

        assert metrics.distance_km == 10.0
        assert metrics.duration_s == 3000
        assert metrics.avg_speed_m_s == pytest.approx(1000 / 300)

    def test_explicit_duration_minutes(self):
        record = ActivityRecord(
            user_id="u1", activity_id="a1",
            distance_m=10000, duration_min=52, pace_min_per_km=5.0,
        )
        assert ActivityMetrics.from_record(record).duration_s == 3120

    def test_speed_from_distance_and_duration(self):
        record = ActivityRecord(user_id="u1", activity_id="a1", distance_m=5000, duration_s=2000)
        metrics = ActivityMetrics.from_record(record)

        assert metrics.avg_pace_min_km is None
        assert metrics.avg_speed_m_s == pytest.approx(2.5)

    def test_missing_distance(self):
        record = ActivityRecord(user_id="u1", activity_id="a1", pace_min_per_km=5.0)
        metrics = ActivityMetrics.from_record(record)

        assert metrics.distance_km is None
        assert metrics.duration_s is None

    def test_variation_attached(self):
        record = ActivityRecord(user_id="u1", activity_id="a1", distance_m=5000)
        variation = VariationRow(user_id="u1", activity_id="a1", cv_pace=0.12, cv_hr=None)
        metrics = ActivityMetrics.from_record(record, variation)

        assert metrics.pace_cv == 0.12
        assert metrics.hr_cv is None

    def test_hr_percent_of_max(self):
        assert _metrics(avg_hr=150, max_hr=200).hr_percent_of_max == 0.75
        assert _metrics(avg_hr=150).hr_percent_of_max is None


class TestUserHistoryBaseline:

    def test_from_paces(self):
        baseline = UserHistoryBaseline.from_paces([6.5, 4.5, 5.0, 6.0, 5.5])

        assert baseline.best_pace == 4.5
        assert baseline.p75_pace == 6.0

    def test_empty_history(self):
        baseline = UserHistoryBaseline.from_paces([])

        assert baseline.best_pace is None
        assert baseline.p75_pace is None


# =============================================================================
# Test Configuration
# =============================================================================

class TestThresholds:

    def test_override(self, baseline):
        classifier = WorkoutTypeClassifier(ClassifierThresholds(walk_max_speed_m_s=3.5))
        result = classifier.classify(_metrics(avg_speed_m_s=3.0, distance_km=5), baseline)

        assert result.workout_type == WorkoutType.WALK_OR_INVALID

    def test_frozen(self):
        thresholds = ClassifierThresholds()
        with pytest.raises(dataclasses.FrozenInstanceError):
            thresholds.walk_max_speed_m_s = 2.0
