"""
Tests for ActivityFeatureExtractor.

Tests sample filtering, CV computation and the insufficient-data state.
"""

import math
import statistics

import pytest

from app.features.variation import (
    ActivityFeatureExtractor,
    StreamSample,
    SeriesStats,
    VariationStats,
    STATUS_OK,
    STATUS_INSUFFICIENT,
)
from app.shared.stats import coefficient_of_variation


@pytest.fixture
def extractor():
    return ActivityFeatureExtractor()


# =============================================================================
# Test Filtering
# =============================================================================

class TestFiltering:
    """Invalid samples never reach the aggregates."""

    def test_heart_rate_bounds(self, extractor):
        samples = [
            StreamSample(heart_rate=150),
            StreamSample(heart_rate=0),
            StreamSample(heart_rate=250),
            StreamSample(heart_rate=160),
            StreamSample(heart_rate=float("nan")),
            StreamSample(heart_rate=None),
        ]
        assert extractor.valid_heart_rates(samples) == [150, 160]

    def test_implausible_pace_dropped(self, extractor):
        samples = [
            StreamSample(pace_min_km=5.0),
            StreamSample(pace_min_km=25.0),
            StreamSample(pace_min_km=-1.0),
            StreamSample(pace_min_km=float("inf")),
        ]
        assert extractor.valid_paces(samples) == [5.0]

    def test_pace_derived_from_speed(self, extractor):
        samples = [StreamSample(speed_m_s=1000 / 300), StreamSample(speed_m_s=0)]
        paces = extractor.valid_paces(samples)

        assert len(paces) == 1
        assert paces[0] == pytest.approx(5.0)

    def test_pace_field_wins_over_speed(self):
        sample = StreamSample(pace_min_km=6.0, speed_m_s=1000 / 300)
        assert sample.pace == 6.0


# =============================================================================
# Test Statistics
# =============================================================================

class TestExtract:
    """Tests for extract()."""

    def test_heart_rate_cv(self, extractor):
        stats = extractor.extract([
            StreamSample(heart_rate=150, pace_min_km=5.0),
            StreamSample(heart_rate=160, pace_min_km=5.5),
        ])

        assert stats.heart_rate.status == STATUS_OK
        assert stats.heart_rate.mean == pytest.approx(155.0)
        assert stats.heart_rate.std == pytest.approx(math.sqrt(50))
        assert stats.cv_hr == pytest.approx(math.sqrt(50) / 155)

    def test_series_are_independent(self, extractor):
        """Missing HR does not hide a valid pace series."""
        stats = extractor.extract([
            StreamSample(pace_min_km=5.0),
            StreamSample(pace_min_km=6.0),
            StreamSample(pace_min_km=7.0),
        ])

        assert stats.pace.is_sufficient
        assert stats.cv_pace == pytest.approx(1.0 / 6.0)
        assert stats.heart_rate.status == STATUS_INSUFFICIENT
        assert stats.cv_hr is None

    def test_single_sample_is_insufficient(self, extractor):
        stats = extractor.extract([StreamSample(heart_rate=140, pace_min_km=5.0)])

        assert stats.pace.status == STATUS_INSUFFICIENT
        assert stats.pace.cv is None
        assert stats.pace.count == 1

    def test_empty_stream(self, extractor):
        stats = extractor.extract([])

        assert stats.cv_pace is None
        assert stats.cv_hr is None

    def test_cv_never_negative(self, extractor):
        stats = extractor.extract([StreamSample(heart_rate=hr) for hr in (120, 180, 140, 175)])
        assert stats.cv_hr >= 0


class TestFromSummary:
    """Tests for pre-aggregated input."""

    def test_summary(self):
        series = ActivityFeatureExtractor.from_summary(mean=5.0, std=0.5, count=10)

        assert series.status == STATUS_OK
        assert series.cv == pytest.approx(0.1)

    def test_zero_mean_is_insufficient(self):
        series = ActivityFeatureExtractor.from_summary(mean=0.0, std=1.0, count=10)
        assert series.status == STATUS_INSUFFICIENT
        assert series.cv is None

    def test_too_few_samples(self):
        series = ActivityFeatureExtractor.from_summary(mean=5.0, std=0.5, count=1)
        assert series.status == STATUS_INSUFFICIENT

    def test_missing_std(self):
        series = ActivityFeatureExtractor.from_summary(mean=5.0, std=None, count=10)
        assert series.status == STATUS_INSUFFICIENT


# =============================================================================
# Test Diagnosis
# =============================================================================

def _stats(cv_pace, cv_hr):
    def series(cv):
        if cv is None:
            return SeriesStats.insufficient(0)
        return SeriesStats(status=STATUS_OK, count=10, mean=1.0, std=cv, cv=cv)
    return VariationStats(pace=series(cv_pace), heart_rate=series(cv_hr))


class TestCategorize:
    """Tests for low/high categories and diagnosis."""

    def test_both_low(self):
        category = _stats(cv_pace=0.10, cv_hr=0.05).categorize()

        assert category.hr == "low"
        assert category.pace == "low"
        assert category.diagnosis == "Consistent pacing and excellent heart-rate control"

    def test_hr_low_pace_high(self):
        category = _stats(cv_pace=0.20, cv_hr=0.05).categorize()
        assert category.diagnosis == "Good heart-rate control, inconsistent pacing"

    def test_hr_high_pace_low(self):
        category = _stats(cv_pace=0.05, cv_hr=0.12).categorize()
        assert category.diagnosis == "Consistent pacing, high heart-rate variability"

    def test_both_high(self):
        category = _stats(cv_pace=0.30, cv_hr=0.20).categorize()
        assert category.diagnosis == "High variability in both pacing and heart rate"

    def test_cutoffs_are_exclusive(self):
        """CV exactly at the cutoff is high."""
        category = _stats(cv_pace=0.15, cv_hr=0.10).categorize()

        assert category.hr == "high"
        assert category.pace == "high"

    def test_missing_series_has_no_diagnosis(self):
        category = _stats(cv_pace=0.05, cv_hr=None).categorize()

        assert category.pace == "low"
        assert category.hr is None
        assert category.diagnosis is None


class TestSeriesStats:
    """series_stats() shares the CV helper with the rest of the analytics."""

    def test_matches_shared_cv(self):
        values = [150.0, 160.0, 171.0]
        series = ActivityFeatureExtractor.series_stats(values)

        assert series.cv == coefficient_of_variation(values)
        assert series.std == pytest.approx(statistics.stdev(values))

    def test_zero_mean_is_insufficient(self):
        series = ActivityFeatureExtractor.series_stats([-1.0, 1.0])

        assert series.status == STATUS_INSUFFICIENT
        assert series.mean == 0.0
