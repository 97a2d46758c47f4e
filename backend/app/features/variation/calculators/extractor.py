"""
Activity Feature Extractor

Turns one activity's heart-rate / pace stream into mean, standard
deviation and coefficient of variation per series.

Invalid samples are dropped before aggregation:
- heart rate outside (0, 250) bpm
- pace outside (0, 20) min/km (GPS glitches, standing still)
- any non-finite value
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from app.shared.calculator_types import safe_number
from app.shared.formulas import speed_ms_to_pace
from app.shared.stats import coefficient_of_variation, mean_or_none, sample_stdev


MAX_VALID_HR = 250.0
MAX_VALID_PACE_MIN_KM = 20.0

# CV cutoffs below which a series counts as steady
LOW_HR_CV = 0.10
LOW_PACE_CV = 0.15

STATUS_OK = "ok"
STATUS_INSUFFICIENT = "insufficient_data"


@dataclass
class StreamSample:
    """One point of an activity stream. Any field may be missing."""
    heart_rate: Optional[float] = None
    pace_min_km: Optional[float] = None
    speed_m_s: Optional[float] = None

    @property
    def pace(self) -> Optional[float]:
        """Pace from the pace field, else derived from speed."""
        pace = safe_number(self.pace_min_km)
        if pace is not None:
            return pace
        return speed_ms_to_pace(safe_number(self.speed_m_s))


@dataclass
class SeriesStats:
    """Mean / std / CV of one series, or an insufficient-data marker."""
    status: str
    count: int
    mean: Optional[float] = None
    std: Optional[float] = None
    cv: Optional[float] = None

    @property
    def is_sufficient(self) -> bool:
        return self.status == STATUS_OK

    @classmethod
    def insufficient(cls, count: int, mean: Optional[float] = None) -> "SeriesStats":
        return cls(status=STATUS_INSUFFICIENT, count=count, mean=mean)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "count": self.count,
            "mean": round(self.mean, 4) if self.mean is not None else None,
            "std": round(self.std, 4) if self.std is not None else None,
            "cv": round(self.cv, 4) if self.cv is not None else None,
        }


@dataclass
class VariationCategory:
    """Low/high verdict per series plus a readable diagnosis."""
    hr: Optional[str]
    pace: Optional[str]
    diagnosis: Optional[str]


@dataclass
class VariationStats:
    """Extractor output for one activity."""
    pace: SeriesStats
    heart_rate: SeriesStats

    @property
    def cv_pace(self) -> Optional[float]:
        return self.pace.cv

    @property
    def cv_hr(self) -> Optional[float]:
        return self.heart_rate.cv

    def categorize(self) -> VariationCategory:
        """
        Label each CV as low/high and pick a diagnosis.

        Diagnosis needs both series; a missing one yields None.
        """
        hr_level = None
        pace_level = None
        if self.cv_hr is not None:
            hr_level = "low" if self.cv_hr < LOW_HR_CV else "high"
        if self.cv_pace is not None:
            pace_level = "low" if self.cv_pace < LOW_PACE_CV else "high"

        if hr_level is None or pace_level is None:
            return VariationCategory(hr=hr_level, pace=pace_level, diagnosis=None)

        if hr_level == "low" and pace_level == "low":
            diagnosis = "Consistent pacing and excellent heart-rate control"
        elif hr_level == "low":
            diagnosis = "Good heart-rate control, inconsistent pacing"
        elif pace_level == "low":
            diagnosis = "Consistent pacing, high heart-rate variability"
        else:
            diagnosis = "High variability in both pacing and heart rate"

        return VariationCategory(hr=hr_level, pace=pace_level, diagnosis=diagnosis)

    def to_dict(self) -> dict:
        category = self.categorize()
        return {
            "pace": self.pace.to_dict(),
            "heart_rate": self.heart_rate.to_dict(),
            "cv_pace": self.cv_pace,
            "cv_hr": self.cv_hr,
            "hr_category": category.hr,
            "pace_category": category.pace,
            "diagnosis": category.diagnosis,
        }


class ActivityFeatureExtractor:
    """
    Computes variability statistics for one activity.

    Usage:
        stats = ActivityFeatureExtractor().extract(samples)
        stats.cv_pace, stats.cv_hr
    """

    def __init__(
        self,
        max_hr: float = MAX_VALID_HR,
        max_pace_min_km: float = MAX_VALID_PACE_MIN_KM
    ):
        self.max_hr = max_hr
        self.max_pace_min_km = max_pace_min_km

    def valid_heart_rates(self, samples: Iterable[StreamSample]) -> list[float]:
        values = []
        for sample in samples:
            hr = safe_number(sample.heart_rate)
            if hr is not None and 0 < hr < self.max_hr:
                values.append(hr)
        return values

    def valid_paces(self, samples: Iterable[StreamSample]) -> list[float]:
        values = []
        for sample in samples:
            pace = sample.pace
            if pace is not None and 0 < pace < self.max_pace_min_km:
                values.append(pace)
        return values

    def extract(self, samples: Iterable[StreamSample]) -> VariationStats:
        """
        Compute stats for a raw stream.

        Args:
            samples: Stream points in any order

        Returns:
            VariationStats; never raises on bad data
        """
        samples = list(samples)
        return VariationStats(
            pace=self.series_stats(self.valid_paces(samples)),
            heart_rate=self.series_stats(self.valid_heart_rates(samples)),
        )

    @staticmethod
    def series_stats(values: list[float]) -> SeriesStats:
        """Mean, sample std and CV for already-validated values."""
        count = len(values)
        mean = mean_or_none(values)
        cv = coefficient_of_variation(values)
        if cv is None:
            return SeriesStats.insufficient(count, mean)
        return SeriesStats(
            status=STATUS_OK,
            count=count,
            mean=mean,
            std=sample_stdev(values),
            cv=cv,
        )

    @staticmethod
    def from_summary(
        mean: Optional[float],
        std: Optional[float],
        count: int
    ) -> SeriesStats:
        """
        Build SeriesStats from a pre-aggregated summary.

        Same rules as raw streams: fewer than 2 samples, a zero mean or
        a missing / non-finite std means insufficient data.
        """
        mean = safe_number(mean)
        std = safe_number(std)
        if count < 2 or mean is None or std is None or mean == 0 or std < 0:
            return SeriesStats.insufficient(max(count, 0), mean)
        return SeriesStats(
            status=STATUS_OK,
            count=count,
            mean=mean,
            std=std,
            cv=abs(std / mean),
        )
