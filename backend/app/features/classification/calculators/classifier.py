"""
Workout Type Classifier

Rule-based labelling of a single activity from its summary metrics,
its pace / heart-rate variability and the owner's pace history.

Rules are evaluated in a fixed order; the first match wins:
    1. walk_or_invalid      slow or very low heart rate
    2. long_run             long, steady, aerobic
    3. interval_or_fartlek  very uneven pace, under 70 min
    4. tempo_run            close to best pace, threshold heart rate
    5. easy_run             well slower than best pace, steady heart rate
    6. recovery_run         short, slow, low heart rate
    7. unclassified

A rule whose inputs are missing never matches.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Sequence

from app.shared.calculator_types import ActivityRecord, VariationRow, safe_number
from app.shared.formulas import pace_to_speed_ms
from app.shared.stats import nearest_rank_percentile


class WorkoutType(str, Enum):
    """Detected workout label written back to the activity."""
    WALK_OR_INVALID = "walk_or_invalid"
    LONG_RUN = "long_run"
    INTERVAL_OR_FARTLEK = "interval_or_fartlek"
    TEMPO_RUN = "tempo_run"
    EASY_RUN = "easy_run"
    RECOVERY_RUN = "recovery_run"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class ClassifierThresholds:
    """Empirical cutoffs of the rule cascade."""
    # walk_or_invalid
    walk_max_speed_m_s: float = 1.5
    walk_max_avg_hr: float = 90.0

    # long_run
    long_min_distance_km: float = 14.0
    long_max_pace_cv: float = 0.10
    long_hr_percent_min: float = 0.70
    long_hr_percent_max: float = 0.85

    # interval_or_fartlek
    interval_min_pace_cv: float = 0.20
    interval_max_duration_s: float = 70 * 60

    # tempo_run
    tempo_min_distance_km: float = 5.0
    tempo_max_distance_km: float = 12.0
    tempo_pace_gap_min_km: float = 0.4
    tempo_hr_percent_min: float = 0.80
    tempo_hr_percent_max: float = 0.90

    # easy_run
    easy_min_distance_km: float = 3.0
    easy_max_distance_km: float = 12.0
    easy_pace_gap_min_km: float = 1.0
    easy_max_hr_cv: float = 0.08

    # recovery_run
    recovery_max_distance_km: float = 6.0
    recovery_hr_fraction_of_max: float = 0.65
    recovery_max_avg_hr: float = 125.0


DEFAULT_THRESHOLDS = ClassifierThresholds()


@dataclass
class UserHistoryBaseline:
    """Best and 75th-percentile pace from a user's full history."""
    best_pace: Optional[float] = None
    p75_pace: Optional[float] = None

    @classmethod
    def from_paces(cls, paces: Sequence[float]) -> "UserHistoryBaseline":
        """
        Build baseline from already-validated history paces.

        Best is the minimum (fastest); p75 uses nearest rank.
        """
        if not paces:
            return cls()
        return cls(
            best_pace=min(paces),
            p75_pace=nearest_rank_percentile(paces, 75),
        )


@dataclass
class ActivityMetrics:
    """Derived quantities the rules are evaluated on."""
    distance_km: Optional[float] = None
    duration_s: Optional[float] = None
    avg_pace_min_km: Optional[float] = None
    avg_speed_m_s: Optional[float] = None
    avg_hr: Optional[float] = None
    max_hr: Optional[float] = None
    pace_cv: Optional[float] = None
    hr_cv: Optional[float] = None

    @property
    def hr_percent_of_max(self) -> Optional[float]:
        if not self.avg_hr or not self.max_hr or self.max_hr <= 0:
            return None
        return self.avg_hr / self.max_hr

    @classmethod
    def from_record(
        cls,
        record: ActivityRecord,
        variation: Optional[VariationRow] = None
    ) -> "ActivityMetrics":
        """
        Derive metrics from an activity summary and its CVs.

        Duration prefers the explicit field, else pace * km * 60.
        Speed prefers 1000 / (pace * 60), else distance / duration.
        """
        distance_m = safe_number(record.distance_m)
        distance_km = distance_m / 1000 if distance_m is not None else None
        pace = safe_number(record.pace_min_per_km)

        duration_s = record.duration_seconds
        if duration_s is not None:
            duration_s = round(duration_s)
        elif pace is not None and pace > 0 and distance_km:
            duration_s = round(pace * distance_km * 60)

        avg_speed = pace_to_speed_ms(pace)
        if avg_speed is None and distance_m and distance_m > 0 and duration_s:
            avg_speed = distance_m / duration_s

        return cls(
            distance_km=distance_km,
            duration_s=duration_s,
            avg_pace_min_km=pace,
            avg_speed_m_s=avg_speed,
            avg_hr=safe_number(record.avg_hr),
            max_hr=safe_number(record.max_hr),
            pace_cv=safe_number(variation.cv_pace) if variation else None,
            hr_cv=safe_number(variation.cv_hr) if variation else None,
        )

    def to_log_dict(self, baseline: UserHistoryBaseline) -> dict:
        """Metrics snapshot for the audit log."""
        def rounded(value, digits):
            return round(value, digits) if value is not None else None

        return {
            "distance_km": rounded(self.distance_km, 2),
            "duration_s": self.duration_s,
            "avg_pace_min_km": self.avg_pace_min_km,
            "avg_speed_ms": rounded(self.avg_speed_m_s, 2),
            "avg_hr": self.avg_hr,
            "max_hr": self.max_hr,
            "pace_cv": rounded(self.pace_cv, 3),
            "hr_cv": rounded(self.hr_cv, 3),
            "best_pace": baseline.best_pace,
            "p75_pace": baseline.p75_pace,
        }


@dataclass
class WorkoutClassification:
    """Label plus the metrics and rule that produced it."""
    workout_type: WorkoutType
    metrics: ActivityMetrics
    reason: str

    def to_dict(self) -> dict:
        return {
            "workout_type": self.workout_type.value,
            "reason": self.reason,
            "metrics": asdict(self.metrics),
        }


def _between(value: Optional[float], low: float, high: float) -> bool:
    return value is not None and low <= value <= high


class WorkoutTypeClassifier:
    """
    Deterministic rule cascade.

    Usage:
        classifier = WorkoutTypeClassifier()
        result = classifier.classify(metrics, baseline)
        result.workout_type  # WorkoutType.EASY_RUN
    """

    def __init__(self, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS):
        self.t = thresholds

    def classify(
        self,
        metrics: ActivityMetrics,
        baseline: Optional[UserHistoryBaseline] = None
    ) -> WorkoutClassification:
        baseline = baseline or UserHistoryBaseline()
        workout_type, reason = self._decide(metrics, baseline)
        return WorkoutClassification(workout_type=workout_type, metrics=metrics, reason=reason)

    def classify_record(
        self,
        record: ActivityRecord,
        variation: Optional[VariationRow] = None,
        baseline: Optional[UserHistoryBaseline] = None
    ) -> WorkoutClassification:
        return self.classify(ActivityMetrics.from_record(record, variation), baseline)

    def _decide(
        self,
        m: ActivityMetrics,
        baseline: UserHistoryBaseline
    ) -> tuple[WorkoutType, str]:
        t = self.t
        hr_pct = m.hr_percent_of_max
        pace = m.avg_pace_min_km
        best = baseline.best_pace

        if m.avg_speed_m_s is not None and m.avg_speed_m_s < t.walk_max_speed_m_s:
            return WorkoutType.WALK_OR_INVALID, f"Speed {m.avg_speed_m_s:.2f} m/s below walking cutoff"
        if m.avg_hr is not None and m.avg_hr < t.walk_max_avg_hr:
            return WorkoutType.WALK_OR_INVALID, f"Average HR {m.avg_hr:.0f} below running cutoff"

        if (
            m.distance_km is not None and m.distance_km > t.long_min_distance_km
            and m.pace_cv is not None and m.pace_cv < t.long_max_pace_cv
            and _between(hr_pct, t.long_hr_percent_min, t.long_hr_percent_max)
        ):
            return WorkoutType.LONG_RUN, "Long distance, steady pace, aerobic HR"

        if (
            m.pace_cv is not None and m.pace_cv > t.interval_min_pace_cv
            and m.duration_s is not None and m.duration_s < t.interval_max_duration_s
        ):
            return WorkoutType.INTERVAL_OR_FARTLEK, f"Pace CV {m.pace_cv:.2f} indicates repeated efforts"

        if (
            _between(m.distance_km, t.tempo_min_distance_km, t.tempo_max_distance_km)
            and pace is not None and best is not None
            and best <= pace <= best + t.tempo_pace_gap_min_km
            and _between(hr_pct, t.tempo_hr_percent_min, t.tempo_hr_percent_max)
        ):
            return WorkoutType.TEMPO_RUN, "Near best pace at threshold HR"

        if (
            _between(m.distance_km, t.easy_min_distance_km, t.easy_max_distance_km)
            and pace is not None and best is not None
            and pace > best + t.easy_pace_gap_min_km
            and m.hr_cv is not None and m.hr_cv < t.easy_max_hr_cv
        ):
            return WorkoutType.EASY_RUN, "Comfortably slower than best pace, steady HR"

        if (
            m.distance_km is not None and m.distance_km < t.recovery_max_distance_km
            and pace is not None and baseline.p75_pace is not None
            and pace > baseline.p75_pace
            and m.avg_hr is not None
            and (
                (m.max_hr is not None and m.avg_hr < t.recovery_hr_fraction_of_max * m.max_hr)
                or m.avg_hr < t.recovery_max_avg_hr
            )
        ):
            return WorkoutType.RECOVERY_RUN, "Short, slower than usual, low HR"

        return WorkoutType.UNCLASSIFIED, "No rule matched"
