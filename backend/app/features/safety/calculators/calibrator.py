"""
Safety Calibrator

Derives safe personal pace baselines from recent run history and
clamps prescribed training paces so they never exceed what the runner
has demonstrated.

Baselines:
- >= 3 valid runs: median pace as 5K-equivalent, Riegel extrapolation
  to 10K / half marathon, easy pace from median and p75
- otherwise: conservative defaults keyed by age

Clamps (pace in min/km, lower is faster):
    easy / recovery / base  floor = max(10K + 0.45, easy)
    long_run / long         floor = max(10K + 0.30, easy)
    tempo / threshold       floor = 10K, warn when longer than 45 min
    any category            absolute floor 3.00 (emergency override)

References:
    Riegel, P. (1977). Time Predicting. Runner's World.
"""

import math
import re
from dataclasses import dataclass, field, asdict
from datetime import date, timedelta
from typing import Iterable, List, Optional

from app.shared.calculator_types import ActivityRecord, safe_number
from app.shared.constants import WorkoutCategory
from app.shared.formulas import riegel_pace, HALF_MARATHON_KM


DEFAULT_AGE = 35
CALIBRATION_WINDOW_DAYS = 90
MIN_VALID_RUNS = 3

# (upper age bound exclusive, base pace min/km)
AGE_BASE_PACES = (
    (25, 5.5),
    (35, 6.0),
    (45, 6.5),
)
OLDEST_BASE_PACE = 7.0


@dataclass(frozen=True)
class SafetyCalibrationConfig:
    """Validation bounds, default multipliers and clamp margins."""
    window_days: int = CALIBRATION_WINDOW_DAYS
    min_valid_runs: int = MIN_VALID_RUNS

    # Valid run filter
    max_pace_min_km: float = 12.0
    min_distance_km: float = 2.0
    max_distance_km: float = 50.0
    min_duration_min: float = 10.0

    # Conservative defaults (multipliers of the age base pace)
    default_10k_factor: float = 1.08
    default_half_factor: float = 1.15
    default_easy_factor: float = 1.5
    default_tempo_factor: float = 1.08

    # Personal baseline
    easy_median_factor: float = 1.4

    # Clamp margins over 10K pace
    easy_margin: float = 0.45
    long_margin: float = 0.30
    max_tempo_duration_min: float = 45.0
    absolute_min_pace: float = 3.0

    # Batch recalibration
    tempo_duration_cap_min: float = 30.0


DEFAULT_CONFIG = SafetyCalibrationConfig()

EASY_CATEGORIES = {WorkoutCategory.EASY.value, WorkoutCategory.RECOVERY.value, WorkoutCategory.BASE.value}
LONG_CATEGORIES = {WorkoutCategory.LONG_RUN.value, WorkoutCategory.LONG.value}
TEMPO_CATEGORIES = {WorkoutCategory.TEMPO.value, WorkoutCategory.THRESHOLD.value}

_MINUTES_IN_TEXT = re.compile(r"\d+min")


def age_on(birth_date: Optional[date], today: date) -> int:
    """Whole years between birth date and today; default age if unknown."""
    if birth_date is None:
        return DEFAULT_AGE
    return math.floor((today - birth_date).days / 365.25)


def base_pace_for_age(age: int) -> float:
    for upper, pace in AGE_BASE_PACES:
        if age < upper:
            return pace
    return OLDEST_BASE_PACE


@dataclass
class SafeBaseline:
    """Safe paces (min/km) for one user."""
    pace_5k: float
    pace_10k: float
    pace_half_marathon: float
    pace_easy: float
    pace_tempo: float
    source: str = "history"     # "history" or "age_defaults"
    valid_runs: int = 0

    def to_dict(self) -> dict:
        return {k: (round(v, 3) if isinstance(v, float) else v) for k, v in asdict(self).items()}


@dataclass
class ClampResult:
    """Outcome of one clamp call."""
    pace: float
    original_pace: float
    warnings: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.pace != self.original_pace


@dataclass
class WorkoutPrescription:
    """Workout as generated by the plan builder."""
    workout_type: str
    target_pace_min_per_km: Optional[float] = None
    duration_minutes: Optional[float] = None
    description: Optional[str] = None
    title: Optional[str] = None
    workout_id: Optional[int] = None


@dataclass
class WorkoutCorrection:
    """What the calibrator did to one workout."""
    workout_id: Optional[int]
    title: Optional[str]
    workout_type: str
    original_pace: Optional[float]
    safe_pace: Optional[float]
    original_duration: Optional[float]
    safe_duration: Optional[float]
    description: Optional[str]
    warnings: List[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def has_critical_issue(self) -> bool:
        return bool(self.warnings)

    @property
    def changed(self) -> bool:
        return (
            self.safe_pace != self.original_pace
            or self.safe_duration != self.original_duration
        )

    def to_dict(self) -> dict:
        return asdict(self)


class SafetyCalibrator:
    """
    Safe pace baselines and clamps for one user.

    Usage:
        calibrator = SafetyCalibrator(runs, birth_date=user.birth_date)
        calibrator.baseline.pace_10k
        result = calibrator.clamp("easy", 4.5)
    """

    def __init__(
        self,
        runs: Iterable[ActivityRecord],
        birth_date: Optional[date] = None,
        today: Optional[date] = None,
        config: SafetyCalibrationConfig = DEFAULT_CONFIG
    ):
        self.config = config
        self.today = today or date.today()
        self.birth_date = birth_date
        self.runs = list(runs)
        self.valid_runs = self._valid_runs()
        self.baseline = self._compute_baseline()

    def _is_valid(self, run: ActivityRecord) -> bool:
        c = self.config
        if not run.is_run or run.activity_date is None:
            return False
        if run.activity_date < self.today - timedelta(days=c.window_days):
            return False

        pace = safe_number(run.pace_min_per_km)
        distance = run.distance_km
        duration = run.duration_minutes
        if pace is None or distance is None or duration is None:
            return False
        return (
            0 < pace < c.max_pace_min_km
            and c.min_distance_km <= distance <= c.max_distance_km
            and duration >= c.min_duration_min
        )

    def _valid_runs(self) -> List[ActivityRecord]:
        return [run for run in self.runs if self._is_valid(run)]

    def _compute_baseline(self) -> SafeBaseline:
        if len(self.valid_runs) < self.config.min_valid_runs:
            return self.conservative_defaults()

        c = self.config
        paces = sorted(safe_number(r.pace_min_per_km) for r in self.valid_runs)
        median = paces[len(paces) // 2]
        p75 = paces[math.floor(len(paces) * 0.75)]
        pace_10k = riegel_pace(median, 5.0, 10.0)

        return SafeBaseline(
            pace_5k=median,
            pace_10k=pace_10k,
            pace_half_marathon=riegel_pace(median, 5.0, HALF_MARATHON_KM),
            pace_easy=max(median * c.easy_median_factor, p75),
            pace_tempo=pace_10k,
            source="history",
            valid_runs=len(self.valid_runs),
        )

    def conservative_defaults(self) -> SafeBaseline:
        """Age-bracketed paces for users with too little history."""
        c = self.config
        base = base_pace_for_age(age_on(self.birth_date, self.today))
        return SafeBaseline(
            pace_5k=base,
            pace_10k=base * c.default_10k_factor,
            pace_half_marathon=base * c.default_half_factor,
            pace_easy=base * c.default_easy_factor,
            pace_tempo=base * c.default_tempo_factor,
            source="age_defaults",
            valid_runs=len(self.valid_runs),
        )

    def category_floor(self, category: str) -> Optional[float]:
        """Slowest-allowed boundary (min pace) for a category, None if unbounded."""
        c = self.config
        b = self.baseline
        category = (category or "").lower()
        if category in EASY_CATEGORIES:
            return max(b.pace_10k + c.easy_margin, b.pace_easy)
        if category in LONG_CATEGORIES:
            return max(b.pace_10k + c.long_margin, b.pace_easy)
        if category in TEMPO_CATEGORIES:
            return b.pace_10k
        return None

    def clamp(
        self,
        category: str,
        pace: float,
        duration_minutes: Optional[float] = None
    ) -> ClampResult:
        """
        Clamp a proposed pace into safe bounds.

        Args:
            category: Workout category (easy, long_run, tempo, ...)
            pace: Proposed pace in min/km
            duration_minutes: Planned duration (tempo duration check)

        Returns:
            ClampResult with the safe pace and any warnings
        """
        c = self.config
        result = ClampResult(pace=pace, original_pace=pace)
        key = (category or "").lower()

        floor = self.category_floor(key)
        if floor is not None and pace < floor:
            result.pace = floor
            result.warnings.append(
                f"Critical safety: {key} pace {pace:.2f} was too fast, adjusted to {floor:.2f}"
            )

        if key in TEMPO_CATEGORIES and duration_minutes and duration_minutes > c.max_tempo_duration_min:
            result.warnings.append(
                f"Critical safety: {key} duration {duration_minutes:g}min exceeds "
                f"safe limit of {c.max_tempo_duration_min:g}min"
            )

        if result.pace < c.absolute_min_pace:
            result.pace = c.absolute_min_pace
            result.warnings.append(
                f"Emergency override: pace faster than {c.absolute_min_pace:.2f} min/km "
                f"set to emergency minimum"
            )

        return result

    def apply(
        self,
        workout: WorkoutPrescription,
        cap_tempo_duration: bool = True
    ) -> WorkoutCorrection:
        """
        Clamp one workout and optionally cap tempo duration.

        Workouts without a numeric pace are passed through as skipped.
        """
        c = self.config
        pace = safe_number(workout.target_pace_min_per_km)
        duration = safe_number(workout.duration_minutes)

        if pace is None:
            return WorkoutCorrection(
                workout_id=workout.workout_id,
                title=workout.title,
                workout_type=workout.workout_type,
                original_pace=workout.target_pace_min_per_km,
                safe_pace=workout.target_pace_min_per_km,
                original_duration=workout.duration_minutes,
                safe_duration=workout.duration_minutes,
                description=workout.description,
                skipped=True,
            )

        clamped = self.clamp(workout.workout_type, pace, duration)

        safe_duration = workout.duration_minutes
        description = workout.description
        is_tempo = (workout.workout_type or "").lower() == WorkoutCategory.TEMPO.value
        if cap_tempo_duration and is_tempo and duration is not None and duration > c.tempo_duration_cap_min:
            safe_duration = c.tempo_duration_cap_min
            if description:
                description = _MINUTES_IN_TEXT.sub(f"{safe_duration:g}min", description, count=1)

        return WorkoutCorrection(
            workout_id=workout.workout_id,
            title=workout.title,
            workout_type=workout.workout_type,
            original_pace=pace,
            safe_pace=round(clamped.pace, 2),
            original_duration=workout.duration_minutes,
            safe_duration=safe_duration,
            description=description,
            warnings=clamped.warnings,
        )

    def sanitize(
        self,
        prescriptions: Iterable[WorkoutPrescription],
        cap_tempo_duration: bool = False
    ) -> List[WorkoutCorrection]:
        """Clamp freshly generated workouts before they are stored."""
        return [self.apply(w, cap_tempo_duration=cap_tempo_duration) for w in prescriptions]
