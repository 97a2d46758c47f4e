"""
Weekly feature vectors for skill-level estimation.

One vector per user, built from that user's runs inside the lookback
window and normalised to per-week values.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional

from app.shared.calculator_types import ActivityRecord, safe_number


MIN_LOOKBACK_DAYS = 14
MAX_LOOKBACK_DAYS = 180
WIDENING_STEPS_DAYS = (120, 180)
MIN_QUALIFYING_RUNS = 6

# Paces outside this band are not trusted for sustained speed
MIN_VALID_PACE_MIN_KM = 2.5
MAX_VALID_PACE_MIN_KM = 12.0

# (min distance m, min duration min) per sustained-effort tier
PRIMARY_EFFORT = (3000.0, 8.0)
FALLBACK_EFFORT = (1000.0, 4.0)

FEATURE_NAMES = (
    "weekly_distance_km",
    "weekly_frequency",
    "weekly_duration_min",
    "sustained_speed_km_per_min",
)


def clamp_lookback(days: int) -> int:
    return max(MIN_LOOKBACK_DAYS, min(MAX_LOOKBACK_DAYS, int(days)))


def lookback_candidates(requested_days: int) -> list[int]:
    """
    Windows to try, in order.

    Starts at the clamped request and widens through 120 and 180 days.
    """
    start = clamp_lookback(requested_days)
    return [start] + [w for w in WIDENING_STEPS_DAYS if w > start]


def _is_valid_pace(pace: Optional[float]) -> bool:
    return pace is not None and MIN_VALID_PACE_MIN_KM <= pace <= MAX_VALID_PACE_MIN_KM


@dataclass
class FeatureVector:
    """Per-user weekly aggregates. Sustained speed may be missing."""
    user_id: str
    weekly_distance_km: float
    weekly_frequency: float
    weekly_duration_min: float
    sustained_speed_km_per_min: Optional[float] = None

    def values(self, imputed_speed: float) -> list[float]:
        """Feature row with missing speed replaced by imputed_speed."""
        speed = self.sustained_speed_km_per_min
        return [
            self.weekly_distance_km,
            self.weekly_frequency,
            self.weekly_duration_min,
            speed if speed is not None else imputed_speed,
        ]

    @property
    def best_sustained_pace_min_km(self) -> Optional[float]:
        if not self.sustained_speed_km_per_min:
            return None
        return 1 / self.sustained_speed_km_per_min


@dataclass
class _Accumulator:
    total_distance_m: float = 0.0
    total_duration_min: float = 0.0
    count: int = 0
    best_primary: Optional[float] = None
    best_fallback: Optional[float] = None

    def add(self, record: ActivityRecord) -> None:
        distance = safe_number(record.distance_m) or 0.0
        duration = record.duration_minutes or 0.0
        pace = safe_number(record.pace_min_per_km)

        self.total_distance_m += distance
        self.total_duration_min += duration
        self.count += 1

        if not _is_valid_pace(pace):
            return
        if distance >= PRIMARY_EFFORT[0] and duration >= PRIMARY_EFFORT[1]:
            self.best_primary = pace if self.best_primary is None else min(self.best_primary, pace)
        if distance >= FALLBACK_EFFORT[0] and duration >= FALLBACK_EFFORT[1]:
            self.best_fallback = pace if self.best_fallback is None else min(self.best_fallback, pace)

    @property
    def best_pace(self) -> Optional[float]:
        return self.best_primary if self.best_primary is not None else self.best_fallback


def build_feature_vectors(
    records: Iterable[ActivityRecord],
    lookback_days: int
) -> list[FeatureVector]:
    """
    Aggregate runs into one weekly FeatureVector per user.

    Args:
        records: Running activities already limited to the window
        lookback_days: Window length used for per-week normalisation

    Returns:
        Vectors sorted by user id
    """
    weeks = lookback_days / 7
    per_user: dict[str, _Accumulator] = defaultdict(_Accumulator)
    for record in records:
        if not record.user_id or not record.is_run:
            continue
        per_user[record.user_id].add(record)

    vectors = []
    for user_id in sorted(per_user):
        acc = per_user[user_id]
        best = acc.best_pace
        vectors.append(FeatureVector(
            user_id=user_id,
            weekly_distance_km=(acc.total_distance_m / 1000) / weeks,
            weekly_frequency=acc.count / weeks,
            weekly_duration_min=acc.total_duration_min / weeks,
            sustained_speed_km_per_min=1 / best if best else None,
        ))
    return vectors
