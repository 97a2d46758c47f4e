"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import coefficient_of_variation, riegel_pace
    from app.shared.formatters import format_pace
"""
from .calculator_types import (
    ActivityRecord,
    VariationRow,
    BatchError,
    safe_number,
)
from .stats import (
    mean_or_none,
    sample_stdev,
    coefficient_of_variation,
    population_mean_std,
    nearest_rank_percentile,
    percentile_rank,
)
from .formulas import (
    RIEGEL_EXPONENT,
    HALF_MARATHON_KM,
    riegel_predicted_time,
    riegel_pace,
    speed_ms_to_pace,
    pace_to_speed_ms,
)
from .formatters import (
    format_pace,
    format_distance_km,
    format_duration_minutes,
)
from .constants import (
    WorkoutCategory,
    RUN_TYPE_MARKER,
    HISTORY_PAGE_SIZE,
)
from .exceptions import (
    AnalyticsError,
    HistoryUnavailableError,
    PlanNotFoundError,
    EmptyPlanError,
)
from .repository import BaseRepository

__all__ = [
    # calculator types
    "ActivityRecord",
    "VariationRow",
    "BatchError",
    "safe_number",
    # stats
    "mean_or_none",
    "sample_stdev",
    "coefficient_of_variation",
    "population_mean_std",
    "nearest_rank_percentile",
    "percentile_rank",
    # formulas
    "RIEGEL_EXPONENT",
    "HALF_MARATHON_KM",
    "riegel_predicted_time",
    "riegel_pace",
    "speed_ms_to_pace",
    "pace_to_speed_ms",
    # formatters
    "format_pace",
    "format_distance_km",
    "format_duration_minutes",
    # constants
    "WorkoutCategory",
    "RUN_TYPE_MARKER",
    "HISTORY_PAGE_SIZE",
    # exceptions
    "AnalyticsError",
    "HistoryUnavailableError",
    "PlanNotFoundError",
    "EmptyPlanError",
    # repository
    "BaseRepository",
]
