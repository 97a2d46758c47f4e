"""
Unified constants for activity matching and workout labels.

This module provides a single source of truth for naming across the
analytics features.
"""

from enum import Enum


# Lower-cased substring that marks a running activity type
# (Run, TrailRun, VirtualRun, treadmill_running...)
RUN_TYPE_MARKER = "run"


class WorkoutCategory(str, Enum):
    """Plan workout categories understood by the safety clamps."""
    EASY = "easy"
    RECOVERY = "recovery"
    BASE = "base"
    LONG_RUN = "long_run"
    LONG = "long"
    TEMPO = "tempo"
    THRESHOLD = "threshold"
    INTERVAL = "interval"


# Default page size for history reads
HISTORY_PAGE_SIZE = 1000
