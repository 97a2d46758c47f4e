"""
Safety calculators.

Components:
- SafetyCalibrator: safe pace baselines and clamps
"""

from .calibrator import (
    SafetyCalibrator,
    SafetyCalibrationConfig,
    DEFAULT_CONFIG,
    SafeBaseline,
    ClampResult,
    WorkoutPrescription,
    WorkoutCorrection,
    age_on,
    base_pace_for_age,
    DEFAULT_AGE,
)

__all__ = [
    "SafetyCalibrator",
    "SafetyCalibrationConfig",
    "DEFAULT_CONFIG",
    "SafeBaseline",
    "ClampResult",
    "WorkoutPrescription",
    "WorkoutCorrection",
    "age_on",
    "base_pace_for_age",
    "DEFAULT_AGE",
]
