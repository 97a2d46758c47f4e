"""
Training safety module.

Usage:
    from app.features.safety import SafetyCalibrator, WorkoutPrescription
    from app.features.safety import PlanRecalibrationService

Components:
- SafetyCalibrator: safe baselines, pace clamps, inline sanitising
- PlanRecalibrationService: batch pass over a stored plan
"""

from .calculators import (
    SafetyCalibrator,
    SafetyCalibrationConfig,
    SafeBaseline,
    ClampResult,
    WorkoutPrescription,
    WorkoutCorrection,
)
from .service import PlanRecalibrationService, RecalibrationResult

__all__ = [
    "SafetyCalibrator",
    "SafetyCalibrationConfig",
    "SafeBaseline",
    "ClampResult",
    "WorkoutPrescription",
    "WorkoutCorrection",
    "PlanRecalibrationService",
    "RecalibrationResult",
]
