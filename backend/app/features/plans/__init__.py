"""
Training plan module.

Usage:
    from app.features.plans import TrainingPlan, TrainingPlanWorkout, PlanRepository
"""

from .models import TrainingPlan, TrainingPlanWorkout
from .repository import PlanRepository

__all__ = [
    "TrainingPlan",
    "TrainingPlanWorkout",
    "PlanRepository",
]
