"""
Training plan models.

Models:
- TrainingPlan: A user's generated training plan
- TrainingPlanWorkout: One prescribed workout inside a plan
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
import uuid

from app.models.base import Base


class TrainingPlan(Base):
    """Training plan header. Only `notes` is written by analytics."""

    __tablename__ = "training_plans"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), default="active")  # active | completed | cancelled
    goal_type = Column(String(50), nullable=True)  # 5k, 10k, half_marathon...
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    workouts = relationship(
        "TrainingPlanWorkout",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="TrainingPlanWorkout.week_number",
    )

    def __repr__(self):
        return f"<TrainingPlan {self.id} {self.goal_type} ({self.status})>"


class TrainingPlanWorkout(Base):
    """
    Prescribed workout.

    Pace and duration are the fields safety recalibration may rewrite.
    """

    __tablename__ = "training_plan_workouts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(String(36), ForeignKey("training_plans.id"), nullable=False, index=True)

    week_number = Column(Integer, nullable=False, default=1)
    title = Column(String(255), nullable=True)
    workout_type = Column(String(32), nullable=False)  # easy, long_run, tempo, interval...

    target_pace_min_per_km = Column(Float, nullable=True)
    duration_minutes = Column(Float, nullable=True)
    description = Column(Text, nullable=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    plan = relationship("TrainingPlan", back_populates="workouts")

    def __repr__(self):
        return f"<TrainingPlanWorkout #{self.id} w{self.week_number} {self.workout_type}>"
