"""
User-related models.

Models:
- User: Athlete account; only the fields analytics needs are mapped
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date
import uuid

from app.models.base import Base


class User(Base):
    """
    Application user.

    Birth date drives the age-bracketed default paces used when a
    user has too little run history for a personal baseline.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=True)

    # Profile
    name = Column(String(100), nullable=True)
    birth_date = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.id} ({self.name})>"
