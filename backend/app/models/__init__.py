"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy.

Note: Feature models are imported lazily to avoid circular imports.
Use direct imports from features/ modules when possible.
"""

from app.models.base import Base


def register_models() -> None:
    """Import every feature model so Base.metadata knows all tables."""
    from app.features.activities import models as activity_models  # noqa: F401
    from app.features.users import models as user_models  # noqa: F401
    from app.features.plans import models as plan_models  # noqa: F401


__all__ = [
    "Base",
    "register_models",
]
