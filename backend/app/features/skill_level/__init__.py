"""
Skill level module.

Usage:
    from app.features.skill_level import SkillLevelService
    from app.features.skill_level import SkillLevelEstimator, XorShiftRandom

Components:
- SkillLevelEstimator: population model (PCA composite + k-means tiers)
- SkillLevelService: adaptive lookback window and history loading
"""

from .calculators import (
    XorShiftRandom,
    FeatureVector,
    build_feature_vectors,
    SkillTier,
    SkillLevelEstimator,
    SkillLevelResult,
    PopulationModel,
)
from .service import SkillLevelService

__all__ = [
    "XorShiftRandom",
    "FeatureVector",
    "build_feature_vectors",
    "SkillTier",
    "SkillLevelEstimator",
    "SkillLevelResult",
    "PopulationModel",
    "SkillLevelService",
]
