"""
Skill-level calculators.

Components:
- XorShiftRandom: seeded generator for reproducible clustering
- build_feature_vectors: weekly per-user aggregates
- SkillLevelEstimator: standardise, PCA composite, k-means tiers
"""

from .rng import XorShiftRandom
from .features import (
    FeatureVector,
    FEATURE_NAMES,
    MIN_QUALIFYING_RUNS,
    MAX_LOOKBACK_DAYS,
    build_feature_vectors,
    clamp_lookback,
    lookback_candidates,
)
from .clustering import (
    INITIAL_PCA_WEIGHTS,
    KMeansResult,
    dot,
    kmeans,
    kmeans_plus_plus,
    principal_component,
    standardize,
)
from .estimator import (
    SkillTier,
    SkillLevelEstimator,
    SkillLevelResult,
    PopulationModel,
    percentile_tier,
    METHOD,
    NO_DATA_REASON,
)

__all__ = [
    "XorShiftRandom",
    "FeatureVector",
    "FEATURE_NAMES",
    "MIN_QUALIFYING_RUNS",
    "MAX_LOOKBACK_DAYS",
    "build_feature_vectors",
    "clamp_lookback",
    "lookback_candidates",
    "INITIAL_PCA_WEIGHTS",
    "KMeansResult",
    "dot",
    "kmeans",
    "kmeans_plus_plus",
    "principal_component",
    "standardize",
    "SkillTier",
    "SkillLevelEstimator",
    "SkillLevelResult",
    "PopulationModel",
    "percentile_tier",
    "METHOD",
    "NO_DATA_REASON",
]
