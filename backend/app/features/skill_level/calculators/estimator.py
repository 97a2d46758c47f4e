"""
Skill-Level Estimator

Places a runner in one of four tiers relative to the active population:

1. Weekly feature vectors per user (distance, frequency, duration,
   sustained speed), missing speed imputed with the population mean
2. Z-score standardisation across the population
3. Composite score = projection on the first principal component
4. k-means (k=4) with seeded k-means++ initialisation; clusters ranked
   by centroid composite map to Beginner .. Elite
5. Independent percentile tier from the composite percentile

Both tiers are reported; they are not reconciled.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from app.shared.stats import mean_or_none, percentile_rank
from .clustering import (
    KMEANS_CLUSTERS,
    dot,
    kmeans,
    principal_component,
    standardize,
)
from .features import FEATURE_NAMES, FeatureVector
from .rng import XorShiftRandom


class SkillTier(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    ELITE = "Elite"


TIER_ORDER = (
    SkillTier.BEGINNER,
    SkillTier.INTERMEDIATE,
    SkillTier.ADVANCED,
    SkillTier.ELITE,
)

# Composite percentile cutoffs for the percentile tier
ELITE_PERCENTILE = 90
ADVANCED_PERCENTILE = 70
INTERMEDIATE_PERCENTILE = 40

METHOD = "kmeans+pca+percentiles"
NO_DATA_REASON = "no_data"


def percentile_tier(composite_percentile: Optional[int]) -> SkillTier:
    p = composite_percentile or 0
    if p >= ELITE_PERCENTILE:
        return SkillTier.ELITE
    if p >= ADVANCED_PERCENTILE:
        return SkillTier.ADVANCED
    if p >= INTERMEDIATE_PERCENTILE:
        return SkillTier.INTERMEDIATE
    return SkillTier.BEGINNER


@dataclass
class SkillLevelResult:
    """Tier estimate for one user."""
    tier: SkillTier
    alternate_tier_percentile: Optional[SkillTier] = None
    feature_values: Dict[str, Optional[float]] = field(default_factory=dict)
    feature_percentiles: Dict[str, Optional[int]] = field(default_factory=dict)
    composite_percentile: Optional[int] = None
    composite_score: Optional[float] = None
    method: str = METHOD
    reason_if_no_data: Optional[str] = None
    lookback_days_used: Optional[int] = None
    population_size: int = 0

    @classmethod
    def no_data(cls, lookback_days_used: Optional[int] = None, population_size: int = 0) -> "SkillLevelResult":
        return cls(
            tier=SkillTier.BEGINNER,
            reason_if_no_data=NO_DATA_REASON,
            lookback_days_used=lookback_days_used,
            population_size=population_size,
        )

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "alternate_tier_percentile": (
                self.alternate_tier_percentile.value if self.alternate_tier_percentile else None
            ),
            "feature_values": self.feature_values,
            "feature_percentiles": self.feature_percentiles,
            "composite_percentile": self.composite_percentile,
            "method": self.method,
            "reason_if_no_data": self.reason_if_no_data,
            "lookback_days_used": self.lookback_days_used,
            "population_size": self.population_size,
        }


@dataclass
class PopulationModel:
    """Fitted population: standardised matrix, PCA weights and clusters."""
    vectors: List[FeatureVector]
    imputed_speed: float
    raw_rows: List[List[float]]
    standardized: List[List[float]]
    weights: List[float]
    composites: List[float]
    labels: List[int]
    cluster_tiers: Dict[int, SkillTier]

    def index_of(self, user_id: str) -> Optional[int]:
        for i, vector in enumerate(self.vectors):
            if vector.user_id == user_id:
                return i
        return None

    def tier_for(self, user_id: str) -> Optional[SkillTier]:
        """Cluster tier of any user in the population (None if absent)."""
        idx = self.index_of(user_id)
        if idx is None:
            return None
        return self.cluster_tiers[self.labels[idx]]

    def cluster_mean_composites(self) -> Dict[SkillTier, float]:
        """Mean member composite per tier."""
        grouped: Dict[SkillTier, List[float]] = {}
        for label, score in zip(self.labels, self.composites):
            grouped.setdefault(self.cluster_tiers[label], []).append(score)
        return {tier: sum(scores) / len(scores) for tier, scores in grouped.items()}

    def result_for(self, user_id: str, lookback_days_used: Optional[int] = None) -> SkillLevelResult:
        """Full tier report for one user; no-data result if absent."""
        idx = self.index_of(user_id)
        if idx is None:
            return SkillLevelResult.no_data(lookback_days_used, len(self.vectors))

        vector = self.vectors[idx]
        row = self.raw_rows[idx]

        feature_percentiles = {
            name: percentile_rank([r[c] for r in self.raw_rows], row[c])
            for c, name in enumerate(FEATURE_NAMES)
        }
        composite = self.composites[idx]
        composite_pct = percentile_rank(self.composites, composite)

        best_pace = vector.best_sustained_pace_min_km
        speed = vector.sustained_speed_km_per_min
        feature_values = {
            "weekly_distance_km": round(vector.weekly_distance_km, 1),
            "weekly_frequency": round(vector.weekly_frequency, 2),
            "weekly_duration_min": round(vector.weekly_duration_min, 0),
            "sustained_speed_km_per_min": round(speed, 4) if speed is not None else None,
            "best_sustained_pace_min_km": round(best_pace, 2) if best_pace is not None else None,
        }

        return SkillLevelResult(
            tier=self.cluster_tiers[self.labels[idx]],
            alternate_tier_percentile=percentile_tier(composite_pct),
            feature_values=feature_values,
            feature_percentiles=feature_percentiles,
            composite_percentile=composite_pct,
            composite_score=composite,
            lookback_days_used=lookback_days_used,
            population_size=len(self.vectors),
        )


class SkillLevelEstimator:
    """
    Fits the population model.

    Usage:
        estimator = SkillLevelEstimator(XorShiftRandom(42))
        model = estimator.fit(vectors)
        model.result_for(user_id)

    Args:
        rng: Seeded generator for k-means++; identical seeds reproduce tiers
        clusters: Number of tiers to cluster into
    """

    def __init__(self, rng: XorShiftRandom, clusters: int = KMEANS_CLUSTERS):
        self.rng = rng
        self.clusters = clusters

    def fit(self, vectors: Sequence[FeatureVector]) -> Optional[PopulationModel]:
        """Return a fitted model, or None for an empty population."""
        vectors = list(vectors)
        if not vectors:
            return None

        speeds = [
            v.sustained_speed_km_per_min for v in vectors
            if v.sustained_speed_km_per_min is not None
        ]
        imputed_speed = mean_or_none(speeds) or 0.0

        raw_rows = [v.values(imputed_speed) for v in vectors]
        standardized, _ = standardize(raw_rows)
        weights = principal_component(standardized)
        composites = [dot(row, weights) for row in standardized]

        clustering = kmeans(standardized, self.clusters, self.rng)
        cluster_tiers = self._rank_clusters(clustering.centroids, weights)

        return PopulationModel(
            vectors=vectors,
            imputed_speed=imputed_speed,
            raw_rows=raw_rows,
            standardized=standardized,
            weights=weights,
            composites=composites,
            labels=clustering.labels,
            cluster_tiers=cluster_tiers,
        )

    @staticmethod
    def _rank_clusters(centroids: List[List[float]], weights: List[float]) -> Dict[int, SkillTier]:
        """
        Map cluster index to tier by ascending centroid composite.

        With fewer than 4 clusters the ranks are spread over the tier
        range so the best cluster is still Elite.
        """
        k = len(centroids)
        order = sorted(range(k), key=lambda c: (dot(centroids[c], weights), c))
        tiers = {}
        for rank, cluster in enumerate(order):
            if k == 1:
                tier_idx = 0
            else:
                tier_idx = round(rank * (len(TIER_ORDER) - 1) / (k - 1))
            tiers[cluster] = TIER_ORDER[tier_idx]
        return tiers
