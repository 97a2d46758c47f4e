"""
Numerical routines for skill-level estimation.

Plain-Python linear algebra on a small fixed feature space:
- z-score standardisation
- first principal component by power iteration
- k-means with k-means++ seeding
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from app.shared.stats import population_mean_std
from .rng import XorShiftRandom

Vector = List[float]

# Starting direction biased toward weekly distance
INITIAL_PCA_WEIGHTS = (0.4, 0.2, 0.15, 0.25)
PCA_MAX_ITERATIONS = 100
PCA_TOLERANCE = 1e-6

KMEANS_CLUSTERS = 4
KMEANS_MAX_ITERATIONS = 50


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def squared_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return sum((x - y) ** 2 for x, y in zip(a, b))


def normalize(v: Sequence[float]) -> Vector | None:
    """Unit-length copy of v, or None for a zero / non-finite vector."""
    norm = math.sqrt(sum(x * x for x in v))
    if norm == 0 or not math.isfinite(norm):
        return None
    return [x / norm for x in v]


def standardize(rows: Sequence[Sequence[float]]) -> tuple[list[Vector], list[tuple[float, float]]]:
    """
    Z-score every column.

    Returns:
        (standardised rows, per-column (mean, std))
    """
    if not rows:
        return [], []
    dim = len(rows[0])
    stats = [population_mean_std([row[c] for row in rows]) for c in range(dim)]
    standardized = [
        [(row[c] - stats[c][0]) / stats[c][1] for c in range(dim)]
        for row in rows
    ]
    return standardized, stats


def principal_component(
    rows: Sequence[Sequence[float]],
    initial: Sequence[float] = INITIAL_PCA_WEIGHTS,
    max_iterations: int = PCA_MAX_ITERATIONS,
    tolerance: float = PCA_TOLERANCE
) -> Vector:
    """
    First principal component of standardised rows by power iteration.

    w <- normalize(X^T X w / n), stopping when |w_new - w| < tolerance.
    A degenerate product keeps the current direction. The sign is fixed
    so the first (distance) weight is non-negative.
    """
    w = normalize(initial) or [1.0] + [0.0] * (len(initial) - 1)
    n = len(rows)
    if n == 0:
        return w

    dim = len(w)
    for _ in range(max_iterations):
        projections = [dot(row, w) for row in rows]
        product = [
            sum(projections[i] * rows[i][d] for i in range(n)) / n
            for d in range(dim)
        ]
        w_next = normalize(product)
        if w_next is None:
            break
        delta = math.sqrt(squared_distance(w_next, w))
        w = w_next
        if delta < tolerance:
            break

    if w[0] < 0:
        w = [-x for x in w]
    return w


def kmeans_plus_plus(
    points: Sequence[Sequence[float]],
    k: int,
    rng: XorShiftRandom
) -> list[Vector]:
    """
    k-means++ seeding.

    First centroid uniform, then each next one drawn with probability
    proportional to squared distance from the nearest chosen centroid.
    """
    n = len(points)
    centroids = [list(points[rng.randrange(n)])]
    while len(centroids) < k:
        weights = [min(squared_distance(p, c) for c in centroids) for p in points]
        total = sum(weights)
        if total <= 0:
            centroids.append(list(points[rng.randrange(n)]))
            continue
        target = rng.random() * total
        cumulative = 0.0
        chosen = n - 1
        for i, weight in enumerate(weights):
            cumulative += weight
            if cumulative > target:
                chosen = i
                break
        centroids.append(list(points[chosen]))
    return centroids


@dataclass
class KMeansResult:
    centroids: list[Vector]
    labels: list[int]
    iterations: int


def kmeans(
    points: Sequence[Sequence[float]],
    k: int,
    rng: XorShiftRandom,
    max_iterations: int = KMEANS_MAX_ITERATIONS
) -> KMeansResult:
    """
    Lloyd's k-means.

    k is reduced to the number of distinct points. Ties go to the lowest
    centroid index; an empty cluster keeps its previous centroid.
    """
    if not points:
        return KMeansResult(centroids=[], labels=[], iterations=0)

    distinct = {tuple(p) for p in points}
    k = max(1, min(k, len(distinct)))
    dim = len(points[0])

    centroids = kmeans_plus_plus(points, k, rng)
    labels = [-1] * len(points)

    iterations = 0
    for iterations in range(1, max_iterations + 1):
        changed = False
        for i, point in enumerate(points):
            best, best_d = 0, math.inf
            for c, centroid in enumerate(centroids):
                d = squared_distance(point, centroid)
                if d < best_d:
                    best, best_d = c, d
            if labels[i] != best:
                labels[i] = best
                changed = True

        sums = [[0.0] * dim for _ in range(k)]
        counts = [0] * k
        for point, label in zip(points, labels):
            counts[label] += 1
            for d in range(dim):
                sums[label][d] += point[d]
        for c in range(k):
            if counts[c]:
                centroids[c] = [s / counts[c] for s in sums[c]]

        if not changed:
            break

    return KMeansResult(centroids=centroids, labels=labels, iterations=iterations)
