import logging
import math
from typing import Sequence

import numpy as np

from clustval.partition.partition import UNCLASSIFIED, Partition

logger = logging.getLogger(__name__)


def compute_bic(points: np.ndarray, partition: Partition) -> float:
    """
    Bayesian Information Criterion of a medoid-based partition (X-means form).

    Each classified object is modelled as a spherical Gaussian around its
    cluster medoid with a pooled variance. Higher is better.

    Returns NaN when the criterion is undefined (no medoids, no more
    objects than clusters, or zero pooled variance).
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2:
        raise ValueError(f"BIC expected 2D points, got shape={points.shape}")
    if points.shape[0] != partition.size():
        raise ValueError("Length mismatch between points and partition")

    k = partition.num_clusters()
    if k == 0 or not partition.medoid_ids or min(partition.medoid_ids) < 0:
        logger.warning("BIC: partition has missing medoids; returning NaN.")
        return float("nan")

    ids = partition.cluster_ids
    classified = np.flatnonzero(ids != UNCLASSIFIED)
    R = float(len(classified))
    M = points.shape[1]
    if R <= k:
        logger.warning("BIC: %d objects for %d clusters; returning NaN.", int(R), k)
        return float("nan")

    medoids = points[np.asarray(partition.medoid_ids)[ids[classified]]]
    d2 = np.sum((points[classified] - medoids) ** 2, axis=1)

    s2 = float(np.sum(d2)) / (R - k)
    if s2 == 0.0:
        logger.warning("BIC: zero pooled variance; returning NaN.")
        return float("nan")
    sM = math.sqrt(s2) ** M

    sizes = partition.cluster_sizes()[ids[classified]].astype(np.float64)
    log_likelihood = float(
        np.sum(math.log(1.0 / (math.sqrt(2 * math.pi) * sM)) - d2 / (2 * s2) + np.log(sizes / R))
    )

    pj = (k - 1) + M * k + 1
    result = log_likelihood - pj / 2.0 * math.log(R)
    logger.info(f"BIC computed over {k} clusters: {result:.4f}")
    return result


def bic_from_summaries(
    k: int,
    cluster_sizes: Sequence[int],
    sum2_dissim: Sequence[float],
    dimensionality: int,
) -> float:
    """
    BIC from precomputed per-cluster sizes and squared medoid dissimilarities.

    Useful when the sums come from a distributed reduction instead of a
    full partition.
    """
    sizes = np.asarray(cluster_sizes, dtype=np.float64)[:k]
    sum2 = np.asarray(sum2_dissim, dtype=np.float64)[:k]
    if len(sizes) != k or len(sum2) != k:
        raise ValueError(f"expected {k} cluster sizes and {k} dissimilarity sums")

    R = float(np.sum(sizes))
    M = float(dimensionality)
    if R <= k or np.any(sizes <= 0):
        logger.warning("BIC: degenerate cluster sizes %s; returning NaN.", sizes.tolist())
        return float("nan")

    s2 = float(np.sum(sum2)) / (R - k)
    if s2 <= 0.0:
        logger.warning("BIC: zero pooled variance; returning NaN.")
        return float("nan")

    logR = math.log(R)
    log2pi = math.log(2 * math.pi)
    pj = (k - 1) + M * k + 1

    criterion = float(
        np.sum(
            -(sizes * log2pi) / 2.0
            - (sizes * M * math.log(s2)) / 2.0
            - (sizes - 1) / 2.0
            + sizes * np.log(sizes)
            - sizes * logR
        )
    )
    return criterion - pj / 2.0 * logR
