import logging
from typing import List

import numpy as np

logger = logging.getLogger(__name__)


class MedoidSelector:
    """
    Euclidean medoid selector supporting both exact and approximate computation.

    Behavior:
    ---------
    • For clusters with <= exact_threshold points:
        Computes *exact* medoid (smallest sum of distances to the
        other members) via chunked pairwise distances.
        O(n²) work but chunked to avoid RAM spikes.

    • For clusters > exact_threshold:
        Uses the member nearest to the centroid.

    Parameters
    ----------
    exact_threshold : int
        Max cluster size for exact medoid computation.
    chunk_size : int
        Partition size for chunked pairwise ops.
    """

    def __init__(self, exact_threshold: int = 1500, chunk_size: int = 2048):
        if int(exact_threshold) < 1:
            raise ValueError("exact_threshold must be >= 1")
        if int(chunk_size) < 1:
            raise ValueError("chunk_size must be >= 1")

        self.exact_threshold = int(exact_threshold)
        self.chunk_size = int(chunk_size)

    # ------------------------------------------------------------------
    def select(self, points: np.ndarray, cluster_ids: np.ndarray, num_clusters: int) -> List[int]:
        """
        Return the global medoid id of each cluster 0..num_clusters-1.

        Clusters without members get -1.
        """
        points = np.asarray(points, dtype=np.float64)
        cluster_ids = np.asarray(cluster_ids)

        if points.ndim != 2:
            raise ValueError("points must be 2D (N, D)")
        if points.shape[0] != cluster_ids.shape[0]:
            raise ValueError("Length mismatch in medoid selection inputs")

        medoid_ids: List[int] = []
        for cid in range(num_clusters):
            idx = np.flatnonzero(cluster_ids == cid)
            if len(idx) == 0:
                logger.warning("Cluster %d has no members; no medoid.", cid)
                medoid_ids.append(-1)
                continue

            local_idx = self._cluster_medoid_index(points[idx])
            medoid_ids.append(int(idx[local_idx]))

        logger.debug("Selected medoids for %d clusters.", num_clusters)
        return medoid_ids

    # ------------------------------------------------------------------
    def _cluster_medoid_index(self, X: np.ndarray) -> int:
        n = X.shape[0]

        if n <= self.exact_threshold:
            return self._exact_medoid(X)

        centroid = X.mean(axis=0, keepdims=True)
        diffs = X - centroid
        d2 = np.sum(diffs * diffs, axis=1)
        return int(np.argmin(d2))

    # ------------------------------------------------------------------
    def _exact_medoid(self, X: np.ndarray) -> int:
        """
        Compute exact medoid:
            argmin_i Σ_j ||X[i] - X[j]||
        using chunked blocks to preserve memory.
        """
        n = X.shape[0]

        # d(i,j)^2 = ||Xi||^2 + ||Xj||^2 - 2 <Xi, Xj>
        norms = np.sum(X * X, axis=1)

        best_i = -1
        best_val = float("inf")
        for start in range(0, n, self.chunk_size):
            end = min(start + self.chunk_size, n)
            block = X[start:end]

            dots = block @ X.T
            d2 = norms[start:end, None] + norms[None, :] - 2.0 * dots
            row_sums = np.sum(np.sqrt(np.maximum(d2, 0.0)), axis=1)

            local_idx = int(np.argmin(row_sums))
            val = float(row_sums[local_idx])
            if val < best_val:
                best_val = val
                best_i = start + local_idx

        return best_i
