import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from clustval.evaluation.cluster_model import ClusterModel
from clustval.evaluation.rcr import RCRTable
from clustval.geometry.spatial_index import SpatialIndex

logger = logging.getLogger(__name__)

DEFAULT_SHRINK_FACTORS: Tuple[float, ...] = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8)


class DensityCalculator:
    """
    Inter- and intra-cluster density measures of the CDbw index.

    All inputs are read-only: the cluster summaries (centroid, stdev,
    representatives), the RCR table, and a spatial index over the
    classified points.

    Degenerate values:
      • empty RCR set for (i, j)          → distance and density 0.0
      • zero pooled stdev for (i, j)      → density 0.0
      • zero pooled stdev over all clusters → intra-cluster density 0.0
    """

    def __init__(
        self,
        points: np.ndarray,
        cluster_ids: np.ndarray,
        clusters: Sequence[ClusterModel],
        rcrs: RCRTable,
        index: SpatialIndex,
        r: int,
    ):
        self.points = points
        self.cluster_ids = cluster_ids
        self.clusters = list(clusters)
        self.rcrs = rcrs
        self.index = index
        self.r = int(r)
        self._warned_pairs = set()

    @property
    def num_clusters(self) -> int:
        return len(self.clusters)

    # ------------------------------------------------------------------
    # Cardinality
    # ------------------------------------------------------------------
    def cardinality_between(self, center, radius: float, c_i: int, c_j: int) -> float:
        """Fraction of the members of c_i and c_j within radius of center."""
        total = self.clusters[c_i].size + self.clusters[c_j].size
        if total == 0:
            return 0.0

        cids = self.cluster_ids[self.index.range_query(center, radius)]
        count = int(np.count_nonzero((cids == c_i) | (cids == c_j)))
        return count / total

    def cardinality_within(self, center, radius: float, c_i: int) -> float:
        """Fraction of the members of c_i within radius of center."""
        size = self.clusters[c_i].size
        if size == 0:
            return 0.0

        cids = self.cluster_ids[self.index.range_query(center, radius)]
        return int(np.count_nonzero(cids == c_i)) / size

    # ------------------------------------------------------------------
    # Inter-cluster
    # ------------------------------------------------------------------
    def _rcr_pairs(self, c_i: int, c_j: int):
        pairs = self.rcrs[c_i, c_j]
        if not pairs and (c_i, c_j) not in self._warned_pairs:
            self._warned_pairs.add((c_i, c_j))
            logger.warning("No RCR pairs between clusters %d and %d; treating as 0.", c_i, c_j)
        return pairs

    def _pair_distances(self, pairs) -> np.ndarray:
        u = self.points[[p[0] for p in pairs]]
        w = self.points[[p[1] for p in pairs]]
        return np.hypot(u[:, 0] - w[:, 0], u[:, 1] - w[:, 1])

    def distance_between_clusters(self, c_i: int, c_j: int) -> float:
        """Mean length of the RCR segments between c_i and c_j."""
        pairs = self._rcr_pairs(c_i, c_j)
        if not pairs:
            return 0.0
        return float(np.sum(self._pair_distances(pairs))) / len(pairs)

    def density_between_clusters(self, c_i: int, c_j: int) -> float:
        """
        Density in the region between c_i and c_j.

        For each RCR pair (u, w), the neighbourhood of the midpoint with
        the pooled stdev as radius is counted, weighted by
        distance(u, w) / (2 * pooled stdev), and averaged over the pairs.
        """
        pairs = self._rcr_pairs(c_i, c_j)
        if not pairs:
            return 0.0

        s_i = self.clusters[c_i].stdev
        s_j = self.clusters[c_j].stdev
        avg_stdev = math.sqrt((s_i * s_i + s_j * s_j) / 2)
        if avg_stdev == 0.0:
            return 0.0

        distances = self._pair_distances(pairs)
        sum_densities = 0.0
        for (u, w), dist in zip(pairs, distances):
            mid = (self.points[u] + self.points[w]) / 2.0
            card = self.cardinality_between(mid, avg_stdev, c_i, c_j)
            sum_densities += (float(dist) / (2 * avg_stdev)) * card

        return sum_densities / len(pairs)

    def inter_cluster_density(self) -> float:
        """Mean over clusters of the densest region towards another cluster."""
        k = self.num_clusters
        total = 0.0
        for i in range(k):
            total += max(self.density_between_clusters(i, j) for j in range(k) if j != i)
        return total / k

    def separation(self) -> float:
        """Mean nearest-cluster distance, damped by the inter-cluster density."""
        k = self.num_clusters
        inter_density = self.inter_cluster_density()

        total = 0.0
        for i in range(k):
            total += min(self.distance_between_clusters(i, j) for j in range(k) if j != i)

        return (total / k) / (1 + inter_density)

    # ------------------------------------------------------------------
    # Intra-cluster
    # ------------------------------------------------------------------
    def density(self, s: float) -> float:
        """Sum of shrunk-representative neighbourhood fractions, over r."""
        total = 0.0
        for i, cluster in enumerate(self.clusters):
            for center in cluster.shrunk_representatives(s):
                total += self.cardinality_within(center, cluster.stdev, i)
        return total / self.r

    def intra_cluster_density(self, s: float) -> float:
        k = self.num_clusters
        avg_stdev = math.sqrt(sum(c.stdev * c.stdev for c in self.clusters) / k)
        if avg_stdev == 0.0:
            return 0.0
        return self.density(s) / (k * avg_stdev)

    def compactness_and_intra_density_changes(
        self, shrink_factors: Sequence[float] = DEFAULT_SHRINK_FACTORS
    ) -> Tuple[float, float]:
        """
        Compactness and intra-cluster density change over the shrink sweep.

        Returns (mean intra-cluster density, mean absolute change between
        consecutive shrink factors).
        """
        values: List[float] = [self.intra_cluster_density(s) for s in shrink_factors]
        logger.debug("Intra-cluster densities: %s", ", ".join(f"{v:.4f}" for v in values))

        compactness = sum(values) / len(values)
        change = sum(abs(b - a) for a, b in zip(values, values[1:])) / (len(values) - 1)
        return compactness, change


def compute_cohesion(compactness: float, intra_density_change: float) -> float:
    return compactness / (1 + intra_density_change)
