from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from clustval.evaluation.cluster_model import ClusterModel
from clustval.evaluation.density import (
    DEFAULT_SHRINK_FACTORS,
    DensityCalculator,
    compute_cohesion,
)
from clustval.evaluation.rcr import RCRTable
from clustval.geometry.spatial_index import build_index
from clustval.partition.partition import UNCLASSIFIED, Partition
from clustval.utils.timing import catch_time

logger = logging.getLogger(__name__)


@dataclass
class CDbwResult:
    """
    Scores of one CDbw evaluation.

    Contains:
      • cdbw – composite index (cohesion × separation × compactness)
      • separation, compactness, cohesion – sub-scores
      • intra_cluster_density_change – roughness of the density sweep
      • representatives – r used for the evaluation
      • n_clusters – clusters in the partition
    """

    cdbw: float
    separation: float
    compactness: float
    cohesion: float
    intra_cluster_density_change: float
    representatives: int
    n_clusters: int

    @property
    def is_defined(self) -> bool:
        return not np.isnan(self.cdbw)

    def summary(self) -> dict:
        """Return a JSON-serializable summary of the scores."""
        return {k: (None if isinstance(v, float) and np.isnan(v) else v) for k, v in asdict(self).items()}

    def __repr__(self) -> str:
        return (
            f"CDbwResult(cdbw={self.cdbw:.4f}, separation={self.separation:.4f}, "
            f"compactness={self.compactness:.4f}, cohesion={self.cohesion:.4f}, "
            f"r={self.representatives}, clusters={self.n_clusters})"
        )


# ==============================================================================
#   CDbw
# ==============================================================================


class CDbw:
    """
    Composite density-between-and-within clusters validity index.

    Cluster summaries and the spatial index are built once in the
    constructor; every call to compute(r) selects representatives, builds
    the RCR table, and recomputes all scores from scratch.

    Example:
        index = CDbw(points, Partition.from_labels(labels))
        score = index.compute(r=10)
        index.separation(), index.compactness(), index.cohesion()

    Parameters
    ----------
    points : np.ndarray (N, 2)
        Coordinates of every object in the partition.
    partition : Partition
        Cluster assignment; UNCLASSIFIED objects are ignored.
    index : {"kdtree", "brute"}
        Spatial index backend used for range queries.
    leaf_size : int
        KDTree leaf size.
    shrink_factors : sequence of float
        Strictly ascending factors in [0, 1] for the intra-cluster density sweep.
    """

    def __init__(
        self,
        points: np.ndarray,
        partition: Partition,
        index: str = "kdtree",
        leaf_size: int = 40,
        shrink_factors: Sequence[float] = DEFAULT_SHRINK_FACTORS,
    ):
        if not isinstance(points, np.ndarray):
            raise TypeError(f"CDbw expected numpy.ndarray, got {type(points)}")
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"CDbw expected (N, 2) points, got shape={points.shape}")
        if not isinstance(partition, Partition):
            raise TypeError(f"CDbw expected a Partition, got {type(partition)}")
        if points.shape[0] != partition.size():
            raise ValueError(
                f"Length mismatch: {points.shape[0]} points, {partition.size()} partition objects"
            )

        shrink_factors = tuple(float(s) for s in shrink_factors)
        if len(shrink_factors) < 2:
            raise ValueError("shrink_factors needs at least two values")
        if not all(0.0 <= s <= 1.0 for s in shrink_factors):
            raise ValueError("shrink_factors must be finite values in [0, 1]")
        if not all(a < b for a, b in zip(shrink_factors, shrink_factors[1:])):
            raise ValueError("shrink_factors must be strictly ascending")
        if not isinstance(index, str):
            raise TypeError(f"index must be a backend name, got {type(index)}")

        self.points = points.astype(np.float64, copy=False)
        self.partition = partition
        self.shrink_factors = shrink_factors

        self.r_: Optional[int] = None
        self.rcrs_: Optional[RCRTable] = None
        self._calculator: Optional[DensityCalculator] = None
        self._reset_scores()

        self.clusters: List[ClusterModel] = self._create_clusters()

        classified = np.flatnonzero(partition.cluster_ids != UNCLASSIFIED)
        index_kwargs = {"leaf_size": leaf_size} if index.lower() == "kdtree" else {}
        self.index = build_index(self.points, classified, backend=index, **index_kwargs)

        logger.info(
            "CDbw initialized: %d points (%d classified), %d clusters, %s index.",
            self.points.shape[0],
            len(classified),
            len(self.clusters),
            index,
        )

    # ----------------------------------------------------------------------
    def _reset_scores(self) -> None:
        self.cdbw_ = 0.0
        self.separation_ = 0.0
        self.compactness_ = 0.0
        self.cohesion_ = 0.0
        self.intra_cluster_density_change_ = 0.0

    def _create_clusters(self) -> List[ClusterModel]:
        clusters = [ClusterModel(i, self.points) for i in range(self.partition.num_clusters())]
        for point_id, cid in enumerate(self.partition.cluster_ids):
            if cid != UNCLASSIFIED:
                clusters[cid].add_point(point_id)

        for cluster in clusters:
            cluster.compute_data()
        return clusters

    # ----------------------------------------------------------------------
    def compute(self, r: int) -> float:
        """
        Compute the CDbw index with r representatives per cluster.

        Returns NaN when the partition has fewer than two clusters.
        """
        if isinstance(r, bool) or not isinstance(r, (int, np.integer)):
            raise TypeError(f"r must be an integer, got {type(r)}")
        if r < 1:
            raise ValueError(f"r must be >= 1, got {r}")

        self._reset_scores()
        self.r_ = int(r)

        num_clusters = len(self.clusters)
        if num_clusters < 2:
            logger.warning("CDbw is undefined for %d cluster(s); returning NaN.", num_clusters)
            self.rcrs_ = None
            self._calculator = None
            self.cdbw_ = float("nan")
            return self.cdbw_

        with catch_time("representative selection"):
            for cluster in self.clusters:
                cluster.choose_representatives(self.r_)

        with catch_time("RCR construction"):
            self.rcrs_ = RCRTable.build(self.clusters, self.points)

        self._calculator = DensityCalculator(
            self.points,
            self.partition.cluster_ids,
            self.clusters,
            self.rcrs_,
            self.index,
            self.r_,
        )

        with catch_time("separation"):
            self.separation_ = self._calculator.separation()
        with catch_time("compactness"):
            self.compactness_, self.intra_cluster_density_change_ = (
                self._calculator.compactness_and_intra_density_changes(self.shrink_factors)
            )
        self.cohesion_ = compute_cohesion(self.compactness_, self.intra_cluster_density_change_)
        self.cdbw_ = self.cohesion_ * self.separation_ * self.compactness_

        logger.info(
            "CDbw(r=%d) = %.4f [separation=%.4f, compactness=%.4f, cohesion=%.4f]",
            self.r_,
            self.cdbw_,
            self.separation_,
            self.compactness_,
            self.cohesion_,
        )
        return self.cdbw_

    # ----------------------------------------------------------------------
    # Accessors
    # ----------------------------------------------------------------------
    def cdbw(self) -> float:
        return self.cdbw_

    def separation(self) -> float:
        return self.separation_

    def compactness(self) -> float:
        return self.compactness_

    def cohesion(self) -> float:
        return self.cohesion_

    def intra_cluster_density_change(self) -> float:
        return self.intra_cluster_density_change_

    def result(self) -> CDbwResult:
        if self.r_ is None:
            raise RuntimeError("compute(r) must be called before result()")
        return CDbwResult(
            cdbw=self.cdbw_,
            separation=self.separation_,
            compactness=self.compactness_,
            cohesion=self.cohesion_,
            intra_cluster_density_change=self.intra_cluster_density_change_,
            representatives=self.r_,
            n_clusters=len(self.clusters),
        )

    @property
    def calculator(self) -> DensityCalculator:
        if self._calculator is None:
            raise RuntimeError("No density calculator; compute(r) with at least two clusters first")
        return self._calculator

    def distance_between_clusters(self, c_i: int, c_j: int) -> float:
        return self.calculator.distance_between_clusters(c_i, c_j)

    def density_between_clusters(self, c_i: int, c_j: int) -> float:
        return self.calculator.density_between_clusters(c_i, c_j)

    # ----------------------------------------------------------------------
    # Diagnostics
    # ----------------------------------------------------------------------
    def cluster_table(self) -> pd.DataFrame:
        """One row per cluster with its size, centroid, stdev and representatives."""
        rows = []
        for c in self.clusters:
            rows.append(
                {
                    "cluster": c.cluster_id,
                    "size": c.size,
                    "centroid_x": c.centroid.x if c.centroid is not None else np.nan,
                    "centroid_y": c.centroid.y if c.centroid is not None else np.nan,
                    "stdev": c.stdev,
                    "n_representatives": len(c.representatives),
                }
            )
        return pd.DataFrame(
            rows,
            columns=["cluster", "size", "centroid_x", "centroid_y", "stdev", "n_representatives"],
        )

    def pair_table(self) -> pd.DataFrame:
        """One row per ordered cluster pair with its RCR count, distance and density."""
        calc = self.calculator
        rows = [
            {
                "cluster_i": i,
                "cluster_j": j,
                "n_rcr": len(self.rcrs_[i, j]),
                "distance": calc.distance_between_clusters(i, j),
                "density": calc.density_between_clusters(i, j),
            }
            for i, j in self.rcrs_.ordered_pairs()
        ]
        return pd.DataFrame(rows, columns=["cluster_i", "cluster_j", "n_rcr", "distance", "density"])

    def __repr__(self) -> str:
        return f"CDbw(points={self.points.shape[0]:,}, clusters={len(self.clusters)}, r={self.r_})"
