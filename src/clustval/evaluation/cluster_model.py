import logging
import math
from typing import List, Optional

import numpy as np

from clustval.geometry.point import Point

logger = logging.getLogger(__name__)


class ClusterModel:
    """
    Per-cluster summary used by the CDbw index.

    Holds member ids into a shared (N, 2) point array, the centroid, the
    sample standard deviation of member distances to the centroid, and
    the representative points chosen by farthest-first traversal.
    """

    def __init__(self, cluster_id: int, points: np.ndarray):
        self.cluster_id = int(cluster_id)
        self._points = points
        self.members: List[int] = []
        self.centroid: Optional[Point] = None
        self.stdev = 0.0
        self.representatives: List[int] = []

    def add_point(self, point_id: int) -> None:
        self.members.append(int(point_id))

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def is_degenerate(self) -> bool:
        """True when the spread is undefined (fewer than two members)."""
        return len(self.members) < 2

    # ------------------------------------------------------------------
    def compute_data(self) -> None:
        """Compute centroid and stdev from the current members."""
        n = len(self.members)
        if n == 0:
            logger.warning("Cluster %d has no members.", self.cluster_id)
            return

        coords = self._points[self.members]
        self.centroid = Point.from_array(coords.sum(axis=0) / n)

        if n == 1:
            self.stdev = 0.0
            logger.warning("Cluster %d is a singleton; stdev set to 0.", self.cluster_id)
            return

        d = np.hypot(coords[:, 0] - self.centroid.x, coords[:, 1] - self.centroid.y)
        self.stdev = math.sqrt(float(np.sum(d * d)) / (n - 1))

    # ------------------------------------------------------------------
    def choose_representatives(self, r: int) -> List[int]:
        """
        Farthest-first selection of up to r representatives.

        The first pick is the member farthest from the centroid; each
        following pick is the unused member farthest from the previous
        pick. Ties go to the earliest member.
        """
        if r >= len(self.members):
            self.representatives = list(self.members)
            return self.representatives

        if self.centroid is None:
            self.compute_data()

        coords = self._points[self.members]
        used = np.zeros(len(self.members), dtype=bool)
        ref = self.centroid.as_array()

        reps: List[int] = []
        for _ in range(r):
            d = np.hypot(coords[:, 0] - ref[0], coords[:, 1] - ref[1])
            d[used] = -np.inf
            pos = int(np.argmax(d))

            used[pos] = True
            reps.append(self.members[pos])
            ref = coords[pos]

        self.representatives = reps
        return reps

    # ------------------------------------------------------------------
    def representative_coords(self) -> np.ndarray:
        return self._points[self.representatives].reshape(-1, 2)

    def closest_representative(self, p) -> Optional[int]:
        """Id of the representative nearest to p (first one on ties)."""
        if not self.representatives:
            return None

        q = p.as_array() if isinstance(p, Point) else np.asarray(p, dtype=np.float64)
        reps = self.representative_coords()
        d = np.hypot(reps[:, 0] - q[0], reps[:, 1] - q[1])
        return self.representatives[int(np.argmin(d))]

    def shrunk_representatives(self, s: float) -> np.ndarray:
        """Representatives moved a fraction s of the way to the centroid."""
        reps = self.representative_coords()
        if self.centroid is None:
            return reps
        shrunk = [Point.from_array(p).shrink_towards(self.centroid, s).as_array() for p in reps]
        return np.array(shrunk, dtype=np.float64).reshape(-1, 2)

    def __repr__(self) -> str:
        return (
            f"ClusterModel(id={self.cluster_id}, size={self.size}, "
            f"stdev={self.stdev:.4f}, representatives={len(self.representatives)})"
        )
