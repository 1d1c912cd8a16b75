import logging
from typing import Optional, Protocol, Sequence

import numpy as np
from sklearn.neighbors import KDTree

from clustval.geometry.point import Point

logger = logging.getLogger(__name__)


class SpatialIndex(Protocol):
    """
    Fixed-radius neighbour search over a static point set.

    An index must:
        • be built once from an (N, 2) array of coordinates
        • implement range_query(center, radius) -> np.ndarray of point ids

    Returned ids are the caller's ids (positions in the full point array),
    not positions inside the index.
    """

    def range_query(self, center: Point, radius: float) -> np.ndarray:
        ...


# ---- Helpers -----------------------------------------------------------------
def _prepare(points: np.ndarray, ids: Optional[Sequence[int]]):
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"spatial index expects (N, 2) points, got shape={points.shape}")

    if ids is None:
        ids = np.arange(points.shape[0], dtype=np.intp)
        coords = points
    else:
        ids = np.asarray(ids, dtype=np.intp)
        coords = points[ids]
    return np.ascontiguousarray(coords), ids


def _center(center) -> np.ndarray:
    if isinstance(center, Point):
        return center.as_array()
    return np.asarray(center, dtype=np.float64)


# ==============================================================================
#   KDTreeIndex
# ==============================================================================


class KDTreeIndex:
    """
    Range queries backed by ``sklearn.neighbors.KDTree``.

    Parameters
    ----------
    points : np.ndarray (N, 2)
        Full point array.
    ids : sequence of int, optional
        Subset of point ids to index (e.g. the classified points only).
        Defaults to every point.
    leaf_size : int
        Passed through to KDTree.
    """

    def __init__(self, points: np.ndarray, ids: Optional[Sequence[int]] = None, leaf_size: int = 40):
        if int(leaf_size) < 1:
            raise ValueError("leaf_size must be >= 1")

        self._coords, self._ids = _prepare(points, ids)
        self.leaf_size = int(leaf_size)
        self._tree = KDTree(self._coords, leaf_size=self.leaf_size) if len(self._ids) else None

        logger.debug("KDTreeIndex built over %d points (leaf_size=%d).", len(self._ids), self.leaf_size)

    def __len__(self) -> int:
        return len(self._ids)

    def range_query(self, center, radius: float) -> np.ndarray:
        if self._tree is None or radius < 0:
            return np.empty(0, dtype=np.intp)

        q = _center(center).reshape(1, 2)
        local = self._tree.query_radius(q, r=float(radius))[0]
        return self._ids[np.sort(local)]


# ==============================================================================
#   BruteForceIndex
# ==============================================================================


class BruteForceIndex:
    """Linear scan over all indexed points, comparing squared distances."""

    def __init__(self, points: np.ndarray, ids: Optional[Sequence[int]] = None):
        self._coords, self._ids = _prepare(points, ids)

    def __len__(self) -> int:
        return len(self._ids)

    def range_query(self, center, radius: float) -> np.ndarray:
        if radius < 0:
            return np.empty(0, dtype=np.intp)

        diffs = self._coords - _center(center)
        d2 = np.einsum("ij,ij->i", diffs, diffs)
        return self._ids[d2 <= radius * radius]


_BACKENDS = {
    "kdtree": KDTreeIndex,
    "brute": BruteForceIndex,
}


def build_index(
    points: np.ndarray,
    ids: Optional[Sequence[int]] = None,
    backend: str = "kdtree",
    **kwargs,
) -> SpatialIndex:
    """Build a spatial index with the named backend ("kdtree" | "brute")."""
    cls = _BACKENDS.get(backend.lower())
    if cls is None:
        raise ValueError(f"Unknown spatial index backend '{backend}'; expected one of {sorted(_BACKENDS)}")
    return cls(points, ids, **kwargs)
