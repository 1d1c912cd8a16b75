from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from clustval.partition.medoids import MedoidSelector

logger = logging.getLogger(__name__)

UNCLASSIFIED = -1


class Partition:
    """
    Assignment of n objects to k clusters.

    cluster_ids[i] is the cluster of object i, in 0..k-1, or UNCLASSIFIED
    for noise. medoid_ids[c] is the object id representing cluster c.

    Example:
        p = Partition.from_labels(labels, points=X)
        p.num_clusters(), p.cluster_size(0)
    """

    UNCLASSIFIED = UNCLASSIFIED

    def __init__(
        self,
        cluster_ids: Sequence[int],
        medoid_ids: Optional[Sequence[int]] = None,
        num_clusters: Optional[int] = None,
    ):
        ids = np.asarray(cluster_ids)
        if ids.ndim != 1:
            raise ValueError(f"cluster_ids must be 1D, got shape={ids.shape}")
        if ids.size and not np.issubdtype(ids.dtype, np.integer):
            raise TypeError(f"cluster_ids must be integers, got dtype={ids.dtype}")
        ids = ids.astype(np.intp, copy=True)

        if num_clusters is None:
            if medoid_ids is not None:
                num_clusters = len(medoid_ids)
            else:
                num_clusters = int(ids.max()) + 1 if ids.size else 0
        num_clusters = int(num_clusters)

        bad = (ids != UNCLASSIFIED) & ((ids < 0) | (ids >= num_clusters))
        if bad.any():
            first = int(np.flatnonzero(bad)[0])
            raise ValueError(
                f"cluster id {int(ids[first])} of object {first} is outside 0..{num_clusters - 1}"
            )

        if medoid_ids is not None and len(medoid_ids) != num_clusters:
            raise ValueError(
                f"expected {num_clusters} medoid ids, got {len(medoid_ids)}"
            )

        ids.setflags(write=False)
        self.cluster_ids = ids
        self.medoid_ids: List[int] = [int(m) for m in medoid_ids] if medoid_ids is not None else []
        self._num_clusters = num_clusters
        self._sizes = np.bincount(ids[ids != UNCLASSIFIED], minlength=num_clusters)

    # ------------------------------------------------------------------
    @classmethod
    def from_labels(
        cls,
        labels: Sequence[int],
        points: Optional[np.ndarray] = None,
        selector: Optional[MedoidSelector] = None,
    ) -> "Partition":
        """
        Build a partition from arbitrary clusterer labels.

        Non-negative labels are remapped to 0..k-1 in sorted order;
        negative labels (e.g. HDBSCAN's -1) become UNCLASSIFIED. When
        points are given, a medoid is computed for every cluster.
        """
        labels = np.asarray(labels)
        if labels.ndim != 1:
            raise ValueError(f"labels must be 1D, got shape={labels.shape}")

        classified = labels >= 0
        unique = np.unique(labels[classified])
        cluster_ids = np.full(labels.shape[0], UNCLASSIFIED, dtype=np.intp)
        cluster_ids[classified] = np.searchsorted(unique, labels[classified])

        medoid_ids = None
        if points is not None:
            points = np.asarray(points)
            if points.shape[0] != labels.shape[0]:
                raise ValueError("Length mismatch between points and labels")
            selector = selector or MedoidSelector()
            medoid_ids = selector.select(points, cluster_ids, len(unique))

        n_noise = int((~classified).sum())
        logger.debug(
            "Partition from labels: %d objects, %d clusters, %d unclassified.",
            labels.shape[0],
            len(unique),
            n_noise,
        )
        return cls(cluster_ids, medoid_ids=medoid_ids, num_clusters=len(unique))

    # ------------------------------------------------------------------
    def size(self) -> int:
        return int(self.cluster_ids.shape[0])

    def num_clusters(self) -> int:
        return self._num_clusters

    def cluster_size(self, cluster_id: int) -> int:
        return int(self._sizes[cluster_id])

    def cluster_sizes(self) -> np.ndarray:
        return self._sizes.copy()

    def members(self, cluster_id: int) -> np.ndarray:
        return np.flatnonzero(self.cluster_ids == cluster_id)

    def is_classified(self, object_id: int) -> bool:
        return bool(self.cluster_ids[object_id] != UNCLASSIFIED)

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        n_noise = int((self.cluster_ids == UNCLASSIFIED).sum())
        return f"Partition(objects={self.size():,}, clusters={self._num_clusters}, unclassified={n_noise:,})"
