import logging
from typing import List, Sequence, Tuple

from clustval.evaluation.cluster_model import ClusterModel

logger = logging.getLogger(__name__)

RCRPair = Tuple[int, int]


def compute_rcrs_i_j(c_i: ClusterModel, c_j: ClusterModel, points) -> List[RCRPair]:
    """
    Representative closest pairs between two clusters.

    A pair (v, w), v a representative of c_i and w one of c_j, is kept
    only when w is the representative of c_j closest to v and v is the
    representative of c_i closest to w.
    """
    closest_in_j = {v: c_j.closest_representative(points[v]) for v in c_i.representatives}
    closest_in_i = {w: c_i.closest_representative(points[w]) for w in c_j.representatives}

    return [
        (v, w)
        for v, w in closest_in_j.items()
        if w is not None and closest_in_i.get(w) == v
    ]


class RCRTable:
    """
    Square table of RCR pairs, indexed by an ordered pair of cluster ids.

    Every off-diagonal cell (i, j) is computed on its own, so (i, j) and
    (j, i) hold the same pairs with the members swapped.
    """

    def __init__(self, num_clusters: int):
        self.num_clusters = int(num_clusters)
        self._cells: List[List[List[RCRPair]]] = [
            [[] for _ in range(self.num_clusters)] for _ in range(self.num_clusters)
        ]

    @classmethod
    def build(cls, clusters: Sequence[ClusterModel], points) -> "RCRTable":
        table = cls(len(clusters))
        for i, c_i in enumerate(clusters):
            for j, c_j in enumerate(clusters):
                if i != j:
                    table[i, j] = compute_rcrs_i_j(c_i, c_j, points)

        n_pairs = sum(len(table[i, j]) for i, j in table.ordered_pairs())
        logger.debug("RCR table built for %d clusters (%d pairs).", table.num_clusters, n_pairs)
        return table

    def ordered_pairs(self):
        for i in range(self.num_clusters):
            for j in range(self.num_clusters):
                if i != j:
                    yield i, j

    def __getitem__(self, key) -> List[RCRPair]:
        i, j = key
        return self._cells[i][j]

    def __setitem__(self, key, pairs: List[RCRPair]) -> None:
        i, j = key
        if i == j:
            raise KeyError(f"RCR table has no diagonal cell ({i}, {j})")
        self._cells[i][j] = list(pairs)
