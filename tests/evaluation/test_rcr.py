import numpy as np
import pytest
from sklearn.datasets import make_blobs

from clustval.evaluation import CDbw, RCRTable
from clustval.partition import Partition


def test_rcr_pairs_two_tight_pairs(two_tight_pairs):
    points, labels = two_tight_pairs
    index = CDbw(points, Partition.from_labels(labels))
    index.compute(2)
    assert index.rcrs_[0, 1] == [(0, 2), (1, 3)]
    assert index.rcrs_[1, 0] == [(2, 0), (3, 1)]


def test_rcr_pairs_collinear(collinear_clusters):
    points, labels = collinear_clusters
    index = CDbw(points, Partition.from_labels(labels))
    index.compute(5)
    assert index.rcrs_[0, 1] == [(1, 7)]
    assert index.rcrs_[0, 2] == [(1, 12)]
    assert index.rcrs_[2, 1] == [(12, 6)]


@pytest.mark.parametrize("r", [1, 3, 8])
def test_rcr_pairs_are_mutual_nearest(r):
    X, y = make_blobs(n_samples=120, centers=4, cluster_std=1.0, random_state=2)
    index = CDbw(X, Partition.from_labels(y))
    index.compute(r)

    for i, j in index.rcrs_.ordered_pairs():
        pairs = index.rcrs_[i, j]
        assert pairs, f"expected at least one RCR pair for ({i}, {j})"
        for u, w in pairs:
            assert index.clusters[j].closest_representative(X[u]) == w
            assert index.clusters[i].closest_representative(X[w]) == u
        # both directions are computed independently but agree
        assert sorted((w, u) for u, w in pairs) == sorted(index.rcrs_[j, i])


def test_table_has_no_diagonal():
    table = RCRTable(3)
    assert list(table.ordered_pairs()) == [(0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1)]
    with pytest.raises(KeyError):
        table[1, 1] = [(0, 0)]
