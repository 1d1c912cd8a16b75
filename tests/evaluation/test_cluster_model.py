import math

import numpy as np
import pytest

from clustval.evaluation.cluster_model import ClusterModel
from clustval.geometry.point import Point


def make_cluster(points, ids=None):
    cluster = ClusterModel(0, points)
    for i in range(len(points)) if ids is None else ids:
        cluster.add_point(i)
    cluster.compute_data()
    return cluster


def test_centroid_and_sample_stdev():
    points = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0], [2.0, 2.0]])
    cluster = make_cluster(points)
    assert cluster.centroid == Point(1.0, 1.0)
    # four distances of sqrt(2), divisor n-1
    assert cluster.stdev == pytest.approx(math.sqrt(4 * 2.0 / 3))


def test_singleton_cluster_has_zero_stdev(caplog):
    cluster = make_cluster(np.array([[3.0, 4.0]]))
    assert cluster.stdev == 0.0
    assert cluster.is_degenerate
    assert cluster.centroid == Point(3.0, 4.0)
    assert "singleton" in caplog.text


def test_empty_cluster_is_a_no_op():
    cluster = make_cluster(np.zeros((3, 2)), ids=[])
    assert cluster.centroid is None
    assert cluster.stdev == 0.0
    assert cluster.choose_representatives(3) == []
    assert cluster.closest_representative(Point(0.0, 0.0)) is None
    assert cluster.shrunk_representatives(0.5).shape == (0, 2)


def test_representatives_equal_members_when_r_is_large():
    points = np.random.default_rng(0).normal(size=(6, 2))
    cluster = make_cluster(points)
    assert cluster.choose_representatives(6) == list(range(6))
    assert cluster.choose_representatives(50) == list(range(6))


def test_farthest_first_order():
    points = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0], [10.0, 0.0]])
    cluster = make_cluster(points)
    # centroid x=3.2: farthest is 10, then 0 (farthest from 10), then 3 (farthest from 0)
    assert cluster.choose_representatives(3) == [4, 0, 3]


def test_farthest_first_ties_go_to_first_member():
    points = np.array([[1.0, 1.0], [-1.0, 1.0], [-1.0, -1.0], [1.0, -1.0]])
    cluster = make_cluster(points)
    reps = cluster.choose_representatives(1)
    assert reps == [0]


def test_representatives_are_unique_subset():
    points = np.random.default_rng(3).normal(size=(40, 2))
    cluster = make_cluster(points)
    reps = cluster.choose_representatives(7)
    assert len(reps) == 7
    assert len(set(reps)) == 7
    assert set(reps) <= set(cluster.members)


def test_duplicate_points_still_yield_distinct_representatives():
    points = np.zeros((5, 2))
    cluster = make_cluster(points)
    assert sorted(cluster.choose_representatives(3)) == [0, 1, 2]


def test_closest_representative_ties_go_to_first():
    points = np.array([[-1.0, 0.0], [1.0, 0.0], [5.0, 5.0]])
    cluster = make_cluster(points)
    cluster.choose_representatives(3)
    assert cluster.closest_representative(Point(0.0, 0.0)) == 0
    assert cluster.closest_representative(np.array([4.0, 4.0])) == 2


def test_shrunk_representatives_move_towards_centroid():
    points = np.array([[0.0, 0.0], [4.0, 0.0]])
    cluster = make_cluster(points)
    cluster.choose_representatives(2)
    shrunk = cluster.shrunk_representatives(0.25)
    assert np.allclose(shrunk, [[0.5, 0.0], [3.5, 0.0]])
    assert np.allclose(cluster.shrunk_representatives(1.0), [[2.0, 0.0], [2.0, 0.0]])


def test_shrunk_representatives_match_point_interpolation():
    points = np.random.default_rng(4).normal(size=(12, 2))
    cluster = make_cluster(points)
    cluster.choose_representatives(4)

    shrunk = cluster.shrunk_representatives(0.3)
    expected = [Point.from_array(points[i]).shrink_towards(cluster.centroid, 0.3) for i in cluster.representatives]
    assert shrunk.shape == (4, 2)
    assert [Point.from_array(p) for p in shrunk] == expected
