import math

import numpy as np
import pytest
from sklearn.datasets import make_blobs

from clustval.evaluation.bic import bic_from_summaries, compute_bic
from clustval.partition import Partition


def test_bic_hand_computed():
    points = np.array([[0.0, 0.0], [2.0, 0.0]])
    p = Partition([0, 0], medoid_ids=[0])
    # s2 = 4, s^M = 4, d^2 = (0, 4), pj = 3
    expected = 2 * math.log(1.0 / (math.sqrt(2 * math.pi) * 4.0)) - 0.5 - 1.5 * math.log(2.0)
    assert compute_bic(points, p) == pytest.approx(expected)


def test_bic_prefers_true_clustering():
    X, y = make_blobs(n_samples=150, centers=3, cluster_std=0.5, random_state=0)
    true_bic = compute_bic(X, Partition.from_labels(y, points=X))
    one_bic = compute_bic(X, Partition.from_labels(np.zeros(150, dtype=int), points=X))
    assert true_bic > one_bic


def test_bic_without_medoids_is_nan(caplog):
    X = np.random.rand(10, 2)
    assert math.isnan(compute_bic(X, Partition.from_labels([0] * 5 + [1] * 5)))
    assert "missing medoids" in caplog.text


def test_bic_too_few_objects_is_nan():
    X = np.array([[0.0, 0.0], [1.0, 1.0]])
    p = Partition.from_labels([0, 1], points=X)
    assert math.isnan(compute_bic(X, p))


def test_bic_length_mismatch():
    with pytest.raises(ValueError):
        compute_bic(np.zeros((3, 2)), Partition([0, 0], medoid_ids=[0]))


def test_bic_from_summaries_hand_computed():
    value = bic_from_summaries(1, [4], [3.0], dimensionality=2)
    expected = -2 * math.log(2 * math.pi) - 1.5 - 1.5 * math.log(4.0)
    assert value == pytest.approx(expected)


def test_bic_from_summaries_degenerate():
    assert math.isnan(bic_from_summaries(2, [1, 1], [0.0, 0.0], 2))
    assert math.isnan(bic_from_summaries(1, [5], [0.0], 2))
    with pytest.raises(ValueError):
        bic_from_summaries(3, [4, 4], [1.0, 1.0], 2)
