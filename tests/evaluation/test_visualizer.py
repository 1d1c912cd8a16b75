import logging

import numpy as np
import pytest
from sklearn.datasets import make_blobs

from clustval.evaluation import CDbw
from clustval.evaluation.visualizer import plot_cdbw_2d
from clustval.partition import Partition


def test_plot_saves_file(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    X, y = make_blobs(n_samples=60, centers=3, cluster_std=0.4, random_state=0)
    y[:3] = -1
    index = CDbw(X, Partition.from_labels(y))
    index.compute(4)

    out = tmp_path / "cdbw.png"
    plot_cdbw_2d(index, savepath=str(out))
    assert out.exists() and out.stat().st_size > 0
    assert "Saved CDbw plot" in caplog.text


def test_plot_requires_compute():
    index = CDbw(np.random.rand(6, 2), Partition.from_labels([0, 0, 0, 1, 1, 1]))
    with pytest.raises(ValueError):
        plot_cdbw_2d(index)
