import logging

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")


@pytest.fixture(autouse=True, scope="session")
def configure_test_logging():
    """
    Configure consistent log formatting for all tests.
    Runs automatically once per test session.
    """
    log_format = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
    date_format = "%H:%M:%S"
    logging.basicConfig(level=logging.INFO, format=log_format, datefmt=date_format)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)  # silence noisy libs


@pytest.fixture
def two_tight_pairs():
    """Two 2-point clusters at x=0 and x=10."""
    points = np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]])
    labels = np.array([0, 0, 1, 1])
    return points, labels


@pytest.fixture
def collinear_clusters():
    """Three clusters of 5 points on the x axis, centred at 0, 10 and 20."""
    offsets = np.array([[0.0, 0.0], [1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0]])
    points = np.vstack([offsets + [cx, 0.0] for cx in (0.0, 10.0, 20.0)])
    labels = np.repeat([0, 1, 2], 5)
    return points, labels
