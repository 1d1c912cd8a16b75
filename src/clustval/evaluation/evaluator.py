import logging

import numpy as np

from clustval.evaluation.bic import compute_bic
from clustval.evaluation.cdbw import CDbw
from clustval.partition.partition import Partition
from clustval.utils.timing import catch_time

logger = logging.getLogger(__name__)

CDBW_METRICS = ("cdbw", "separation", "compactness", "cohesion")


class ClusterEvaluator:
    """
    Unified evaluator for clustering metrics.

    Example:
        evaluator = ClusterEvaluator(points, labels, representatives=8)
        results = evaluator.evaluate_all()
    """

    def __init__(self, points, labels, representatives: int = 10, index: str = "kdtree"):
        self.points = np.asarray(points, dtype=np.float64)
        self.labels = np.asarray(labels)
        self.representatives = int(representatives)
        self.index = index
        self._partition = None
        self._cdbw = None

    @property
    def partition(self) -> Partition:
        if self._partition is None:
            self._partition = Partition.from_labels(self.labels, points=self.points)
        return self._partition

    def _cdbw_scores(self) -> dict:
        if self._cdbw is None:
            index = CDbw(self.points, self.partition, index=self.index)
            index.compute(self.representatives)
            self._cdbw = index.result()
        return {name: getattr(self._cdbw, name) for name in CDBW_METRICS}

    def evaluate_all(self, metrics=None):
        """
        Compute all (or selected) evaluation metrics.

        Args:
            metrics (list[str], optional):
                Subset of metrics to compute, e.g. ["cdbw", "bic"]

        Returns:
            dict[str, float]: Metric names → values (NaN when a metric fails)
        """
        available = {name: (lambda n=name: self._cdbw_scores()[n]) for name in CDBW_METRICS}
        available["bic"] = lambda: compute_bic(self.points, self.partition)

        if metrics is None:
            metrics = list(available.keys())

        results = {}
        for name in metrics:
            func = available.get(name)
            if func is None:
                logger.warning(f"Unknown metric '{name}', skipping.")
                continue

            try:
                with catch_time(f"metric '{name}'"):
                    value = float(func())
            except Exception as e:
                logger.error(f"Metric '{name}' failed: {e}")
                value = float("nan")
            results[name] = value

        msg = ", ".join(f"{k}: {v:.3f}" for k, v in results.items())
        logger.info(f"Evaluation metrics → {msg}")
        return results
