"""
Evaluation module for clustval.

Provides cluster validity measures such as:
- CDbw (composite density-between-and-within clusters index)
- BIC (Bayesian Information Criterion over medoids)
- Unified evaluator interface
"""

from .bic import bic_from_summaries, compute_bic
from .cdbw import CDbw, CDbwResult
from .cluster_model import ClusterModel
from .density import DEFAULT_SHRINK_FACTORS, DensityCalculator
from .evaluator import ClusterEvaluator
from .rcr import RCRTable

__all__ = [
    "CDbw",
    "CDbwResult",
    "ClusterModel",
    "RCRTable",
    "DensityCalculator",
    "DEFAULT_SHRINK_FACTORS",
    "compute_bic",
    "bic_from_summaries",
    "ClusterEvaluator",
]
