from .medoids import MedoidSelector
from .partition import UNCLASSIFIED, Partition

__all__ = ["Partition", "UNCLASSIFIED", "MedoidSelector"]
