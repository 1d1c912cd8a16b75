"""
Geometry primitives for clustval.

Provides:
- Point (2-D value type)
- Spatial indexes supporting fixed-radius range queries
"""

from .point import Point
from .spatial_index import BruteForceIndex, KDTreeIndex, SpatialIndex, build_index

__all__ = [
    "Point",
    "SpatialIndex",
    "KDTreeIndex",
    "BruteForceIndex",
    "build_index",
]
