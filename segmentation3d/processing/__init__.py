"""
Point cloud containers and statistical outlier filtering.

This module holds the colored point cloud type, the labeled objects built
from it, nearest-neighbour queries and the statistical outlier filter.
"""

from .point_cloud import BoundingVolume, Point3D, PointCloud, SegmentedObject
from .neighbors import BruteForceNeighbors, KDTreeNeighbors, NearestNeighbors, make_neighbor_index
from .outlier_filter import (
    FilterMode,
    FilterPolicy,
    StatisticalOutlierFilter,
    apply_filter,
    build_filter,
    filter_from_policy,
)

__all__ = [
    "BoundingVolume",
    "Point3D",
    "PointCloud",
    "SegmentedObject",
    "BruteForceNeighbors",
    "KDTreeNeighbors",
    "NearestNeighbors",
    "make_neighbor_index",
    "FilterMode",
    "FilterPolicy",
    "StatisticalOutlierFilter",
    "apply_filter",
    "build_filter",
    "filter_from_policy",
]
