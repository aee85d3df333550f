#!/usr/bin/env python3
"""
Statistical outlier removal for per-object point clouds.

For every point the mean distance to its ``mean_k`` nearest neighbours is
computed. A point is kept when that mean is at most mu + sigma * std, where
mu and std are taken over all points of the cloud. The filter only removes
points, and running it twice is not generally idempotent because removal
changes the neighbour statistics of the survivors.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from ..errors import ConfigurationError
from .neighbors import KDTREE_MIN_POINTS, make_neighbor_index
from .point_cloud import PointCloud

logger = logging.getLogger(__name__)


class FilterMode(Enum):
    """Whether statistical filtering runs."""
    DISABLED = "disabled"
    ENABLED = "enabled"


@dataclass(frozen=True)
class FilterPolicy:
    """Filter configuration: DISABLED, or ENABLED with mean_k and sigma."""
    mode: FilterMode
    mean_k: int = 0
    sigma: float = 0.0

    @classmethod
    def disabled(cls) -> "FilterPolicy":
        return cls(FilterMode.DISABLED)

    @classmethod
    def enabled(cls, mean_k: int, sigma: float) -> "FilterPolicy":
        if mean_k <= 0 or sigma <= 0.0:
            raise ConfigurationError(
                f"an enabled filter needs mean_k > 0 and sigma > 0, got mean_k={mean_k}, sigma={sigma}",
                {"parameter": "mean_k" if mean_k <= 0 else "sigma"},
            )
        return cls(FilterMode.ENABLED, int(mean_k), float(sigma))

    @classmethod
    def from_params(cls, mean_k: Optional[int], sigma: Optional[float]) -> "FilterPolicy":
        """Enable filtering only when both parameters are positive."""
        mean_k = mean_k or 0
        sigma = sigma or 0.0
        if mean_k > 0 and sigma > 0.0:
            return cls.enabled(mean_k, sigma)
        if mean_k > 0 or sigma > 0.0:
            logger.warning(f"Statistical filter disabled: mean_k={mean_k} and sigma={sigma} "
                           "must both be positive")
        return cls.disabled()

    @property
    def is_enabled(self) -> bool:
        return self.mode is FilterMode.ENABLED


class StatisticalOutlierFilter:
    """Removes points whose neighbour distance is far above the cloud's mean."""

    def __init__(self, mean_k: int, sigma: float, kdtree_min_points: int = KDTREE_MIN_POINTS):
        """
        Initialize the filter.

        Args:
            mean_k: Number of nearest neighbours averaged per point
            sigma: Standard-deviation multiplier for the rejection threshold
            kdtree_min_points: Cloud size from which a k-d tree replaces the scan
        """
        if mean_k <= 0:
            raise ConfigurationError(f"mean_k must be positive, got {mean_k}", {"parameter": "mean_k"})
        if sigma <= 0.0:
            raise ConfigurationError(f"sigma must be positive, got {sigma}", {"parameter": "sigma"})
        self.mean_k = int(mean_k)
        self.sigma = float(sigma)
        self.kdtree_min_points = kdtree_min_points

    def apply(self, cloud: PointCloud, cancel_event: Optional[threading.Event] = None) -> PointCloud:
        """
        Filter a point cloud.

        Args:
            cloud: Input cloud, not modified
            cancel_event: Optional event checked during the neighbour search

        Returns:
            New cloud containing the retained points
        """
        n = cloud.size()
        if n < 2:
            return cloud.select(np.arange(n))

        index = make_neighbor_index(cloud.points, self.kdtree_min_points)
        mean_distances = index.mean_neighbor_distances(self.mean_k, cancel_event)

        if np.ptp(mean_distances) == 0.0:
            return cloud.select(np.arange(n))

        mu = mean_distances.mean()
        std = mean_distances.std(ddof=1)
        threshold = mu + self.sigma * std
        keep = mean_distances <= threshold

        logger.debug(f"Statistical filter kept {int(keep.sum())}/{n} points "
                     f"(mean_k={self.mean_k}, sigma={self.sigma}, threshold={threshold:.4f})")
        return cloud.select(keep)

    __call__ = apply

    def __repr__(self) -> str:
        return f"StatisticalOutlierFilter(mean_k={self.mean_k}, sigma={self.sigma})"


def build_filter(mean_k: Optional[int], sigma: Optional[float]) -> Optional[StatisticalOutlierFilter]:
    """Filter for the given parameters, or None when filtering is disabled."""
    return filter_from_policy(FilterPolicy.from_params(mean_k, sigma))


def filter_from_policy(policy: FilterPolicy) -> Optional[StatisticalOutlierFilter]:
    if not policy.is_enabled:
        return None
    return StatisticalOutlierFilter(policy.mean_k, policy.sigma)


def apply_filter(filter_: Optional[StatisticalOutlierFilter], cloud: PointCloud,
                 cancel_event: Optional[threading.Event] = None) -> PointCloud:
    """Apply a filter, passing the cloud through unchanged when it is None."""
    if filter_ is None:
        return cloud
    return filter_.apply(cloud, cancel_event)
