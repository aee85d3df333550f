#!/usr/bin/env python3
"""
Nearest-neighbour queries over a fixed point set.

Both implementations answer the same question (the mean distance from each
point to its k nearest other points), so the statistical filter does not
depend on which one is used.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from scipy.spatial import cKDTree

from ..errors import FilterCancelledError

logger = logging.getLogger(__name__)

# Above this many points the k-d tree is used instead of the brute-force scan
KDTREE_MIN_POINTS = 2048

DEFAULT_CHUNK_SIZE = 256


class NearestNeighbors(ABC):
    """Nearest-neighbour index over an (N, 3) array of distinct points."""

    def __init__(self, points: np.ndarray, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        self.chunk_size = max(1, int(chunk_size))

    def __len__(self) -> int:
        return self.points.shape[0]

    def mean_neighbor_distances(self, k: int, cancel_event: Optional[threading.Event] = None) -> np.ndarray:
        """
        Mean Euclidean distance from every point to its k nearest other points.

        Args:
            k: Neighbour count, clamped to N - 1
            cancel_event: Checked between chunks; raises FilterCancelledError when set

        Returns:
            (N,) array; zeros when the set has fewer than two points
        """
        n = len(self)
        k = min(int(k), n - 1)
        if n < 2 or k < 1:
            return np.zeros(n, dtype=np.float64)

        result = np.empty(n, dtype=np.float64)
        for start in range(0, n, self.chunk_size):
            if cancel_event is not None and cancel_event.is_set():
                raise FilterCancelledError(
                    f"neighbour search cancelled after {start} of {n} points",
                    {"processed": start, "total": n},
                )
            stop = min(start + self.chunk_size, n)
            result[start:stop] = self._chunk_mean_distances(start, stop, k)
        return result

    @abstractmethod
    def _chunk_mean_distances(self, start: int, stop: int, k: int) -> np.ndarray:
        pass


class BruteForceNeighbors(NearestNeighbors):
    """O(n^2) scan, exact and deterministic."""

    def _chunk_mean_distances(self, start: int, stop: int, k: int) -> np.ndarray:
        diff = self.points[start:stop, None, :] - self.points[None, :, :]
        dist = np.sqrt(np.einsum("ijk,ijk->ij", diff, diff))
        rows = np.arange(stop - start)
        dist[rows, rows + start] = np.inf
        nearest = np.partition(dist, k - 1, axis=1)[:, :k]
        return nearest.mean(axis=1)


class KDTreeNeighbors(NearestNeighbors):
    """SciPy k-d tree index for large clouds."""

    def __init__(self, points: np.ndarray, chunk_size: int = 4096):
        super().__init__(points, chunk_size)
        self.tree = cKDTree(self.points)

    def _chunk_mean_distances(self, start: int, stop: int, k: int) -> np.ndarray:
        # k + 1 because every point finds itself at distance zero
        dist, _ = self.tree.query(self.points[start:stop], k=k + 1)
        dist = np.asarray(dist).reshape(stop - start, k + 1)
        return dist[:, 1:].mean(axis=1)


def make_neighbor_index(points: np.ndarray, kdtree_min_points: int = KDTREE_MIN_POINTS) -> NearestNeighbors:
    """Pick the neighbour index for a point set by size."""
    n = np.asarray(points).reshape(-1, 3).shape[0]
    if n >= kdtree_min_points:
        logger.debug(f"Using k-d tree neighbour index for {n} points")
        return KDTreeNeighbors(points)
    return BruteForceNeighbors(points)
