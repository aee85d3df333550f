#!/usr/bin/env python3
"""
Colored point cloud container and the labeled 3D objects built from it.

Points are keyed by position: setting a point at an existing position
overwrites its color and keeps its original scan position.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from ..errors import GeometryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float
    color: Optional[Tuple[int, int, int, int]] = None


class PointCloud:
    """Unordered set of 3D points with optional RGBA colors."""

    def __init__(self, points: Optional[np.ndarray] = None, colors: Optional[np.ndarray] = None):
        """
        Initialize a point cloud.

        Args:
            points: (N, 3) array of positions
            colors: Optional (N, 4) uint8 RGBA array, (N, 3) is padded with alpha 255
        """
        if points is None:
            points = np.empty((0, 3), dtype=np.float64)
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)

        if colors is not None:
            colors = np.asarray(colors)
            if colors.ndim != 2 or colors.shape[0] != points.shape[0]:
                raise ValueError(f"colors shape {colors.shape} does not match {points.shape[0]} points")
            if colors.shape[1] == 3:
                alpha = np.full((colors.shape[0], 1), 255, dtype=np.uint8)
                colors = np.hstack([colors.astype(np.uint8), alpha])
            colors = colors.astype(np.uint8)

        self._points, self._colors = _dedupe_by_position(points, colors)
        self._points.setflags(write=False)
        if self._colors is not None:
            self._colors.setflags(write=False)

    @classmethod
    def empty(cls) -> "PointCloud":
        return cls()

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def colors(self) -> Optional[np.ndarray]:
        return self._colors

    def has_colors(self) -> bool:
        return self._colors is not None

    def size(self) -> int:
        return int(self._points.shape[0])

    def __len__(self) -> int:
        return self.size()

    def is_empty(self) -> bool:
        return self.size() == 0

    def __iter__(self) -> Iterator[Point3D]:
        for i, (x, y, z) in enumerate(self._points):
            color = tuple(int(c) for c in self._colors[i]) if self._colors is not None else None
            yield Point3D(float(x), float(y), float(z), color)

    def contains(self, position: Sequence[float]) -> bool:
        if self.is_empty():
            return False
        return bool(np.any(np.all(self._points == np.asarray(position, dtype=np.float64), axis=1)))

    def position_set(self) -> set:
        """Positions as a set of tuples, for subset checks."""
        return {tuple(p) for p in self._points.tolist()}

    def select(self, index) -> "PointCloud":
        """New cloud with the points picked by a boolean mask or index array."""
        index = np.asarray(index)
        colors = self._colors[index] if self._colors is not None else None
        return PointCloud(self._points[index], colors)

    def recentered(self, origin: Sequence[float] = (0.0, 0.0, 0.0)) -> "PointCloud":
        """
        Express the cloud relative to a new local origin (translation only).

        Args:
            origin: Position of the new origin in the current frame
        """
        offset = np.asarray(origin, dtype=np.float64).reshape(3)
        return PointCloud(self._points - offset, self._colors)

    def centroid(self) -> np.ndarray:
        if self.is_empty():
            raise GeometryError("cannot compute the centroid of an empty point cloud")
        return self._points.mean(axis=0)

    def bounding_volume(self, label: str = "") -> "BoundingVolume":
        """Axis-aligned bounding box of the cloud."""
        if self.is_empty():
            raise GeometryError("cannot compute the bounding volume of an empty point cloud")
        min_bound = self._points.min(axis=0)
        max_bound = self._points.max(axis=0)
        return BoundingVolume(
            center=(min_bound + max_bound) / 2.0,
            extent=max_bound - min_bound,
            label=label,
        )

    def to_open3d(self):
        """Convert to an ``open3d.geometry.PointCloud`` (colors scaled to [0, 1])."""
        import open3d as o3d

        pcd = o3d.geometry.PointCloud()
        pcd.points = o3d.utility.Vector3dVector(self._points)
        if self._colors is not None:
            pcd.colors = o3d.utility.Vector3dVector(self._colors[:, :3].astype(np.float64) / 255.0)
        return pcd

    @classmethod
    def from_open3d(cls, pcd) -> "PointCloud":
        points = np.asarray(pcd.points)
        colors = None
        if pcd.has_colors():
            colors = np.round(np.asarray(pcd.colors) * 255.0).astype(np.uint8)
        return cls(points, colors)

    def __repr__(self) -> str:
        return f"PointCloud(size={self.size()}, colored={self.has_colors()})"


@dataclass
class BoundingVolume:
    """Axis-aligned box: center and full extent along x, y, z."""
    center: np.ndarray
    extent: np.ndarray
    label: str = ""

    @property
    def min_bound(self) -> np.ndarray:
        return self.center - self.extent / 2.0

    @property
    def max_bound(self) -> np.ndarray:
        return self.center + self.extent / 2.0


@dataclass
class SegmentedObject:
    """A labeled, non-empty point cloud produced from one detection."""
    point_cloud: PointCloud
    label: str
    geometry: Optional[BoundingVolume] = None

    @classmethod
    def with_label(cls, point_cloud: PointCloud, label: str) -> "SegmentedObject":
        if point_cloud is None or point_cloud.is_empty():
            raise GeometryError("cannot create an object from an empty point cloud", {"label": label})
        return cls(point_cloud, label, point_cloud.bounding_volume(label))

    def size(self) -> int:
        return self.point_cloud.size()


def _dedupe_by_position(points: np.ndarray, colors: Optional[np.ndarray]):
    """Keep one entry per position: first scan slot, last written color."""
    if points.shape[0] < 2:
        return points.copy(), None if colors is None else colors.copy()

    _, first, inverse = np.unique(points, axis=0, return_index=True, return_inverse=True)
    if first.shape[0] == points.shape[0]:
        return points.copy(), None if colors is None else colors.copy()

    inverse = inverse.reshape(-1)
    last = np.zeros(first.shape[0], dtype=np.int64)
    np.maximum.at(last, inverse, np.arange(points.shape[0]))

    order = np.argsort(first, kind="stable")
    logger.debug(f"Merged {points.shape[0] - first.shape[0]} duplicate positions")
    deduped_colors = colors[last[order]] if colors is not None else None
    return points[first[order]], deduped_colors
