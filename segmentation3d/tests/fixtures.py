#!/usr/bin/env python3
"""
Synthetic RGB-D frames and in-memory camera/detector fakes for tests.
"""

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..capture.camera import Camera, CameraProperties, IntrinsicParameters, NamedImage
from ..capture.detection import Detection, ObjectDetector

# (x, y, depth) cells populated in the sparse test frame
SPARSE_DEPTH_CELLS = [
    (0, 0, 5),
    (0, 100, 6),
    (50, 0, 8),
    (50, 100, 4),
    (15, 15, 3),
    (16, 14, 10),
]

# Synthetic camera intrinsics (similar to RealSense D456)
D456_INTRINSICS = IntrinsicParameters(width=848, height=480, fx=421.612, fy=421.612, ppx=424.0, ppy=240.0)


def create_sparse_frames(size: int = 150,
                         cells: Sequence[Tuple[int, int, float]] = SPARSE_DEPTH_CELLS) -> List[NamedImage]:
    """Black color frame and an empty depth map with a few populated cells."""
    color = np.zeros((size, size, 3), dtype=np.uint8)
    depth = np.zeros((size, size), dtype=np.uint16)
    for x, y, d in cells:
        depth[y, x] = d
        color[y, x] = [255, 0, 0]
    return [NamedImage(color, "color"), NamedImage(depth, "depth")]


def create_object_frames(width: int = 848, height: int = 480,
                         box: Tuple[int, int, int, int] = (300, 180, 500, 320),
                         seed: int = 0) -> List[NamedImage]:
    """
    Gradient background at 800mm with an orange rectangle at ~500mm.

    Returns:
        [color, depth] named images
    """
    rng = np.random.default_rng(seed)
    color = np.zeros((height, width, 3), dtype=np.uint8)
    color[:, :, 0] = np.linspace(0, 100, width).astype(np.uint8)
    color[:, :, 1] = 50
    color[:, :, 2] = np.linspace(100, 200, height).reshape(-1, 1).astype(np.uint8)

    x1, y1, x2, y2 = box
    color[y1:y2, x1:x2] = [255, 128, 64]

    depth = np.full((height, width), 800, dtype=np.uint16)
    depth[y1:y2, x1:x2] = 500 + rng.integers(-20, 20, (y2 - y1, x2 - x1))
    return [NamedImage(color, "color"), NamedImage(depth, "depth")]


class FakeCamera(Camera):
    """Camera returning fixed frames and properties, or raising on demand."""

    def __init__(self, images: Optional[List[NamedImage]] = None,
                 properties: Optional[CameraProperties] = None,
                 images_error: Optional[Exception] = None,
                 properties_error: Optional[Exception] = None):
        self.images = images or []
        self.properties = properties if properties is not None else CameraProperties()
        self.images_error = images_error
        self.properties_error = properties_error

    def get_images(self) -> List[NamedImage]:
        if self.images_error is not None:
            raise self.images_error
        return list(self.images)

    def get_properties(self) -> CameraProperties:
        if self.properties_error is not None:
            raise self.properties_error
        return self.properties


class FakeDetector(ObjectDetector):
    """Detector returning fixed detections and recording the images it saw."""

    def __init__(self, detections: Optional[List[Detection]] = None,
                 error: Optional[Exception] = None,
                 on_detect: Optional[Callable[[np.ndarray], None]] = None):
        self.detections = detections or []
        self.error = error
        self.on_detect = on_detect
        self.calls = 0

    def detect(self, image: np.ndarray) -> List[Detection]:
        self.calls += 1
        if self.on_detect is not None:
            self.on_detect(image)
        if self.error is not None:
            raise self.error
        return list(self.detections)
