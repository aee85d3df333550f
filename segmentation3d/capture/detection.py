#!/usr/bin/env python3
"""
2D detection types and the detector capability consumed by the segmenter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned pixel rectangle, x2/y2 exclusive."""
    x1: int
    y1: int
    x2: int
    y2: int

    @property
    def width(self) -> int:
        return max(0, self.x2 - self.x1)

    @property
    def height(self) -> int:
        return max(0, self.y2 - self.y1)

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_degenerate(self) -> bool:
        return self.area == 0

    def clamp(self, width: int, height: int) -> "BoundingBox":
        """Intersect the box with an image of the given size."""
        x1 = min(max(self.x1, 0), width)
        y1 = min(max(self.y1, 0), height)
        x2 = min(max(self.x2, x1), width)
        y2 = min(max(self.y2, y1), height)
        return BoundingBox(x1, y1, x2, y2)

    def as_slices(self) -> Tuple[slice, slice]:
        """Row/column slices for indexing an HxW array."""
        return slice(self.y1, self.y2), slice(self.x1, self.x2)


@dataclass(frozen=True)
class Detection:
    bounding_box: BoundingBox
    confidence: float
    label: str

    @classmethod
    def from_xyxy(cls, x1, y1, x2, y2, confidence: float, label: str) -> "Detection":
        return cls(BoundingBox(int(x1), int(y1), int(x2), int(y2)), float(confidence), label)


class ObjectDetector(ABC):
    """Detector capability: 2D detections for a color image."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[Detection]:
        """
        Run detection on an image.

        Args:
            image: HxWx3 (or HxWx4) uint8 color image

        Returns:
            List of Detection objects in emission order
        """
        pass


class FunctionDetector(ObjectDetector):
    """Adapts a plain callable ``image -> List[Detection]`` to ObjectDetector."""

    def __init__(self, detect_fn):
        if detect_fn is None:
            raise ValueError("detector function cannot be None")
        self._detect_fn = detect_fn

    def detect(self, image: np.ndarray) -> List[Detection]:
        return list(self._detect_fn(image))

