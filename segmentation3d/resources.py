#!/usr/bin/env python3
"""
By-name lookup of camera and detector collaborators.

Used only while constructing a segmenter service, and for resolving the
camera named in a call.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Tuple

from .capture.camera import Camera
from .capture.detection import FunctionDetector, ObjectDetector
from .errors import DependencyError

logger = logging.getLogger(__name__)


class ResourceKind(Enum):
    CAMERA = "camera"
    DETECTOR = "detector"


class Dependencies:
    """Registry of named collaborators."""

    def __init__(self):
        self._resources: Dict[Tuple[ResourceKind, str], Any] = {}

    def add_camera(self, name: str, camera: Camera) -> None:
        self._resources[(ResourceKind.CAMERA, name)] = camera

    def add_detector(self, name: str, detector: Any) -> None:
        """Register a detector: an ObjectDetector, an object with ``detect`` or a callable."""
        if not isinstance(detector, ObjectDetector):
            if hasattr(detector, "detect"):
                detector = FunctionDetector(detector.detect)
            elif callable(detector):
                detector = FunctionDetector(detector)
            else:
                raise TypeError(f"detector {name!r} is neither an ObjectDetector nor callable")
        self._resources[(ResourceKind.DETECTOR, name)] = detector

    def camera(self, name: str) -> Camera:
        return self._lookup(ResourceKind.CAMERA, name)

    def detector(self, name: str) -> ObjectDetector:
        return self._lookup(ResourceKind.DETECTOR, name)

    def has(self, kind: ResourceKind, name: str) -> bool:
        return (kind, name) in self._resources

    def names(self, kind: ResourceKind) -> List[str]:
        return sorted(n for k, n in self._resources if k is kind)

    def _lookup(self, kind: ResourceKind, name: str):
        try:
            return self._resources[(kind, name)]
        except KeyError:
            raise DependencyError(
                f"Resource missing: {kind.value} {name!r}",
                {kind.value: name, "available": self.names(kind)},
            ) from None

    def __len__(self) -> int:
        return len(self._resources)
