"""
Detection-to-segments package: turn 2D detections and RGB-D frames into
labeled 3D point cloud objects.

Modules:
- capture: camera and detector interfaces, frame and detection types
- projection: camera models and back-projection of detection boxes
- processing: point clouds, neighbour search and statistical outlier removal
- segmenter: the detection-to-object pipeline
- service: configured segmenter built from named dependencies
- tests: unit tests and synthetic RGB-D fixtures
"""

from . import capture
from . import processing
from . import projection
from .config import SegmenterConfig
from .errors import (
    CameraError,
    ConfigurationError,
    DependencyError,
    DetectorError,
    FilterCancelledError,
    GeometryError,
    MissingModalityError,
    SegmentationError,
)
from .resources import Dependencies
from .segmenter import DetectionSegmenter, segment
from .service import SegmenterService, build_segmenter_service

__version__ = "1.0.0"
__all__ = [
    "capture",
    "processing",
    "projection",
    "SegmenterConfig",
    "CameraError",
    "ConfigurationError",
    "DependencyError",
    "DetectorError",
    "FilterCancelledError",
    "GeometryError",
    "MissingModalityError",
    "SegmentationError",
    "Dependencies",
    "DetectionSegmenter",
    "segment",
    "SegmenterService",
    "build_segmenter_service",
]
