#!/usr/bin/env python3
"""
Segmenter service built from configuration and named dependencies.

The service wraps a detector into a 3D segmenter. It also passes 2D
detections through, and resolves cameras by name with an optional default.
Construction either fully succeeds or raises; there is no degraded mode.
"""

import logging
import threading
from typing import List, Optional

import numpy as np

from .capture.camera import COLOR_SOURCE, to_color_image
from .capture.detection import Detection, ObjectDetector
from .config import SegmenterConfig
from .errors import CameraError, ConfigurationError, DependencyError, MissingModalityError
from .processing.outlier_filter import filter_from_policy
from .processing.point_cloud import SegmentedObject
from .resources import Dependencies
from .segmenter import DetectionSegmenter, run_detector

logger = logging.getLogger(__name__)


class SegmenterService:
    """Detector-backed 3D segmenter with named camera resolution."""

    def __init__(self, name: str, deps: Dependencies, detector: ObjectDetector,
                 segmenter: DetectionSegmenter, default_camera: str = "",
                 detector_name: str = "detector"):
        self.name = name
        self.deps = deps
        self.detector = detector
        self.segmenter = segmenter
        self.default_camera = default_camera
        self.detector_name = detector_name

    def detections(self, image: np.ndarray) -> List[Detection]:
        """2D detections for an image, unfiltered."""
        return run_detector(self.detector, to_color_image(image), self.detector_name)

    def detections_from_camera(self, camera_name: Optional[str] = None) -> List[Detection]:
        name = self._camera_name(camera_name)
        camera = self.deps.camera(name)
        try:
            images = camera.get_images()
        except Exception as e:
            raise CameraError(f"could not get images from camera {name!r}: {e}", {"camera": name}) from e
        colors = [i.image for i in images or [] if i.source_name == COLOR_SOURCE]
        if not colors:
            raise MissingModalityError(f"camera {name!r} did not return a 'color' image", {"camera": name})
        return self.detections(colors[0])

    def get_object_point_clouds(self, camera_name: Optional[str] = None,
                                cancel_event: Optional[threading.Event] = None) -> List[SegmentedObject]:
        """Segment the current frame of the named (or default) camera."""
        name = self._camera_name(camera_name)
        camera = self.deps.camera(name)
        return self.segmenter.segment(camera, camera_name=name, cancel_event=cancel_event)

    def _camera_name(self, camera_name: Optional[str]) -> str:
        name = camera_name or self.default_camera
        if not name:
            raise DependencyError("no camera name given and no default camera configured",
                                  {"service": self.name})
        return name

    def __repr__(self) -> str:
        return f"SegmenterService(name={self.name!r}, detector={self.detector_name!r})"


def build_segmenter_service(name: str, config: Optional[SegmenterConfig],
                            deps: Dependencies) -> SegmenterService:
    """
    Create a 3D segmenter service from a previously registered detector.

    Args:
        name: Service name
        config: Segmenter attributes
        deps: Named collaborators

    Raises:
        ConfigurationError: missing or invalid configuration
        DependencyError: detector or default camera not found
    """
    if config is None:
        raise ConfigurationError("config for 3D segmenter made from a detector cannot be nil")
    config.validate()

    try:
        detector = deps.detector(config.detector_name)
    except DependencyError as e:
        raise DependencyError(
            f'could not find necessary dependency, detector "{config.detector_name}"',
            {"detector": config.detector_name},
        ) from e

    filter_ = filter_from_policy(config.filter_policy)
    segmenter = DetectionSegmenter(detector, config.confidence_threshold, filter_,
                                   detector_name=config.detector_name)

    if config.camera_name:
        try:
            deps.camera(config.camera_name)
        except DependencyError as e:
            raise DependencyError(f'could not find camera "{config.camera_name}"',
                                  {"camera": config.camera_name}) from e

    logger.info(f"Segmenter service {name!r} created from detector {config.detector_name!r}")
    return SegmenterService(name, deps, detector, segmenter, config.camera_name,
                            detector_name=config.detector_name)
