#!/usr/bin/env python3
"""
Detection-to-Object Pipeline

Turns a 2D detector into a 3D segmenter: fetch paired color/depth frames,
detect, gate by confidence, back-project each surviving box, optionally
filter statistical outliers and package the non-empty clouds as labeled
objects.

Failure of any step aborts the whole call. Detections under the confidence
threshold and clouds emptied by the filter are skipped silently.

Author: Perception Team
"""

import logging
import threading
from typing import List, Optional

import numpy as np

from .capture.camera import Camera, split_color_and_depth
from .capture.detection import Detection, ObjectDetector
from .config import DEFAULT_CONFIDENCE_THRESHOLD, resolve_confidence_threshold
from .errors import CameraError, ConfigurationError, DetectorError
from .processing.outlier_filter import StatisticalOutlierFilter, apply_filter
from .processing.point_cloud import PointCloud, SegmentedObject
from .projection.projector import CameraModel, camera_to_projector, project

logger = logging.getLogger(__name__)

# Filtered clouds are expressed relative to the camera frame origin
CANONICAL_ORIGIN = (0.0, 0.0, 0.0)


def run_detector(detector: ObjectDetector, image: np.ndarray,
                 detector_name: str = "detector") -> List[Detection]:
    """Run the detector on a copy of the image, wrapping its failures."""
    try:
        # detector may modify its input
        return list(detector.detect(image.copy()))
    except DetectorError:
        raise
    except Exception as e:
        raise DetectorError(f"detector {detector_name!r} failed: {e}", {"detector": detector_name}) from e


def detection_to_point_cloud(detection: Detection, color: np.ndarray, depth: np.ndarray,
                             model: CameraModel) -> PointCloud:
    """Back-project one detection's bounding box."""
    return project(model, color, depth, detection.bounding_box)


def segment(camera: Camera, detector: ObjectDetector, confidence_threshold: float,
            filter_: Optional[StatisticalOutlierFilter] = None,
            camera_name: str = "source camera", detector_name: str = "detector",
            cancel_event: Optional[threading.Event] = None) -> List[SegmentedObject]:
    """
    Segment the current frame of a camera into labeled 3D objects.

    Args:
        camera: Camera collaborator providing 'color' and 'depth' frames
        detector: Detector capability run on the color frame
        confidence_threshold: Detections scoring below this are skipped
        filter_: Optional statistical outlier filter
        camera_name: Name used in error context
        detector_name: Name used in error context
        cancel_event: Optional event forwarded to the filter

    Returns:
        Objects in detector emission order

    Raises:
        CameraError, MissingModalityError, ConfigurationError, DetectorError, GeometryError
    """
    try:
        images = camera.get_images()
    except Exception as e:
        raise CameraError(f"detection segmenter: {e}", {"camera": camera_name}) from e
    color, depth = split_color_and_depth(images)

    model = camera_to_projector(camera, camera_name)
    detections = run_detector(detector, color, detector_name)

    objects = []
    for detection in detections:
        # NaN scores never pass
        if not detection.confidence >= confidence_threshold:
            logger.debug(f"Skipping '{detection.label}' with confidence "
                         f"{detection.confidence:.3f} below {confidence_threshold:.3f}")
            continue

        cloud = detection_to_point_cloud(detection, color, depth, model)
        if filter_ is not None:
            before = cloud.size()
            cloud = apply_filter(filter_, cloud.recentered(CANONICAL_ORIGIN), cancel_event)
            logger.debug(f"Filtered '{detection.label}': {before} -> {cloud.size()} points")

        if cloud.is_empty():
            logger.debug(f"Dropping '{detection.label}': no points left")
            continue
        objects.append(SegmentedObject.with_label(cloud, detection.label))

    logger.debug(f"Segmented {len(objects)} objects from {len(detections)} detections")
    return objects


class DetectionSegmenter:
    """A detector plus acceptance policy, callable on any camera."""

    def __init__(self, detector: ObjectDetector,
                 confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
                 filter_: Optional[StatisticalOutlierFilter] = None,
                 detector_name: str = "detector"):
        """
        Initialize the segmenter.

        Args:
            detector: Detector capability
            confidence_threshold: Minimum accepted detection score; <= 0 means
                the default, above 1 or NaN is rejected
            filter_: Statistical outlier filter, None to disable filtering
            detector_name: Detector name for logs and errors
        """
        if detector is None:
            raise ConfigurationError("detector cannot be nil", {"parameter": "detector"})
        self.detector = detector
        self.confidence_threshold = resolve_confidence_threshold(confidence_threshold)
        self.filter = filter_
        self.detector_name = detector_name
        logger.info(f"Detection segmenter initialized: detector={detector_name!r}, "
                    f"threshold={self.confidence_threshold}, filter={filter_}")

    def segment(self, camera: Camera, camera_name: str = "source camera",
                cancel_event: Optional[threading.Event] = None) -> List[SegmentedObject]:
        return segment(camera, self.detector, self.confidence_threshold, self.filter,
                       camera_name=camera_name, detector_name=self.detector_name,
                       cancel_event=cancel_event)

    __call__ = segment
