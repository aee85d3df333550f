"""
Collaborator interfaces for the segmenter.

This module defines the camera and detector capabilities consumed by the
pipeline together with the frame and detection types they exchange.
"""

from .camera import (
    COLOR_SOURCE,
    DEPTH_SOURCE,
    Camera,
    CameraProperties,
    DistortionParameters,
    IntrinsicParameters,
    NamedImage,
    split_color_and_depth,
)
from .detection import BoundingBox, Detection, FunctionDetector, ObjectDetector

__all__ = [
    "COLOR_SOURCE",
    "DEPTH_SOURCE",
    "Camera",
    "CameraProperties",
    "DistortionParameters",
    "IntrinsicParameters",
    "NamedImage",
    "split_color_and_depth",
    "BoundingBox",
    "Detection",
    "FunctionDetector",
    "ObjectDetector",
]
