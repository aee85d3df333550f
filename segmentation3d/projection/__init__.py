"""
Camera models and RGB-D back-projection of detection boxes.
"""

from .projector import (
    CameraModel,
    ParallelProjection,
    PinholeCameraModel,
    build_projector,
    camera_to_projector,
    project,
)

__all__ = [
    "CameraModel",
    "ParallelProjection",
    "PinholeCameraModel",
    "build_projector",
    "camera_to_projector",
    "project",
]
