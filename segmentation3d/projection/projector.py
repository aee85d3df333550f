#!/usr/bin/env python3
"""
Camera models and RGB-D back-projection.

Two model shapes exist:
- PinholeCameraModel: focal lengths, principal point and resolution, with
  optional Brown-Conrady distortion that is removed before back-projection
- ParallelProjection: identity mapping used when a camera reports no
  intrinsics (x, y are the pixel coordinates, z is the depth)

The model is chosen once per segmentation call by ``build_projector`` and
``project`` dispatches on its shape.

Author: Perception Team
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import cv2
import numpy as np

from ..capture.camera import Camera, CameraProperties, DistortionParameters, IntrinsicParameters
from ..capture.detection import BoundingBox
from ..errors import ConfigurationError, GeometryError
from ..processing.point_cloud import PointCloud

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PinholeCameraModel:
    intrinsics: IntrinsicParameters
    distortion: Optional[DistortionParameters] = None

    def has_distortion(self) -> bool:
        return self.distortion is not None and not self.distortion.is_identity()


@dataclass(frozen=True)
class ParallelProjection:
    pass


CameraModel = Union[PinholeCameraModel, ParallelProjection]


def build_projector(properties: Optional[CameraProperties]) -> CameraModel:
    """
    Derive the camera model from camera properties.

    Args:
        properties: Properties reported by the camera

    Returns:
        PinholeCameraModel if intrinsics are present, else ParallelProjection

    Raises:
        ConfigurationError: if properties are absent or the distortion
            coefficient count is not one OpenCV accepts
    """
    if properties is None:
        raise ConfigurationError("camera properties are required to build a projector",
                                 {"parameter": "camera_properties"})
    if properties.intrinsics is None:
        logger.debug("No intrinsics reported, using parallel projection")
        return ParallelProjection()
    distortion = properties.distortion
    if distortion is not None and not distortion.is_supported():
        raise ConfigurationError(
            f"distortion must have 4, 5, 8, 12 or 14 coefficients, got {len(distortion.coefficients)}",
            {"parameter": "distortion"},
        )
    return PinholeCameraModel(properties.intrinsics, distortion)


def camera_to_projector(camera: Camera, camera_name: str = "source camera") -> CameraModel:
    """Read a camera's properties and build its projector."""
    if camera is None:
        raise ConfigurationError("cannot have a nil source camera", {"camera": camera_name})
    try:
        properties = camera.get_properties()
    except Exception as e:
        raise ConfigurationError(f"failed to get properties of {camera_name}: {e}",
                                 {"camera": camera_name}) from e
    return build_projector(properties)


def project(model: Optional[CameraModel], color: np.ndarray, depth: np.ndarray,
            box: Optional[BoundingBox]) -> PointCloud:
    """
    Back-project the pixels of a bounding box into a colored point cloud.

    Pixels with zero, negative or non-finite depth are skipped. The box is
    clamped to the image bounds, so the result may be empty.

    Args:
        model: Camera model from build_projector
        color: HxWx3/HxWx4 uint8 image
        depth: HxW depth map aligned with ``color``
        box: Region to back-project

    Returns:
        PointCloud with at most ``box.area`` points

    Raises:
        GeometryError: for an unset model, a missing/degenerate box or
            mismatched image sizes
    """
    if model is None:
        raise GeometryError("camera model is not set")
    if box is None:
        raise GeometryError("detection bounding box cannot be nil")
    if box.is_degenerate():
        raise GeometryError(f"detection bounding box {box} has zero area", {"bounding_box": box})
    if color.shape[:2] != depth.shape[:2]:
        raise GeometryError(
            f"rgb image {color.shape[:2]} and depth map {depth.shape[:2]} are not the same size"
        )

    height, width = depth.shape[:2]
    clamped = box.clamp(width, height)
    rows, cols = clamped.as_slices()
    region = depth[rows, cols].astype(np.float64)

    with np.errstate(invalid="ignore"):
        valid = np.isfinite(region) & (region > 0)
    v_idx, u_idx = np.nonzero(valid)
    u = u_idx + clamped.x1
    v = v_idx + clamped.y1
    d = region[valid]
    colors = color[v, u]

    if isinstance(model, PinholeCameraModel):
        points = _backproject_pinhole(model, u, v, d, width, height)
    elif isinstance(model, ParallelProjection):
        points = np.column_stack([u, v, d]).astype(np.float64)
    else:
        raise GeometryError(f"unsupported camera model {type(model).__name__}")

    return PointCloud(points, colors)


def _backproject_pinhole(model: PinholeCameraModel, u: np.ndarray, v: np.ndarray,
                         d: np.ndarray, width: int, height: int) -> np.ndarray:
    intr = model.intrinsics
    if (intr.width, intr.height) != (width, height):
        logger.warning(f"Intrinsics resolution {intr.width}x{intr.height} differs from "
                       f"frame size {width}x{height}")
    if intr.fx == 0 or intr.fy == 0:
        raise GeometryError("pinhole focal lengths must be non-zero",
                            {"fx": intr.fx, "fy": intr.fy})

    u = u.astype(np.float64)
    v = v.astype(np.float64)
    if model.has_distortion() and not model.distortion.is_supported():
        raise GeometryError(f"unsupported distortion coefficient count {len(model.distortion.coefficients)}",
                            {"parameter": "distortion"})
    if model.has_distortion() and u.size > 0:
        K = intr.camera_matrix()
        pixels = np.column_stack([u, v]).reshape(-1, 1, 2)
        undistorted = cv2.undistortPoints(pixels, K, model.distortion.as_array(), P=K).reshape(-1, 2)
        u, v = undistorted[:, 0], undistorted[:, 1]

    x = (u - intr.ppx) * d / intr.fx
    y = (v - intr.ppy) * d / intr.fy
    return np.column_stack([x, y, d])
