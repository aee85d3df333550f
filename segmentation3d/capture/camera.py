#!/usr/bin/env python3
"""
Camera capability consumed by the segmenter.

A camera returns a set of named images (at least one tagged "color" and one
tagged "depth") and its properties: pinhole intrinsics and optional lens
distortion. Color images are HxWx3/HxWx4 uint8 arrays in RGB(A) order; depth
maps are HxW arrays where zero (or a non-finite value) means "no reading".
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..errors import MissingModalityError

COLOR_SOURCE = "color"
DEPTH_SOURCE = "depth"


@dataclass
class NamedImage:
    image: np.ndarray
    source_name: str


@dataclass(frozen=True)
class IntrinsicParameters:
    """Pinhole intrinsics in pixels."""
    width: int
    height: int
    fx: float
    fy: float
    ppx: float
    ppy: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IntrinsicParameters":
        """Build intrinsics from a RealSense-style metadata dict."""
        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            fx=float(data["fx"]),
            fy=float(data["fy"]),
            ppx=float(data["ppx"]),
            ppy=float(data["ppy"]),
        )

    def camera_matrix(self) -> np.ndarray:
        return np.array([[self.fx, 0.0, self.ppx],
                         [0.0, self.fy, self.ppy],
                         [0.0, 0.0, 1.0]], dtype=np.float64)


# coefficient counts accepted by OpenCV
SUPPORTED_DISTORTION_LENGTHS = (4, 5, 8, 12, 14)


@dataclass(frozen=True)
class DistortionParameters:
    """Brown-Conrady coefficients in OpenCV order (k1, k2, p1, p2[, k3])."""
    coefficients: Tuple[float, ...] = field(default_factory=tuple)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.coefficients, dtype=np.float64)

    def is_identity(self) -> bool:
        return not np.any(self.as_array())

    def is_supported(self) -> bool:
        return len(self.coefficients) in SUPPORTED_DISTORTION_LENGTHS or not self.coefficients


@dataclass(frozen=True)
class CameraProperties:
    intrinsics: Optional[IntrinsicParameters] = None
    distortion: Optional[DistortionParameters] = None


class Camera(ABC):
    """Camera capability: paired frames and calibration properties."""

    @abstractmethod
    def get_images(self) -> List[NamedImage]:
        """Return the current set of named frames."""
        pass

    @abstractmethod
    def get_properties(self) -> CameraProperties:
        """Return intrinsic/distortion properties of the camera."""
        pass


def split_color_and_depth(images: List[NamedImage]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Pick the color and depth frames out of a camera's named images.

    Returns:
        (color, depth) where color is HxWx3/HxWx4 uint8 and depth is HxW

    Raises:
        MissingModalityError: if there is not exactly one frame of each kind
    """
    colors = [i.image for i in images or [] if i.source_name == COLOR_SOURCE]
    depths = [i.image for i in images or [] if i.source_name == DEPTH_SOURCE]
    sources = [i.source_name for i in images or []]

    if not colors or not depths:
        raise MissingModalityError(
            "source camera's get_images method did not have 'color' and 'depth' images",
            {"sources": sources},
        )
    if len(colors) > 1 or len(depths) > 1:
        raise MissingModalityError(
            "source camera returned more than one 'color' or 'depth' image",
            {"sources": sources},
        )
    return to_color_image(colors[0]), to_depth_map(depths[0])


def to_color_image(image: np.ndarray) -> np.ndarray:
    """Normalize a color frame to an HxWx3 or HxWx4 uint8 array."""
    image = np.asarray(image)
    if image.ndim == 2:
        image = np.stack([image] * 3, axis=-1)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise MissingModalityError(
            f"color image has unsupported shape {image.shape}", {"source": COLOR_SOURCE}
        )
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    return image


def to_depth_map(image: np.ndarray) -> np.ndarray:
    """Normalize a depth frame to an HxW array."""
    depth = np.asarray(image)
    if depth.ndim == 3 and depth.shape[2] == 1:
        depth = depth[:, :, 0]
    if depth.ndim != 2:
        raise MissingModalityError(
            f"depth image has unsupported shape {depth.shape}", {"source": DEPTH_SOURCE}
        )
    return depth
