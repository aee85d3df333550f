#!/usr/bin/env python3
"""
Error taxonomy for the detection-to-segments pipeline.

Construction-time errors (configuration, dependencies) abort service
construction. Per-call errors abort the whole result set of that call.

Author: Perception Team
"""

from typing import Any, Dict, Optional


class SegmentationError(Exception):
    """Base exception for all segmentation errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(SegmentationError):
    """Bad or missing tunables, or unavailable camera properties."""
    pass


class DependencyError(SegmentationError):
    """A named collaborator (detector or camera) could not be resolved."""
    pass


class DetectorError(SegmentationError):
    """Opaque failure raised by the detector capability."""
    pass


class MissingModalityError(SegmentationError):
    """The camera did not return both a 'color' and a 'depth' image."""
    pass


class GeometryError(SegmentationError):
    """Degenerate bounding box, mismatched frames or unset camera model."""
    pass


class CameraError(SegmentationError):
    """The camera collaborator failed to deliver frames."""
    pass


class FilterCancelledError(SegmentationError):
    """A statistical filter pass was cancelled cooperatively."""
    pass
