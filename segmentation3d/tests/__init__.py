"""
Test utilities and unit tests.

Synthetic RGB-D frames and fake collaborators for exercising the pipeline.
"""

from .fixtures import (
    SPARSE_DEPTH_CELLS,
    FakeCamera,
    FakeDetector,
    create_object_frames,
    create_sparse_frames,
)

__all__ = [
    "SPARSE_DEPTH_CELLS",
    "FakeCamera",
    "FakeDetector",
    "create_object_frames",
    "create_sparse_frames",
]
