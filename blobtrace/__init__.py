"""blobtrace: one-pass 8-connected blob labeling with contour extraction."""
from blobtrace.types import (
    Roi,
    LabelConfig,
    BlobError,
    InvalidArgumentError,
    OutOfMemoryError,
    ImageLoadError,
)
from blobtrace.points import PointSequence
from blobtrace.registry import Blob, BlobRegistry, Contour, destroy_blobs
from blobtrace.labeling import LabelResult, clamp_roi, find_blobs
from blobtrace.diagnostics import set_error_hook

__version__ = "0.1.0"

__all__ = [
    "Roi",
    "LabelConfig",
    "BlobError",
    "InvalidArgumentError",
    "OutOfMemoryError",
    "ImageLoadError",
    "PointSequence",
    "Blob",
    "BlobRegistry",
    "Contour",
    "destroy_blobs",
    "LabelResult",
    "clamp_roi",
    "find_blobs",
    "set_error_hook",
]
