"""Core types for blob labeling and contour extraction."""
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional, Union
import numpy as np

# Type aliases
Mask = np.ndarray
LabelBuffer = np.ndarray
Threshold = Union[int, str]

# Label buffer cell states
BACKGROUND = 0
CONTOUR_ADJACENT = -1  # background pixel visited by a contour trace

LABEL_DTYPE = np.int32
POINT_DTYPE = np.int32


class Roi(NamedTuple):
    """Axis-aligned region of interest over the source raster."""
    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        """True when the ROI covers no pixels."""
        return self.width <= 0 or self.height <= 0

    @classmethod
    def full(cls, mask: np.ndarray) -> "Roi":
        """ROI covering the whole mask."""
        height, width = mask.shape[:2]
        return cls(0, 0, width, height)


EMPTY_ROI = Roi(0, 0, 0, 0)


@dataclass
class LabelConfig:
    """Configuration for the labeling program."""
    # Region of interest (None = whole image)
    roi: Optional[Roi] = None

    # Binarisation: pixels >= threshold are foreground, or "otsu"
    threshold: Threshold = 128

    # Store internal contour points (holes are always counted)
    extract_internal: bool = True

    # Output
    json_path: Optional[Path] = Path("blob.json")
    plot_path: Optional[Path] = Path("blob.plot")
    svg_path: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.threshold, str):
            if self.threshold != "otsu":
                raise ValueError(f"Unknown threshold method: {self.threshold!r}")
        elif not 0 <= int(self.threshold) <= 255:
            raise ValueError(f"Threshold must be in [0, 255], got {self.threshold}")


class BlobError(Exception):
    """Base exception for blob labeling errors."""
    pass


class InvalidArgumentError(BlobError, ValueError):
    """Exception raised when a required argument is missing or malformed."""
    pass


class OutOfMemoryError(BlobError, MemoryError):
    """Exception raised when an allocation fails during labeling.

    ``blobs`` holds whatever blobs were built before the failure so the
    caller can release them with ``destroy_blobs``.
    """

    def __init__(self, message: str, blobs=None):
        super().__init__(message)
        self.blobs = blobs if blobs is not None else []


class ImageLoadError(BlobError):
    """Exception raised when a source image cannot be read."""
    pass
