"""Single-pass connected component labeling with contour extraction.

Implements the contour-tracing labeling scheme of Chang, Chen and Lu
("A linear-time component-labeling algorithm using contour tracing
technique"): one raster scan labels every 8-connected foreground blob
and traces its external contour and holes as it goes.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union
import numpy as np

from blobtrace.registry import Blob, BlobRegistry
from blobtrace.tracer import trace_contour
from blobtrace.types import (
    EMPTY_ROI,
    LABEL_DTYPE,
    InvalidArgumentError,
    OutOfMemoryError,
    Roi,
)
from blobtrace.diagnostics import report_error

logger = logging.getLogger(__name__)


@dataclass
class LabelResult:
    """Label buffer and blobs extracted from one ROI."""
    labels: np.ndarray  # (roi.height, roi.width), 0 / -1 / label
    roi: Roi = EMPTY_ROI  # clamped ROI actually processed
    blobs: List[Blob] = field(default_factory=list)

    @property
    def width(self) -> int:
        return self.roi.width

    @property
    def height(self) -> int:
        return self.roi.height

    @property
    def count(self) -> int:
        return len(self.blobs)


def clamp_roi(roi: Roi, width: int, height: int) -> Roi:
    """
    Clamp a ROI to a raster of the given size.

    A ROI whose origin is past the right or bottom edge, or whose clamped
    size is not positive, becomes ``EMPTY_ROI``. Negative origins move to
    0 without changing the requested size.
    """
    x, y, w, h = roi
    if x >= width or y >= height:
        return EMPTY_ROI

    x = max(x, 0)
    y = max(y, 0)
    if x + w > width:
        w = width - x
    if y + h > height:
        h = height - y

    if w <= 0 or h <= 0:
        return EMPTY_ROI
    return Roi(x, y, w, h)


def allocate_labels(height: int, width: int) -> np.ndarray:
    """Allocate a zeroed label buffer."""
    return np.zeros((height, width), dtype=LABEL_DTYPE)


def _validate(mask, roi) -> tuple:
    if mask is None:
        report_error("One or more invalid arguments")
        raise InvalidArgumentError("mask is required")

    try:
        mask = np.asarray(mask)
    except (TypeError, ValueError) as e:
        report_error("One or more invalid arguments")
        raise InvalidArgumentError(f"mask is not array-like: {e}") from e

    if mask.ndim != 2:
        report_error("One or more invalid arguments")
        raise InvalidArgumentError(f"Expected 2D mask, got {mask.ndim}D")

    if roi is None:
        roi = Roi.full(mask)
    else:
        if len(roi) != 4:
            report_error("One or more invalid arguments")
            raise InvalidArgumentError(f"ROI needs 4 values (x, y, w, h), got {len(roi)}")
        roi = Roi(*(int(v) for v in roi))

    return mask, roi


def find_blobs(
    mask: np.ndarray,
    roi: Optional[Union[Roi, Sequence[int]]] = None,
    extract_internal: bool = True
) -> LabelResult:
    """
    Label 8-connected blobs and extract their contours in one scan.

    Args:
        mask: 2D array, 0 for background and anything else for foreground
        roi: (x, y, width, height) window to process; clamped to the mask.
            Defaults to the whole mask.
        extract_internal: Store hole contour points. Holes are counted
            either way.

    Returns:
        LabelResult with the label buffer (clamped ROI size) and the blobs
        in discovery order. Contour points are in mask coordinates.

    Raises:
        InvalidArgumentError: If the mask or ROI is malformed; nothing is
            allocated in that case
        OutOfMemoryError: If an allocation fails; ``error.blobs`` holds the
            partial blob list for ``destroy_blobs``
    """
    mask, roi = _validate(mask, roi)

    roi = clamp_roi(roi, mask.shape[1], mask.shape[0])
    if roi.is_empty:
        logger.debug("ROI outside the mask, nothing to label")
        return LabelResult(labels=allocate_labels(0, 0))

    try:
        labels = allocate_labels(roi.height, roi.width)
        fg = mask[roi.y:roi.y + roi.height, roi.x:roi.x + roi.width] != 0
    except MemoryError as e:
        report_error("Out of memory")
        raise OutOfMemoryError("Cannot allocate label buffer") from e

    registry = BlobRegistry()
    try:
        _scan(fg, roi, labels, registry, extract_internal)
    except OutOfMemoryError as e:
        e.blobs = registry.blobs
        raise

    logger.debug(f"Labelled {len(registry)} blobs in ROI {tuple(roi)}")
    return LabelResult(labels=labels, roi=roi, blobs=registry.blobs)


def _scan(
    fg: np.ndarray,
    roi: Roi,
    labels: np.ndarray,
    registry: BlobRegistry,
    extract_internal: bool
) -> None:
    """Raster scan classifying each foreground pixel."""
    height, width = labels.shape
    current = 1

    for j in range(height):
        for i in range(width):
            if not fg[j, i]:
                continue

            cur = labels[j, i]
            above_in = fg[j - 1, i] if j > 0 else False
            below_in = fg[j + 1, i] if j < height - 1 else False
            below_label = labels[j + 1, i] if j < height - 1 else -1

            # 1. New external contour
            if cur == 0 and not above_in:
                index = registry.allocate_blob(current)
                trace_contour(
                    True, current, i, j, roi, fg, labels,
                    registry[index].external.points
                )
                current += 1

                # The start pixel may also sit on top of a hole
                cur = labels[j, i]
                below_label = labels[j + 1, i] if j < height - 1 else -1

            # 2. New internal contour
            if not below_in and below_label == 0:
                # An unlabelled pixel here always has a labelled left neighbour
                owner = cur if cur else (labels[j, i - 1] if i > 0 else 0)
                blob_index = int(owner) - 1

                points = None
                if extract_internal:
                    points = registry.add_internal_contour(blob_index).points
                else:
                    registry.bump_hole_count(blob_index)

                trace_contour(False, int(owner), i, j, roi, fg, labels, points)

            # 3. Interior pixel
            elif cur == 0:
                labels[j, i] = labels[j, i - 1] if i > 0 else 0
