"""Moore-neighbour contour tracing over a label buffer."""
from typing import Optional
import numpy as np

from blobtrace.points import PointSequence
from blobtrace.types import CONTOUR_ADJACENT, Roi

# Neighbour offsets, clockwise from east (y axis points down)
DX = (1, 1, 0, -1, -1, -1, 0, 1)
DY = (0, 1, 1, 1, 0, -1, -1, -1)

EXTERNAL_START = 7
INTERNAL_START = 3


def trace_contour(
    external: bool,
    label: int,
    x: int,
    y: int,
    roi: Roi,
    mask: np.ndarray,
    labels: np.ndarray,
    points: Optional[PointSequence] = None
) -> None:
    """
    Follow the boundary passing through a foreground pixel.

    Foreground pixels reached are labelled with ``label``; background
    neighbours inspected on the way are marked ``-1`` so the scan never
    starts another contour from them. The walk stops once it leaves the
    start pixel towards the first neighbour again, so a closed contour
    lists its start point at both ends. An isolated pixel gives a single
    point.

    Args:
        external: Trace an external contour (True) or a hole (False)
        label: Label of the blob being traced
        x: Start column, relative to the ROI
        y: Start row, relative to the ROI
        roi: Clamped ROI; its origin is added to emitted points
        mask: Boolean foreground view of the ROI (H, W)
        labels: Label buffer (H, W), updated in place
        points: Sequence receiving visited points, or None to only label

    Raises:
        OutOfMemoryError: If appending to ``points`` fails
    """
    height, width = labels.shape
    i = EXTERNAL_START if external else INTERNAL_START

    x0, y0 = x, y
    first = None
    done = False

    labels[y0, x0] = label

    while not done:
        if points is not None:
            points.append(roi.x + x0, roi.y + y0)

        # Scan the neighbourhood clockwise
        for _ in range(8):
            x1 = x0 + DX[i]
            y1 = y0 + DY[i]
            if 0 <= x1 < width and 0 <= y1 < height:
                if mask[y1, x1]:
                    labels[y1, x1] = label
                    if first is None:
                        first = (x1, y1)
                    else:
                        # Back through the first two contour points
                        done = (x0, y0) == (x, y) and (x1, y1) == first
                    x0, y0 = x1, y1
                    break
                labels[y1, x1] = CONTOUR_ADJACENT
            i = (i + 1) & 7
        else:
            # Isolated pixel
            done = True

        # Resume two steps clockwise past the pixel we came from
        i = (i + 4 + 2) & 7
