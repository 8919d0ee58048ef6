"""Rendering and serialization of labeling results."""
import json
from pathlib import Path
from typing import List, Union
import numpy as np
from PIL import Image

from blobtrace.registry import Blob, Contour

PALETTE = np.array([
    [0xff, 0x00, 0x00],
    [0x00, 0xff, 0x00],
    [0xff, 0xff, 0x00],
    [0x00, 0x00, 0xff],
    [0xff, 0x00, 0xff],
    [0x00, 0xff, 0xff],
    [0xff, 0xff, 0xff],
    [0x7f, 0x00, 0x7f],
], dtype=np.uint8)


def label_to_rgb(labels: np.ndarray) -> np.ndarray:
    """
    Colour a label buffer.

    Blob ``L`` gets palette entry ``(L - 1) % 8``; background and contour
    marks are black.

    Args:
        labels: Label buffer (H, W)

    Returns:
        uint8 RGB image (H, W, 3)
    """
    rgb = np.zeros(labels.shape + (3,), dtype=np.uint8)
    fg = labels > 0
    rgb[fg] = PALETTE[(labels[fg] - 1) % len(PALETTE)]
    return rgb


def save_label_png(labels: np.ndarray, path: Union[str, Path]) -> None:
    """Save the coloured label buffer as a PNG image."""
    Image.fromarray(label_to_rgb(labels)).save(path)


def blobs_to_dict(blobs: List[Blob]) -> dict:
    """
    Build a JSON-ready description of blobs.

    ``internals`` is only present for blobs whose hole contours were
    stored; ``euler_number`` is always the hole count.
    """
    items = []
    for blob in blobs:
        item = {
            "label": int(blob.label),
            "external": blob.external.points.tolist(),
        }
        if blob.internal:
            item["internals"] = [c.points.tolist() for c in blob.internal]
        item["euler_number"] = int(blob.internal_count)
        items.append(item)
    return {"blobs": items}


def write_json(blobs: List[Blob], path: Union[str, Path]) -> None:
    """Write blobs as a JSON document."""
    with open(path, "w") as f:
        json.dump(blobs_to_dict(blobs), f, indent=2)


def _write_plot_contour(contour: Contour, colour: int, f) -> None:
    for x, y in contour.points:
        f.write(f"{x:5d}    {y:5d}    {colour:5d}\n")
    f.write("\n")


def write_plot(blobs: List[Blob], path: Union[str, Path]) -> None:
    """
    Write contours as gnuplot data.

    Plot with ``plot "blob.plot" lc variable with lines``. External
    contours use colour ``2 * label``, holes ``2 * label + 1``.
    """
    with open(path, "w") as f:
        for blob in blobs:
            _write_plot_contour(blob.external, 2 * blob.label, f)
            for contour in blob.internal:
                _write_plot_contour(contour, 2 * blob.label + 1, f)


def contour_to_path_command(contour: Contour) -> str:
    """Convert a contour to an SVG sub-path through pixel centres."""
    points = contour.points.tolist()
    if not points:
        return ""
    cmds = [f"M{points[0][0]},{points[0][1]}"]
    cmds.extend(f"L{x},{y}" for x, y in points[1:])
    cmds.append("Z")
    return " ".join(cmds)


def blobs_to_svg(blobs: List[Blob], width: int, height: int) -> str:
    """
    Render blobs as an SVG document.

    Each blob becomes one path, holes included as even-odd sub-paths.

    Args:
        blobs: Blobs to render
        width: Canvas width (source raster width)
        height: Canvas height (source raster height)

    Returns:
        SVG document string
    """
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
    ]
    for blob in blobs:
        r, g, b = (int(c) for c in PALETTE[(blob.label - 1) % len(PALETTE)])
        fill = f"#{r:02x}{g:02x}{b:02x}"
        d = " ".join(
            cmd for cmd in
            [contour_to_path_command(blob.external)]
            + [contour_to_path_command(c) for c in blob.internal]
            if cmd
        )
        lines.append(
            f'<path id="blob{blob.label}" d="{d}" fill="{fill}" fill-rule="evenodd"/>'
        )
    lines.append('</svg>')
    return "\n".join(lines)
