"""Command line interface for blobtrace."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from blobtrace.export import blobs_to_svg, save_label_png, write_json, write_plot
from blobtrace.labeling import find_blobs
from blobtrace.raster_ingest import load_gray, threshold_mask
from blobtrace.registry import destroy_blobs
from blobtrace.types import BlobError, LabelConfig, OutOfMemoryError, Roi

logger = logging.getLogger(__name__)


def _threshold(value: str):
    if value == "otsu":
        return value
    try:
        level = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected 0-255 or 'otsu', got {value!r}")
    if not 0 <= level <= 255:
        raise argparse.ArgumentTypeError(f"threshold out of range: {level}")
    return level


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='blobtrace',
        description='Create an image of the labelled blobs, plus a JSON file '
                    'and a gnuplot file describing their contours',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  blobtrace shapes.png labels.png
  blobtrace shapes.png labels.png -x 10 -y 10 -W 64 -H 64
  blobtrace scan.jpg labels.png --threshold otsu --svg blobs.svg

The gnuplot file can be plotted with:
  plot "blob.plot" lc variable with lines
        """,
    )

    parser.add_argument('input', type=str, help='Input image path')
    parser.add_argument('output', type=str, help='Output label image path')

    parser.add_argument(
        '-x', '--roi-x',
        type=int,
        default=0,
        help='X coordinate of the upper left corner of the ROI (default: 0)'
    )

    parser.add_argument(
        '-y', '--roi-y',
        type=int,
        default=0,
        help='Y coordinate of the upper left corner of the ROI (default: 0)'
    )

    parser.add_argument(
        '-W', '--roi-w',
        type=int,
        default=None,
        help='Width of the ROI (default: image width)'
    )

    parser.add_argument(
        '-H', '--roi-h',
        type=int,
        default=None,
        help='Height of the ROI (default: image height)'
    )

    parser.add_argument(
        '-t', '--threshold',
        type=_threshold,
        default=128,
        help="Foreground threshold 0-255 or 'otsu' (default: 128)"
    )

    parser.add_argument(
        '--no-internal',
        action='store_true',
        help='Only count holes, do not store their contours'
    )

    parser.add_argument(
        '--json',
        type=str,
        default='blob.json',
        help='JSON output path (default: blob.json)'
    )

    parser.add_argument(
        '--plot',
        type=str,
        default='blob.plot',
        help='gnuplot output path (default: blob.plot)'
    )

    parser.add_argument(
        '--svg',
        type=str,
        default=None,
        help='Optional SVG output path'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser


def run(input_path: Path, output_path: Path, config: LabelConfig) -> int:
    """
    Label an image file and write all outputs.

    Returns:
        Number of blobs found
    """
    gray = load_gray(input_path)
    mask = threshold_mask(gray, config.threshold)

    height, width = mask.shape
    roi = config.roi or Roi(0, 0, width, height)

    result = None
    try:
        result = find_blobs(mask, roi, extract_internal=config.extract_internal)
        save_label_png(result.labels, output_path)
        if config.json_path:
            write_json(result.blobs, config.json_path)
        if config.plot_path:
            write_plot(result.blobs, config.plot_path)
        if config.svg_path:
            Path(config.svg_path).write_text(blobs_to_svg(result.blobs, width, height))
        return result.count
    except OutOfMemoryError as e:
        destroy_blobs(e.blobs)
        raise
    finally:
        if result is not None:
            destroy_blobs(result.blobs)


def main(args: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(parsed.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    # Unset ROI sizes extend to the image edge once clamped
    roi = None
    if parsed.roi_x or parsed.roi_y or parsed.roi_w is not None or parsed.roi_h is not None:
        roi = Roi(
            parsed.roi_x,
            parsed.roi_y,
            parsed.roi_w if parsed.roi_w is not None else sys.maxsize,
            parsed.roi_h if parsed.roi_h is not None else sys.maxsize,
        )

    config = LabelConfig(
        roi=roi,
        threshold=parsed.threshold,
        extract_internal=not parsed.no_internal,
        json_path=Path(parsed.json) if parsed.json else None,
        plot_path=Path(parsed.plot) if parsed.plot else None,
        svg_path=Path(parsed.svg) if parsed.svg else None,
    )

    output_path = Path(parsed.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        print(f"Processing: {input_path}")
        count = run(input_path, output_path, config)
        print(f"  Blobs: {count}")
        print(f"  Output saved: {output_path}")
        return 0
    except (BlobError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
