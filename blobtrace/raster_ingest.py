"""Raster image ingestion and binarisation."""
from pathlib import Path
from typing import Union
import numpy as np
from PIL import Image
from PIL import ImageOps
from skimage.filters import threshold_otsu

from blobtrace.types import ImageLoadError, Threshold


def load_gray(path: Union[str, Path]) -> np.ndarray:
    """
    Load an image file as 8-bit grayscale.

    Args:
        path: Path to image file

    Returns:
        uint8 array (H, W)

    Raises:
        FileNotFoundError: If file doesn't exist
        ImageLoadError: If file cannot be loaded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise ImageLoadError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)

            if img.mode == 'RGBA':
                # Composite on white background
                background = Image.new('RGB', img.size, (255, 255, 255))
                background.paste(img, mask=img.split()[3])
                img = background

            return np.array(img.convert('L'), dtype=np.uint8)

    except (IOError, OSError) as e:
        raise ImageLoadError(f"Failed to load image {path}: {e}") from e


def threshold_mask(gray: np.ndarray, level: Threshold = 128) -> np.ndarray:
    """
    Binarise a grayscale image.

    Args:
        gray: Grayscale image (H, W)
        level: Pixels >= level become foreground; "otsu" picks the level
            with Otsu's method

    Returns:
        uint8 mask (H, W) with 1 for foreground and 0 for background
    """
    if gray.ndim != 2:
        raise ValueError(f"Expected 2D grayscale image, got {gray.ndim}D")

    if isinstance(level, str):
        if level != "otsu":
            raise ValueError(f"Unknown threshold method: {level!r}")
        if gray.min() == gray.max():
            # Otsu is undefined on a flat image
            return np.zeros(gray.shape, dtype=np.uint8)
        # threshold_otsu splits at "> threshold"
        return (gray > threshold_otsu(gray)).astype(np.uint8)

    return (gray >= level).astype(np.uint8)
