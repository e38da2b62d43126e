"""
Input boundary: reading images and turning them into generator rasters.

The generator treats a raster value as thickness (255 = thickest). A
lithophane needs dark image areas to be thick, so prepare_raster() inverts the
grayscale image. That is the only place the inversion happens.
"""
import logging
import os
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import ImageLoadError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("png", "jpg", "jpeg", "webp", "tiff", "tif", "bmp")


@dataclass
class ImageLoadResult:
    image: Image.Image
    was_converted: bool = False  # Color image converted to grayscale
    was_resized: bool = False
    original_format: str = ""
    original_size: Tuple[int, int] = (0, 0)
    has_quality_warning: bool = False  # JPEG with likely block artifacts


def supported_formats_filter() -> str:
    """File dialog filter listing the supported image formats."""
    patterns = " ".join(f"*.{ext}" for ext in SUPPORTED_EXTENSIONS)
    return ";;".join([
        f"Images ({patterns})",
        "PNG Images (*.png)",
        "JPEG Images (*.jpg *.jpeg)",
        "WebP Images (*.webp)",
        "TIFF Images (*.tiff *.tif)",
        "BMP Images (*.bmp)",
        "All Files (*)",
    ])


def is_format_supported(extension: str) -> bool:
    return extension.lower().lstrip('.') in SUPPORTED_EXTENSIONS


def detect_jpeg_artifacts(image: Image.Image) -> bool:
    """
    Heuristic for visible JPEG blocking.

    Compares the horizontal intensity step across 8x8 block boundaries with the
    step inside blocks, sampled every 32 px. Boundaries that are clearly
    sharper than the block interiors indicate compression artifacts.
    """
    gray = np.asarray(image.convert('L'), dtype=np.int32)
    h, w = gray.shape
    if w < 16 or h < 16:
        return False

    ys = np.arange(8, h - 8, 32)
    xs = np.arange(8, w - 8, 32)
    if len(ys) == 0 or len(xs) == 0:
        return False
    gy, gx = np.meshgrid(ys, xs, indexing='ij')

    boundary = np.abs(gray[gy, gx] - gray[gy, gx - 1])
    internal = np.abs(gray[gy, gx - 4] - gray[gy, gx - 5])
    boundary_avg = boundary.mean()
    internal_avg = internal.mean()
    return bool(boundary_avg > internal_avg * 1.5 and boundary_avg > 10)


def load_image(path, max_size: int = 0, force_resize: bool = False) -> ImageLoadResult:
    """
    Loads an image for lithophane generation.

    Args:
        path: Image file path.
        max_size: Largest allowed width or height, 0 for no limit.
        force_resize: Downscale images larger than max_size, keeping the aspect ratio.

    Returns:
        ImageLoadResult with a mode 'L' image.
    """
    path = os.fspath(path)
    try:
        with Image.open(path) as src:
            original_format = (src.format or "").upper()
            src.load()
            image = src.copy()
    except (OSError, UnidentifiedImageError) as e:
        raise ImageLoadError(f"Cannot read image {path}: {e}") from e

    result = ImageLoadResult(
        image=image,
        original_format=original_format,
        original_size=image.size,
    )

    if original_format in ("JPEG", "JPG"):
        result.has_quality_warning = detect_jpeg_artifacts(image)
        if result.has_quality_warning:
            logger.info(f"JPEG quality warning for: {path}")

    if result.image.mode != 'L':
        result.was_converted = result.image.mode not in ('1', 'LA', 'I', 'I;16', 'F')
        result.image = result.image.convert('L')
        logger.info("Image converted to grayscale")

    if max_size > 0 and force_resize and max(result.image.size) > max_size:
        w, h = result.image.size
        if w > h:
            new_size = (max_size, max(1, round(h * max_size / w)))
        else:
            new_size = (max(1, round(w * max_size / h)), max_size)
        result.image = result.image.resize(new_size, Image.Resampling.LANCZOS)
        result.was_resized = True
        logger.info(f"Image resized to: {new_size[0]}x{new_size[1]}")

    return result


def prepare_raster(image: Image.Image, flip_vertical: bool = False) -> np.ndarray:
    """
    Turns a grayscale image into the raster the generator consumes.

    Optionally mirrors the image top-to-bottom, then inverts it so that dark
    pixels become high values (thick relief) and white pixels become 0.
    """
    gray = image.convert('L')
    if flip_vertical:
        gray = ImageOps.flip(gray)
    return 255 - np.asarray(gray, dtype=np.uint8)
