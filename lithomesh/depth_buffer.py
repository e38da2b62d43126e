from dataclasses import dataclass

import numpy as np
from PIL import Image

from .config import MeshConfig
from .errors import InvalidConfigError


@dataclass(frozen=True)
class DepthBuffer:
    """Per-pixel relief thickness plus the factors that map pixels to millimetres.

    depth[y, x] holds the thickness above the front plane for pixel column x,
    with y counted from the bottom of the source image.
    """
    depth: np.ndarray
    width_factor: float
    depth_factor: float
    border: float
    total_width: float
    total_height: float

    @property
    def width(self) -> int:
        return self.depth.shape[1]

    @property
    def height(self) -> int:
        return self.depth.shape[0]

    def scale_vertices(self, points: np.ndarray) -> np.ndarray:
        """Maps (px, py, z) rows from pixel space into millimetre space."""
        out = np.array(points, dtype=np.float64, copy=True)
        out[..., :2] = out[..., :2] * self.width_factor + self.border
        return out


def as_raster(raster) -> np.ndarray:
    """Returns the raster as a 2-D uint8 array indexed [row, col], row 0 at the top."""
    if isinstance(raster, Image.Image):
        raster = np.asarray(raster.convert('L'))
    arr = np.asarray(raster)
    if arr.ndim != 2:
        raise InvalidConfigError(f"Raster must be 2-D grayscale, got shape {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidConfigError(f"Raster must be at least 1x1 pixels, got {arr.shape[1]}x{arr.shape[0]}")
    if arr.dtype != np.uint8:
        if arr.min() < 0 or arr.max() > 255:
            raise InvalidConfigError("Raster intensities must be within [0, 255]")
        arr = arr.astype(np.uint8)
    return arr


def mesh_height(width_px: int, height_px: int, config: MeshConfig) -> float:
    """Total height in mm of the lithophane with its frame, for a given raster size."""
    width_factor = (config.width - 2 * config.frame_border) / width_px
    return 2 * config.frame_border + height_px * width_factor


def build_depth_buffer(raster, config: MeshConfig) -> DepthBuffer:
    """
    Converts raster intensity into relief thickness.

    The raster is expected to be inverted already (see image_loader.prepare_raster):
    a value of 255 gives the full total_thickness - min_thickness of relief.
    Rows are flipped so that buffer row 0 is the bottom image row.
    """
    config.validate()
    arr = as_raster(raster)
    h_px, w_px = arr.shape

    depth_factor = config.relief_depth / 255.0
    width_factor = (config.width - 2 * config.frame_border) / w_px
    total_height = mesh_height(w_px, h_px, config)
    if total_height <= 2 * config.bevel_inset:
        raise InvalidConfigError(
            f"Mesh height ({total_height:.2f}mm for a {w_px}x{h_px} px raster) must exceed "
            f"twice the bevel inset ({2 * config.bevel_inset:.2f}mm)"
        )

    depth = arr[::-1].astype(np.float32) * np.float32(depth_factor)
    return DepthBuffer(
        depth=np.ascontiguousarray(depth),
        width_factor=width_factor,
        depth_factor=depth_factor,
        border=config.frame_border,
        total_width=config.width,
        total_height=total_height,
    )
