"""Backside plane and the beveled frame shell around the relief."""
import logging

import numpy as np

from .config import MeshConfig
from .depth_buffer import DepthBuffer
from .mesh_utils import quads_to_triangles

logger = logging.getLogger(__name__)


def generate_backside(depth_buffer: DepthBuffer, base_z: float) -> np.ndarray:
    """Two triangles closing the relief at z = base_z."""
    w = depth_buffer.width - 1
    h = depth_buffer.height - 1
    tris = np.array([
        (0, h, base_z), (w, h, base_z), (0, 0, base_z),
        (w, h, base_z), (w, 0, base_z), (0, 0, base_z),
    ], dtype=np.float64)
    return depth_buffer.scale_vertices(tris).astype(np.float32)


def generate_segmented_backside(depth_buffer: DepthBuffer, base_z: float, segments: int) -> np.ndarray:
    """Segmented (bendable) backside. Not implemented: falls back to the flat backside."""
    logger.debug(f"Segmented backside requested ({segments} segments), using flat backside")
    return generate_backside(depth_buffer, base_z)


def generate_frame(width: float, height: float, config: MeshConfig) -> np.ndarray:
    """
    Builds the frame shell of outer size width x height.

    The outer box spans z = -min_thickness .. relief_depth. Its inner edge sits
    frame_border in from the outside at the back, and frame_border * frame_slope_factor
    further in at the front plane (z = 0), giving the bevel.
    """
    back = -config.min_thickness
    depth = config.relief_depth
    b = config.frame_border
    s = config.bevel_inset  # Inner edge at the front plane
    w, h = width, height

    quads = [
        # Outer shell
        [(w, h, back), (0, h, back), (0, h, depth), (w, h, depth)],  # bottom
        [(0, 0, depth), (0, h, depth), (0, h, back), (0, 0, back)],  # left
        [(0, 0, back), (w, 0, back), (w, 0, depth), (0, 0, depth)],  # top
        [(w, 0, back), (w, h, back), (w, h, depth), (w, 0, depth)],  # right
        [(0, 0, back), (0, h, back), (w, h, back), (w, 0, back)],  # back
        # Front plane inside the bevel
        [(w - s, s, 0), (w - s, h - s, 0), (s, h - s, 0), (s, s, 0)],
        # Annulus between the outer edge and the frame border
        [(b, b, depth), (b, h - b, depth), (0, h, depth), (0, 0, depth)],  # left
        [(w - b, h - b, depth), (w - b, b, depth), (w, 0, depth), (w, h, depth)],  # right
        [(b, h - b, depth), (w - b, h - b, depth), (w, h, depth), (0, h, depth)],  # bottom
        [(w - b, b, depth), (b, b, depth), (0, 0, depth), (w, 0, depth)],  # top
        # Bevel slopes from the front plane back to the frame border
        [(s, s, 0), (s, h - s, 0), (b, h - b, depth), (b, b, depth)],  # left
        [(w - s, h - s, 0), (w - s, s, 0), (w - b, b, depth), (w - b, h - b, depth)],  # right
        [(s, h - s, 0), (w - s, h - s, 0), (w - b, h - b, depth), (b, h - b, depth)],  # bottom
        [(w - s, s, 0), (s, s, 0), (b, b, depth), (w - b, b, depth)],  # top
    ]
    return quads_to_triangles(quads)
