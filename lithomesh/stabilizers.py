"""
Stabilizer feet that keep a standing lithophane from tipping over.

Each foot is a pair of wedges, one on the front (+Z) and one on the back (-Z)
of the frame. A wedge is described once as a template over symbolic
coordinates and instantiated with concrete columns and depths.
"""
import logging

import numpy as np

from .config import MeshConfig
from .utils import MAX_STABILIZER_WIDTH

logger = logging.getLogger(__name__)

# Template axes:
#   column 0..3 -> outer edge, 1 mm in, 1 mm in from the far edge, far edge
#   row    0..2 -> y = 0, h - 1, h
#   level  0..2 -> seam plane, lip (3 mm out), foot (depth out)
SEAM, LIP, FOOT = 0, 1, 2
_WEDGE = np.array([
    # Outer side
    [(0, 0, SEAM), (0, 0, FOOT), (0, 2, LIP)],
    [(0, 2, LIP), (0, 2, SEAM), (0, 1, SEAM)],
    [(0, 2, LIP), (0, 1, SEAM), (0, 0, SEAM)],
    # Far side
    [(3, 2, LIP), (3, 0, FOOT), (3, 0, SEAM)],
    [(3, 1, SEAM), (3, 2, SEAM), (3, 2, LIP)],
    [(3, 0, SEAM), (3, 1, SEAM), (3, 2, LIP)],
    # Top
    [(1, 2, SEAM), (0, 2, SEAM), (0, 2, LIP)],
    [(0, 2, LIP), (3, 2, LIP), (3, 2, SEAM)],
    [(2, 2, SEAM), (1, 2, SEAM), (0, 2, LIP)],
    [(0, 2, LIP), (3, 2, SEAM), (2, 2, SEAM)],
    # Bottom
    [(0, 0, FOOT), (0, 0, SEAM), (3, 0, SEAM)],
    [(0, 0, FOOT), (3, 0, SEAM), (3, 0, FOOT)],
    # Slope
    [(0, 2, LIP), (0, 0, FOOT), (3, 0, FOOT)],
    [(0, 2, LIP), (3, 0, FOOT), (3, 2, LIP)],
    # Seam face towards the frame
    [(1, 1, SEAM), (1, 2, SEAM), (2, 2, SEAM)],
    [(1, 1, SEAM), (2, 2, SEAM), (2, 1, SEAM)],
]).reshape(-1, 3)


def stabilizer_width(config: MeshConfig) -> float:
    return min(config.frame_border, MAX_STABILIZER_WIDTH)


def needs_stabilizers(height: float, config: MeshConfig) -> bool:
    return config.enable_stabilizers and height > config.stabilizer_threshold


def _wedge(columns, stab_height, levels) -> np.ndarray:
    xs = np.asarray(columns, dtype=np.float64)
    ys = np.array([0.0, stab_height - 1, stab_height])
    zs = np.asarray(levels, dtype=np.float64)
    return np.column_stack([xs[_WEDGE[:, 0]], ys[_WEDGE[:, 1]], zs[_WEDGE[:, 2]]])


def add_single_stabilizer(x: float, stab_height: float, config: MeshConfig) -> np.ndarray:
    """Front and back wedge of one foot whose outer edge is at x."""
    w = stabilizer_width(config)
    foot = stab_height * 0.5
    # Removable feet stand 1 mm off the frame so they snap off cleanly
    offset = 0.0 if config.permanent_stabilizers else 1.0

    front_z = config.relief_depth
    front = _wedge(
        (x, x + 1, x + w - 1, x + w),
        stab_height,
        (front_z + offset, front_z + 3, front_z + foot),
    )
    back_z = -config.min_thickness
    back = _wedge(
        (x + w, x + w - 1, x + 1, x),
        stab_height,
        (back_z - offset, back_z - 3, back_z - foot),
    )
    return np.concatenate([front, back])


def generate_stabilizers(width: float, height: float, config: MeshConfig) -> np.ndarray:
    """Two feet, flush with the left and right outer edges of the frame."""
    stab_height = height * config.stabilizer_height_factor
    w = stabilizer_width(config)
    verts = np.concatenate([
        add_single_stabilizer(0.0, stab_height, config),
        add_single_stabilizer(width - w, stab_height, config),
    ])
    logger.info(f"Stabilizers generated: height={stab_height:.2f}mm, width={w:.2f}mm")
    return verts.astype(np.float32)
