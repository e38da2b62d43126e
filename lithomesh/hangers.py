import numpy as np

from .config import MeshConfig
from .utils import HANGER_HALF_WIDTH, HANGER_THICKNESS

T = HANGER_THICKNESS

# One hanging tab in local coordinates: x from the tab's left edge, y above the
# frame's top edge. The loop hole is the notch between (4, 1), (5, 1) and the
# base points (3, 0), (6, 0).
_TAB = np.array([
    # Front face (z = 0)
    [(3, 0, 0), (0, 0, 0), (3, 3, 0)],
    [(3, 3, 0), (6, 3, 0), (9, 0, 0)],
    [(9, 0, 0), (6, 0, 0), (5, 1, 0)],
    [(4, 1, 0), (3, 0, 0), (3, 3, 0)],
    [(3, 3, 0), (9, 0, 0), (5, 1, 0)],
    [(3, 3, 0), (5, 1, 0), (4, 1, 0)],
    # Back face (z = T)
    [(3, 3, T), (0, 0, T), (3, 0, T)],
    [(3, 3, T), (3, 0, T), (4, 1, T)],
    [(9, 0, T), (6, 3, T), (3, 3, T)],
    [(5, 1, T), (6, 0, T), (9, 0, T)],
    [(3, 3, T), (4, 1, T), (5, 1, T)],
    [(5, 1, T), (9, 0, T), (3, 3, T)],
    # Inner side of the loop
    [(5, 1, 0), (6, 0, 0), (6, 0, T)],
    [(5, 1, 0), (6, 0, T), (5, 1, T)],
    # Top of the arch
    [(6, 3, 0), (3, 3, 0), (3, 3, T)],
    [(6, 3, 0), (3, 3, T), (6, 3, T)],
], dtype=np.float64).reshape(-1, 3)


def hanger_positions(width: float, config: MeshConfig) -> np.ndarray:
    """Left edge x of every tab, centred in equal slices of the width."""
    count = config.hanger_count
    return (width / count) * (np.arange(count) + 0.5) - HANGER_HALF_WIDTH


def generate_hangers(width: float, height: float, config: MeshConfig) -> np.ndarray:
    """hanger_count tabs standing on the top edge (y = height) of the frame."""
    xs = hanger_positions(width, config)
    offsets = np.column_stack([xs, np.full(len(xs), height), np.zeros(len(xs))])
    verts = offsets[:, None, :] + _TAB[None, :, :]
    return verts.reshape(-1, 3).astype(np.float32)
