"""
Relief surface tessellation.

The kernel works on a horizontal block of the depth buffer so that blocks can
be generated independently and concatenated afterwards (see parallel_meshes).
All coordinates are built in pixel space and scaled to millimetres at the end.
"""
import numpy as np


def surface_triangle_count(width_px: int, height_px: int) -> int:
    """Number of triangles the relief surface and its walls produce."""
    if width_px < 1 or height_px < 2:
        return 0
    interior = (width_px - 1) * (height_px - 1) * 2
    walls = 2 * (width_px - 1) * 2 + 2 * (height_px - 1) * 2
    return interior + walls


def _grid(xs, ys, depth, y_offset):
    """Stacks (x, y, depth) for every combination of xs and block-local ys."""
    gx, gy = np.meshgrid(xs, ys)
    z = depth[gy, gx]
    return np.stack([gx, gy + y_offset, z], axis=-1).astype(np.float64)


def _wall_strip(a_xy, a_z, b_xy, b_z, base_z):
    """
    Vertical quads from the surface edge a->b down to base_z.

    a_xy, b_xy are (n, 2) pixel coordinates, a_z, b_z the surface heights.
    Returns (n, 6, 3).
    """
    n = len(a_z)
    base = np.full(n, base_z)
    a_top = np.column_stack([a_xy, a_z])
    b_top = np.column_stack([b_xy, b_z])
    a_bot = np.column_stack([a_xy, base])
    b_bot = np.column_stack([b_xy, base])
    return np.stack([a_bot, a_top, b_top, b_top, b_bot, a_bot], axis=1)


def tessellate_rows(depth_rows, y_start, height, width_factor, border, base_z):
    """
    Triangulates quad rows y_start .. y_start + len(depth_rows) - 2.

    depth_rows holds buffer rows y_start .. y_start + len(depth_rows) - 1, i.e. the
    quad rows of the block plus one overlapping row. height is the full buffer
    height and decides whether the block owns the top or bottom wall.
    Returns a float32 (n, 3) vertex array.
    """
    depth_rows = np.asarray(depth_rows)
    n_rows = depth_rows.shape[0] - 1
    w_px = depth_rows.shape[1]
    if n_rows < 1:
        return np.empty((0, 3), dtype=np.float32)

    parts = []
    local_ys = np.arange(n_rows)

    # Relief surface, two triangles per cell
    if w_px > 1:
        xs = np.arange(w_px - 1)
        tl = _grid(xs, local_ys, depth_rows, y_start)
        tr = _grid(xs + 1, local_ys, depth_rows, y_start)
        bl = _grid(xs, local_ys + 1, depth_rows, y_start)
        br = _grid(xs + 1, local_ys + 1, depth_rows, y_start)
        parts.append(np.stack([tl, br, bl, tl, tr, br], axis=2).reshape(-1, 3))

    # Left and right walls, one quad per row
    ys = (local_ys + y_start).astype(np.float64)
    for x in (0, w_px - 1):
        col = depth_rows[:, x].astype(np.float64)
        a_xy = np.column_stack([np.full(n_rows, x, dtype=np.float64), ys])
        b_xy = np.column_stack([np.full(n_rows, x, dtype=np.float64), ys + 1])
        parts.append(_wall_strip(a_xy, col[:-1], b_xy, col[1:], base_z).reshape(-1, 3))

    # Walls along buffer row 0 and buffer row H-1, one quad per column
    if w_px > 1:
        edges = []
        if y_start == 0:
            edges.append((0, 0))
        if y_start + n_rows == height - 1:
            edges.append((n_rows, height - 1))
        for local_y, y in edges:
            row = depth_rows[local_y].astype(np.float64)
            xs = np.arange(w_px - 1, dtype=np.float64)
            a_xy = np.column_stack([xs, np.full(w_px - 1, y, dtype=np.float64)])
            b_xy = np.column_stack([xs + 1, np.full(w_px - 1, y, dtype=np.float64)])
            parts.append(_wall_strip(a_xy, row[:-1], b_xy, row[1:], base_z).reshape(-1, 3))

    verts = np.concatenate(parts)
    verts[:, :2] = verts[:, :2] * width_factor + border
    return verts.astype(np.float32)
