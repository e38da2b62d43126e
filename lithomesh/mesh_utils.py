import numpy as np
import trimesh

from .utils import DEDUP_DECIMALS

# Fan order that splits quad (p0, p1, p2, p3) into (p0, p1, p2) and (p0, p2, p3)
_QUAD_FAN = np.array([0, 1, 2, 0, 2, 3])


def quads_to_triangles(quads) -> np.ndarray:
    """Splits (n, 4, 3) quads into a flat (n * 6, 3) float32 triangle soup."""
    quads = np.asarray(quads, dtype=np.float64).reshape(-1, 4, 3)
    return quads[:, _QUAD_FAN].reshape(-1, 3).astype(np.float32)


def as_vertex_array(mesh) -> np.ndarray:
    """Returns the mesh as a float32 (n, 3) vertex array."""
    return np.asarray(mesh, dtype=np.float32).reshape(-1, 3)


def triangle_count(mesh) -> int:
    return len(mesh) // 3


def deduplicate_vertices(mesh, decimals: int = DEDUP_DECIMALS):
    """
    Collapses vertices that agree to `decimals` places.

    Returns (unique_vertices, indices): unique vertices in first-seen order and
    a 0-based index into them for every input vertex.
    """
    verts = as_vertex_array(mesh)
    if len(verts) == 0:
        return verts, np.empty(0, dtype=np.int64)

    # Adding 0.0 folds -0.0 into 0.0 so both share a key
    keys = np.round(verts.astype(np.float64), decimals) + 0.0
    _, first, inverse = np.unique(keys, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)

    order = np.argsort(first, kind='stable')
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    return verts[first[order]], rank[inverse]


def to_trimesh(mesh) -> trimesh.Trimesh:
    """Wraps a triangle soup as an unprocessed trimesh.Trimesh for inspection or preview."""
    verts = as_vertex_array(mesh)
    faces = np.arange(len(verts)).reshape(-1, 3)
    return trimesh.Trimesh(vertices=verts, faces=faces, process=False)
