import numpy as np
import pytest

from lithomesh import MeshConfig, generate_mesh


def canonical_triangles(verts):
    """Order-independent form of a triangle soup: vertices sorted inside each
    triangle, triangles sorted, as a float64 (n, 3, 3) array."""
    tris = np.asarray(verts, dtype=np.float64).reshape(-1, 3, 3)

    def key(v):
        return tuple(round(c, 4) + 0.0 for c in v)

    items = [sorted(tri.tolist(), key=key) for tri in tris]
    items.sort(key=lambda t: tuple(c for v in t for c in key(v)))
    return np.array(items, dtype=np.float64).reshape(-1, 3, 3)


@pytest.fixture
def canonical():
    return canonical_triangles


@pytest.fixture
def plain_config():
    """Relief and frame only."""
    return MeshConfig(
        min_thickness=0.8,
        total_thickness=4.0,
        frame_border=3.0,
        width=100.0,
        enable_stabilizers=False,
        enable_hangers=False,
    )


@pytest.fixture
def stepped_raster():
    """6x5 raster with intensities in steps of 51, so depths are multiples of 0.64 mm."""
    rng = np.random.default_rng(7)
    return (rng.integers(0, 6, size=(5, 6)) * 51).astype(np.uint8)


@pytest.fixture
def stepped_config():
    """Width factor 10 mm/px, every feature enabled."""
    return MeshConfig(
        min_thickness=0.8,
        total_thickness=4.0,
        frame_border=1.0,
        width=62.0,
        frame_slope_factor=0.75,
        enable_stabilizers=True,
        stabilizer_threshold=10.0,
        enable_hangers=True,
        hanger_count=2,
    )


@pytest.fixture
def sample_mesh(stepped_raster, stepped_config):
    return generate_mesh(stepped_raster, stepped_config, processes=1)
