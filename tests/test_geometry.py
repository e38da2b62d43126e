import numpy as np
import pytest

from lithomesh import (
    MeshConfig,
    build_depth_buffer,
    generate_backside,
    generate_frame,
    generate_hangers,
    generate_segmented_backside,
    generate_stabilizers,
    hanger_positions,
    needs_stabilizers,
    quads_to_triangles,
)


def test_quads_split_into_fan_triangles():
    quad = [[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]]
    tris = quads_to_triangles(quad)
    assert tris.dtype == np.float32
    np.testing.assert_array_equal(tris, [
        (0, 0, 0), (1, 0, 0), (1, 1, 0),
        (0, 0, 0), (1, 1, 0), (0, 1, 0),
    ])


class TestBackside:
    def test_two_triangles_on_base_plane(self):
        config = MeshConfig(frame_border=2.0, width=24.0)
        buf = build_depth_buffer(np.zeros((3, 5), dtype=np.uint8), config)
        verts = generate_backside(buf, -0.8)

        assert verts.shape == (6, 3)
        np.testing.assert_allclose(verts[:, 2], -0.8, rtol=1e-6)
        # Pixel (0, 0) .. (4, 2) at 4 mm per pixel, offset by the border
        assert set(np.round(verts[:, 0], 4)) == {2.0, 18.0}
        assert set(np.round(verts[:, 1], 4)) == {2.0, 10.0}

    def test_segmented_backside_falls_back_to_flat(self):
        buf = build_depth_buffer(np.zeros((3, 5), dtype=np.uint8), MeshConfig())
        np.testing.assert_array_equal(
            generate_segmented_backside(buf, -0.8, 4),
            generate_backside(buf, -0.8),
        )


class TestFrame:
    def test_triangle_count_and_bounds(self):
        config = MeshConfig(frame_border=3.0, width=100.0)
        verts = generate_frame(100.0, 80.0, config)

        assert len(verts) // 3 == 28
        assert verts[:, 0].min() == 0.0 and verts[:, 0].max() == 100.0
        assert verts[:, 1].min() == 0.0 and verts[:, 1].max() == 80.0
        np.testing.assert_allclose(verts[:, 2].min(), -0.8, rtol=1e-6)
        np.testing.assert_allclose(verts[:, 2].max(), 3.2, rtol=1e-6)

    def test_bevel_inset_at_front_plane(self):
        config = MeshConfig(frame_border=4.0, width=100.0, frame_slope_factor=0.5)
        verts = generate_frame(100.0, 60.0, config)

        front = verts[verts[:, 2] == 0.0]
        assert len(front) > 0
        assert set(np.round(front[:, 0], 4)) == {6.0, 94.0}
        assert set(np.round(front[:, 1], 4)) == {6.0, 54.0}

    def test_zero_slope_keeps_bevel_at_border(self):
        config = MeshConfig(frame_border=3.0, width=50.0, frame_slope_factor=0.0)
        verts = generate_frame(50.0, 40.0, config)
        front = verts[verts[:, 2] == 0.0]
        assert set(np.round(front[:, 0], 4)) == {3.0, 47.0}


class TestStabilizers:
    def test_threshold(self):
        config = MeshConfig(stabilizer_threshold=60.0)
        assert needs_stabilizers(61.0, config)
        assert not needs_stabilizers(60.0, config)
        config.enable_stabilizers = False
        assert not needs_stabilizers(500.0, config)

    def test_sixty_four_triangles_at_both_edges(self):
        config = MeshConfig(frame_border=3.0, width=100.0)
        verts = generate_stabilizers(100.0, 120.0, config)

        assert verts.shape == (64 * 3, 3)
        left = verts[verts[:, 0] < 50]
        right = verts[verts[:, 0] >= 50]
        assert len(left) == len(right) == 32 * 3
        assert (left[:, 0].min(), left[:, 0].max()) == (0.0, 3.0)
        assert (right[:, 0].min(), right[:, 0].max()) == (97.0, 100.0)
        # Feet are stabilizer_height_factor of the total height tall
        np.testing.assert_allclose(verts[:, 1].max(), 18.0, rtol=1e-6)
        assert verts[:, 1].min() == 0.0

    def test_width_is_capped(self):
        config = MeshConfig(frame_border=10.0, width=100.0)
        verts = generate_stabilizers(100.0, 120.0, config)
        left = verts[verts[:, 0] < 50]
        assert left[:, 0].max() == pytest.approx(4.0)

    @pytest.mark.parametrize("permanent, gap", [(True, 0.0), (False, 1.0)])
    def test_seam_gap(self, permanent, gap):
        config = MeshConfig(permanent_stabilizers=permanent)
        verts = generate_stabilizers(200.0, 150.0, config)

        front = verts[verts[:, 2] > 0]
        back = verts[verts[:, 2] < 0]
        np.testing.assert_allclose(front[:, 2].min(), config.relief_depth + gap, rtol=1e-6)
        np.testing.assert_allclose(back[:, 2].max(), -config.min_thickness - gap, rtol=1e-6)

    def test_front_foot_reaches_half_the_stabilizer_height(self):
        config = MeshConfig()
        verts = generate_stabilizers(200.0, 100.0, config)
        foot = 100.0 * config.stabilizer_height_factor * 0.5
        np.testing.assert_allclose(verts[:, 2].max(), config.relief_depth + foot, rtol=1e-6)
        np.testing.assert_allclose(verts[:, 2].min(), -config.min_thickness - foot, rtol=1e-6)


class TestHangers:
    def test_positions_are_centred_in_slices(self):
        np.testing.assert_allclose(hanger_positions(100.0, MeshConfig(hanger_count=2)), [20.5, 70.5])
        np.testing.assert_allclose(hanger_positions(90.0, MeshConfig(hanger_count=3)), [10.5, 40.5, 70.5])

    def test_tabs_stand_on_top_edge(self):
        config = MeshConfig(hanger_count=2)
        verts = generate_hangers(100.0, 70.0, config)

        assert len(verts) // 3 == 32
        assert set(np.unique(verts[:, 2])) == {0.0, 2.0}
        assert verts[:, 1].min() == 70.0
        assert verts[:, 1].max() == 73.0

        first, second = verts[:48], verts[48:]
        assert (first[:, 0].min(), first[:, 0].max()) == (20.5, 29.5)
        assert (second[:, 0].min(), second[:, 0].max()) == (70.5, 79.5)

    @pytest.mark.parametrize("count", [1, 3, 5])
    def test_sixteen_triangles_per_tab(self, count):
        verts = generate_hangers(200.0, 50.0, MeshConfig(hanger_count=count))
        assert len(verts) // 3 == 16 * count
