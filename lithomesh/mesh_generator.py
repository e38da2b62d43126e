import logging
from typing import Callable, Optional, Tuple

import numpy as np

from .config import MeshConfig
from .depth_buffer import as_raster, build_depth_buffer, mesh_height
from .errors import GenerationCancelled
from .frame import generate_backside, generate_frame, generate_segmented_backside
from .hangers import generate_hangers
from .mesh_utils import triangle_count
from .parallel_meshes import tessellate_surface_parallel
from .stabilizers import generate_stabilizers, needs_stabilizers
from .utils import timed

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
CancelCheck = Callable[[], bool]

PROGRESS_TOTAL = 100
SURFACE_DONE = 50
BACKSIDE_DONE = 60
FRAME_DONE = 80


def estimate_vertex_count(width_px: int, height_px: int, config: MeshConfig) -> int:
    """Rough vertex count used to size the output up front."""
    return (
        max(width_px - 1, 0) * max(height_px - 1, 0) * 6 * 3  # relief
        + 12  # backside
        + 500  # frame
        + (1000 if config.enable_stabilizers else 0)
        + (config.hanger_count * 300 if config.enable_hangers else 0)
    )


def _check_cancel(should_cancel: Optional[CancelCheck], phase: str):
    if should_cancel and should_cancel():
        raise GenerationCancelled(f"Cancelled before {phase}")


@timed
def generate_mesh(
    raster,
    config: MeshConfig,
    progress_cb: Optional[ProgressCallback] = None,
    should_cancel: Optional[CancelCheck] = None,
    processes: Optional[int] = None,
) -> np.ndarray:
    """
    Generates the complete lithophane as a float32 (n, 3) triangle soup.

    Args:
        raster: 8-bit grayscale image (2-D array or PIL image), already inverted so
            that brighter pixels mean thicker relief.
        config: Validated before any work starts; raises InvalidConfigError.
        progress_cb: Called with (current, total) at coarse checkpoints, ending at (total, total).
        should_cancel: Polled between phases and every row block; raises GenerationCancelled.
        processes: Worker processes for the surface. None uses all CPUs, 1 runs inline.
    """
    depth_buffer = build_depth_buffer(raster, config)
    width = config.width
    height = depth_buffer.total_height
    base_z = -config.min_thickness

    def report(current):
        if progress_cb:
            progress_cb(current, PROGRESS_TOTAL)

    logger.info(
        f"Generating mesh for {depth_buffer.width}x{depth_buffer.height} px image "
        f"-> {width:.2f}x{height:.2f} mm "
        f"(~{estimate_vertex_count(depth_buffer.width, depth_buffer.height, config)} vertices)"
    )

    _check_cancel(should_cancel, "surface")
    parts = [tessellate_surface_parallel(
        depth_buffer,
        base_z,
        progress_cb=lambda v: report(int(v * SURFACE_DONE)),
        should_cancel=should_cancel,
        processes=processes,
    )]
    report(SURFACE_DONE)

    _check_cancel(should_cancel, "backside")
    if config.enable_segmentation and config.backside_segments > 1:
        parts.append(generate_segmented_backside(depth_buffer, base_z, config.backside_segments))
    else:
        parts.append(generate_backside(depth_buffer, base_z))
    report(BACKSIDE_DONE)

    _check_cancel(should_cancel, "frame")
    parts.append(generate_frame(width, height, config))
    report(FRAME_DONE)

    if needs_stabilizers(height, config):
        _check_cancel(should_cancel, "stabilizers")
        parts.append(generate_stabilizers(width, height, config))

    if config.enable_hangers:
        _check_cancel(should_cancel, "hangers")
        parts.append(generate_hangers(width, height, config))

    # Single allocation for the final soup
    mesh = np.empty((sum(len(p) for p in parts), 3), dtype=np.float32)
    np.concatenate(parts, out=mesh)
    report(PROGRESS_TOTAL)

    logger.info(f"Mesh generated: {triangle_count(mesh)} triangles")
    return mesh


class MeshGenerator:
    """Holds a MeshConfig and the last mesh it produced, for preview and export."""

    def __init__(self, config: Optional[MeshConfig] = None):
        self.config = config or MeshConfig()
        self._mesh = np.empty((0, 3), dtype=np.float32)
        self._mesh_dimensions: Tuple[float, float] = (0.0, 0.0)

    def set_config(self, config: MeshConfig):
        self.config = config

    @property
    def mesh(self) -> np.ndarray:
        return self._mesh

    @property
    def mesh_dimensions(self) -> Tuple[float, float]:
        """(width, height) in mm of the last generated mesh, frame included."""
        return self._mesh_dimensions

    def generate(
        self,
        raster,
        progress_cb: Optional[ProgressCallback] = None,
        should_cancel: Optional[CancelCheck] = None,
        processes: Optional[int] = None,
    ) -> np.ndarray:
        arr = as_raster(raster)
        mesh = generate_mesh(arr, self.config, progress_cb, should_cancel, processes)
        h_px, w_px = arr.shape
        self._mesh = mesh
        self._mesh_dimensions = (self.config.width, mesh_height(w_px, h_px, self.config))
        return mesh
