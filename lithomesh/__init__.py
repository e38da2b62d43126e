"""
lithomesh

Turns a grayscale raster into a printable lithophane: a relief surface whose
thickness follows the image, closed by a flat back, held in a beveled frame,
with optional stabilizer feet and hanging loops. The result is a triangle soup
that can be written as binary STL, ASCII STL, OBJ or 3MF.
"""

from .config import MeshConfig, load_config
from .errors import (
    LithoMeshError,
    InvalidConfigError,
    GenerationCancelled,
    PackagingError,
    ImageLoadError,
)
from .depth_buffer import DepthBuffer, build_depth_buffer, mesh_height
from .tessellation import tessellate_rows, surface_triangle_count
from .parallel_meshes import tessellate_surface_parallel, process_row_block
from .frame import generate_backside, generate_segmented_backside, generate_frame
from .stabilizers import generate_stabilizers, needs_stabilizers
from .hangers import generate_hangers, hanger_positions
from .mesh_utils import quads_to_triangles, deduplicate_vertices, to_trimesh
from .mesh_generator import MeshGenerator, generate_mesh, estimate_vertex_count
from .image_loader import ImageLoadResult, load_image, prepare_raster
from .exporters import (
    ExportError,
    ExportResult,
    MeshExporter,
    BinaryStlExporter,
    AsciiStlExporter,
    ObjExporter,
    ThreeMfExporter,
    get_exporter,
    exporter_for_path,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration and errors
    "MeshConfig",
    "load_config",
    "LithoMeshError",
    "InvalidConfigError",
    "GenerationCancelled",
    "PackagingError",
    "ImageLoadError",

    # Generation
    "DepthBuffer",
    "build_depth_buffer",
    "mesh_height",
    "tessellate_rows",
    "surface_triangle_count",
    "tessellate_surface_parallel",
    "process_row_block",
    "generate_backside",
    "generate_segmented_backside",
    "generate_frame",
    "generate_stabilizers",
    "needs_stabilizers",
    "generate_hangers",
    "hanger_positions",
    "MeshGenerator",
    "generate_mesh",
    "estimate_vertex_count",

    # Mesh helpers
    "quads_to_triangles",
    "deduplicate_vertices",
    "to_trimesh",

    # Input
    "ImageLoadResult",
    "load_image",
    "prepare_raster",

    # Export
    "ExportError",
    "ExportResult",
    "MeshExporter",
    "BinaryStlExporter",
    "AsciiStlExporter",
    "ObjExporter",
    "ThreeMfExporter",
    "get_exporter",
    "exporter_for_path",
]
