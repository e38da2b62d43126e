import numpy as np

from ..mesh_utils import deduplicate_vertices
from .base import MeshExporter


class ObjExporter(MeshExporter):
    """Wavefront OBJ with shared vertices (1-based face indices)."""
    name = "OBJ"
    extension = "obj"
    file_filter = "OBJ Files (*.obj)"

    def write(self, vertices, fh):
        unique, indices = deduplicate_vertices(vertices)

        fh.write(b"# lithomesh export\n")
        fh.write(f"# Triangles: {len(vertices) // 3}\n\n".encode('ascii'))
        fh.write(b"o lithophane\n\n")
        np.savetxt(fh, unique.astype(np.float64), fmt='v %.6f %.6f %.6f')
        fh.write(b"\n# Faces\n")
        np.savetxt(fh, indices.reshape(-1, 3) + 1, fmt='f %d %d %d')
