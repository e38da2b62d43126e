import struct

import numpy as np

from .base import MeshExporter

STL_HEADER = b"lithomesh binary STL"
STL_SOLID_NAME = "lithophane"

# One binary STL facet: normal, three vertices, attribute byte count (50 bytes)
STL_RECORD = np.dtype([
    ('normal', '<f4', (3,)),
    ('vertices', '<f4', (3, 3)),
    ('attr', '<u2'),
])


class BinaryStlExporter(MeshExporter):
    name = "STL"
    extension = "stl"
    file_filter = "STL Files (*.stl)"

    def write(self, vertices, fh):
        count = len(vertices) // 3
        records = np.zeros(count, dtype=STL_RECORD)
        records['vertices'] = vertices.reshape(count, 3, 3)

        fh.write(STL_HEADER.ljust(80, b'\0'))
        fh.write(struct.pack('<I', count))
        fh.write(records.tobytes())


class AsciiStlExporter(MeshExporter):
    name = "STL (ASCII)"
    extension = "stl"
    file_filter = "STL Files (*.stl)"

    def write(self, vertices, fh):
        fh.write(f"solid {STL_SOLID_NAME}\n".encode('ascii'))
        for tri in vertices.reshape(-1, 3, 3).tolist():
            lines = ["facet normal 0 0 0\n", "\touter loop\n"]
            for x, y, z in tri:
                lines.append(f"\t\tvertex {x:.6g} {y:.6g} {z:.6g}\n")
            lines.append("\tendloop\n")
            lines.append("endfacet\n")
            fh.write("".join(lines).encode('ascii'))
        fh.write(b"endsolid\n")
