"""
3MF export.

A 3MF file is an OPC package: a ZIP archive holding a content-types part, a
relationships part and the XML model. The archive is built in memory order
with fixed timestamps, so identical meshes give byte-identical files.
"""
import zipfile

import numpy as np

from ..errors import PackagingError
from ..mesh_utils import deduplicate_vertices
from .base import MeshExporter

MODEL_PATH = "3D/3dmodel.model"
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)

CONTENT_TYPES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="model" ContentType="application/vnd.ms-package.3dmanufacturing-3dmodel+xml"/>
</Types>
"""

RELS_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Target="/{MODEL_PATH}" Id="rel0" Type="http://schemas.microsoft.com/3dmanufacturing/2013/01/3dmodel"/>
</Relationships>
"""

MODEL_HEAD = """<?xml version="1.0" encoding="UTF-8"?>
<model unit="millimeter" xml:lang="en-US" xmlns="http://schemas.microsoft.com/3dmanufacturing/core/2015/02">
  <resources>
    <object id="1" type="model">
      <mesh>
        <vertices>
"""

MODEL_TAIL = """        </triangles>
      </mesh>
    </object>
  </resources>
  <build>
    <item objectid="1"/>
  </build>
</model>
"""


def generate_model_xml(vertices) -> str:
    """The 3D model part for a triangle soup, with shared 0-based vertices."""
    unique, indices = deduplicate_vertices(vertices)
    vertex_lines = "".join(
        f'          <vertex x="{x:.6f}" y="{y:.6f}" z="{z:.6f}"/>\n'
        for x, y, z in unique.astype(np.float64).tolist()
    )
    triangle_lines = "".join(
        f'          <triangle v1="{a}" v2="{b}" v3="{c}"/>\n'
        for a, b, c in indices.reshape(-1, 3).tolist()
    )
    return MODEL_HEAD + vertex_lines + "        </vertices>\n        <triangles>\n" + triangle_lines + MODEL_TAIL


class ThreeMfExporter(MeshExporter):
    name = "3MF"
    extension = "3mf"
    file_filter = "3MF Files (*.3mf)"

    def write(self, vertices, fh):
        parts = [
            ("[Content_Types].xml", CONTENT_TYPES_XML),
            ("_rels/.rels", RELS_XML),
            (MODEL_PATH, generate_model_xml(vertices)),
        ]
        try:
            with zipfile.ZipFile(fh, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
                for name, content in parts:
                    info = zipfile.ZipInfo(name, date_time=ZIP_TIMESTAMP)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    archive.writestr(info, content.encode('utf-8'))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, RuntimeError) as e:
            raise PackagingError(str(e)) from e
