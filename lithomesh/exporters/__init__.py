"""
Mesh exporters, one per file format.

Format ids match the choices offered by the command line:
stl_bin, stl_ascii, obj, 3mf.
"""
import os
from typing import Dict, Type

from .base import ExportError, ExportResult, MeshExporter
from .obj import ObjExporter
from .stl import AsciiStlExporter, BinaryStlExporter
from .threemf import ThreeMfExporter, generate_model_xml

EXPORTERS: Dict[str, Type[MeshExporter]] = {
    "stl_bin": BinaryStlExporter,
    "stl_ascii": AsciiStlExporter,
    "obj": ObjExporter,
    "3mf": ThreeMfExporter,
}

DEFAULT_FORMAT = "stl_bin"


def get_exporter(format_id: str) -> MeshExporter:
    """Returns a new exporter for a format id, raising KeyError for unknown ids."""
    try:
        return EXPORTERS[format_id]()
    except KeyError:
        raise KeyError(f"Unknown export format '{format_id}', expected one of {', '.join(EXPORTERS)}") from None


def exporter_for_path(path) -> MeshExporter:
    """Picks an exporter from the file extension; .stl gives binary STL."""
    ext = os.path.splitext(os.fspath(path))[1].lower().lstrip('.')
    for format_id, cls in EXPORTERS.items():
        if cls.extension == ext:
            return get_exporter(format_id)
    return get_exporter(DEFAULT_FORMAT)


__all__ = [
    "ExportError", "ExportResult", "MeshExporter",
    "BinaryStlExporter", "AsciiStlExporter", "ObjExporter", "ThreeMfExporter",
    "generate_model_xml",
    "EXPORTERS", "DEFAULT_FORMAT", "get_exporter", "exporter_for_path",
]
