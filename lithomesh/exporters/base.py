import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional

import numpy as np

from ..errors import PackagingError
from ..mesh_utils import as_vertex_array

logger = logging.getLogger(__name__)


def _file_mode(path: str) -> int:
    """Permissions for the exported file: those of the file it replaces, else 0o666 minus the umask."""
    try:
        return os.stat(path).st_mode & 0o7777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class ExportError(Enum):
    EMPTY_MESH = "empty_mesh"
    INVALID_TRIANGLE_COUNT = "invalid_triangle_count"
    IO_ERROR = "io_error"
    PACKAGING_ERROR = "packaging_error"


@dataclass
class ExportResult:
    success: bool = False
    error_message: str = ""
    bytes_written: int = 0
    error: Optional[ExportError] = None

    @classmethod
    def failure(cls, error: ExportError, message: str) -> "ExportResult":
        return cls(success=False, error_message=message, bytes_written=0, error=error)


class MeshExporter(ABC):
    """
    Writes a triangle soup to disk in one file format.

    export_mesh() validates the mesh, writes into a temporary file next to the
    destination and renames it into place, so a failed export never leaves a
    partial file behind. Failures are returned as ExportResult, not raised.
    """
    name: str = ""
    extension: str = ""
    file_filter: str = ""

    def export_mesh(self, mesh, path) -> ExportResult:
        vertices = as_vertex_array(mesh)
        if len(vertices) == 0:
            return ExportResult.failure(ExportError.EMPTY_MESH, "Empty mesh")
        if len(vertices) % 3 != 0:
            return ExportResult.failure(
                ExportError.INVALID_TRIANGLE_COUNT,
                f"Invalid mesh: vertex count {len(vertices)} not divisible by 3",
            )

        path = os.fspath(path)
        directory = os.path.dirname(os.path.abspath(path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{os.path.basename(path)}.", suffix=".tmp"
            )
            with os.fdopen(fd, 'wb') as fh:
                self.write(vertices, fh)
            os.chmod(tmp_path, _file_mode(path))
            os.replace(tmp_path, path)
            tmp_path = None
        except PackagingError as e:
            return ExportResult.failure(ExportError.PACKAGING_ERROR, f"Failed to create {self.name} archive: {e}")
        except OSError as e:
            return ExportResult.failure(ExportError.IO_ERROR, f"Cannot open file for writing: {e}")
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

        size = os.path.getsize(path)
        logger.info(f"Exported {self.name}: {path} ({size} bytes, {len(vertices) // 3} triangles)")
        return ExportResult(success=True, bytes_written=size)

    @abstractmethod
    def write(self, vertices: np.ndarray, fh: BinaryIO) -> None:
        """Serializes a validated float32 (n, 3) vertex array to a binary file handle."""
