"""Exception types raised by mesh generation and the input helpers."""


class LithoMeshError(Exception):
    """Base class for all lithomesh errors."""


class InvalidConfigError(LithoMeshError, ValueError):
    """Raised before generation when the raster or MeshConfig cannot produce a valid mesh."""


class GenerationCancelled(LithoMeshError):
    """Raised when the caller's cancel check fires during generate_mesh()."""


class PackagingError(LithoMeshError):
    """Raised while assembling a 3MF archive."""


class ImageLoadError(LithoMeshError):
    """Raised when an input image cannot be read or decoded."""
