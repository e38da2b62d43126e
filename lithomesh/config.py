"""
Mesh configuration.

MeshConfig is the fully resolved value the generator consumes. Where it comes
from (JSON file, CLI flags, a settings store) is the caller's concern; the
generator never reads global state.
"""
import json
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

from .errors import InvalidConfigError


@dataclass
class MeshConfig:
    min_thickness: float = 0.8  # Thinnest relief (mm)
    total_thickness: float = 4.0  # Thickest relief, including min_thickness (mm)
    frame_border: float = 3.0  # Frame width on each side (mm)
    width: float = 200.0  # Total width including frame (mm)
    frame_slope_factor: float = 0.75  # Bevel inset as a fraction of frame_border

    enable_stabilizers: bool = True
    permanent_stabilizers: bool = False
    stabilizer_threshold: float = 60.0  # Minimum total height before feet are added (mm)
    stabilizer_height_factor: float = 0.15

    enable_hangers: bool = True
    hanger_count: int = 2

    # Bending support, not implemented: the backside always falls back to flat
    enable_segmentation: bool = False
    backside_segments: int = 1
    frame_segments: int = 1

    @property
    def relief_depth(self) -> float:
        """Distance from the front plane to the back of the thickest relief."""
        return self.total_thickness - self.min_thickness

    @property
    def bevel_inset(self) -> float:
        """Distance from the outer edge to the inner frame edge at the front plane."""
        return self.frame_border * (1 + self.frame_slope_factor)

    def validate(self) -> "MeshConfig":
        """Raise InvalidConfigError if the values cannot produce a mesh."""
        if self.min_thickness < 0:
            raise InvalidConfigError(f"min_thickness must be >= 0, got {self.min_thickness}")
        if self.total_thickness <= self.min_thickness:
            raise InvalidConfigError(
                f"total_thickness ({self.total_thickness}) must be greater than "
                f"min_thickness ({self.min_thickness})"
            )
        if self.frame_border < 0:
            raise InvalidConfigError(f"frame_border must be >= 0, got {self.frame_border}")
        if self.width <= 2 * self.frame_border:
            raise InvalidConfigError(
                f"width ({self.width}) must exceed twice the frame border ({2 * self.frame_border})"
            )
        if not 0.0 <= self.frame_slope_factor <= 1.0:
            raise InvalidConfigError(
                f"frame_slope_factor must be within [0, 1], got {self.frame_slope_factor}"
            )
        if self.width <= 2 * self.bevel_inset:
            raise InvalidConfigError(
                f"width ({self.width}) must exceed twice the bevel inset ({2 * self.bevel_inset})"
            )
        if self.stabilizer_height_factor < 0:
            raise InvalidConfigError(
                f"stabilizer_height_factor must be >= 0, got {self.stabilizer_height_factor}"
            )
        if self.hanger_count < 1:
            raise InvalidConfigError(f"hanger_count must be >= 1, got {self.hanger_count}")
        if self.backside_segments < 1 or self.frame_segments < 1:
            raise InvalidConfigError("segment counts must be >= 1")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MeshConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise InvalidConfigError(f"Unknown config keys: {', '.join(unknown)}")

        values = {}
        for key, value in data.items():
            default = known[key].default
            try:
                if isinstance(default, bool):
                    if not isinstance(value, bool):
                        raise TypeError(f"expected true/false, got {value!r}")
                    values[key] = value
                elif isinstance(default, int):
                    values[key] = int(value)
                else:
                    values[key] = float(value)
            except (TypeError, ValueError) as e:
                raise InvalidConfigError(f"Invalid value for {key}: {e}") from e
        return cls(**values)


def load_config(path: str) -> MeshConfig:
    """Loads a MeshConfig from a JSON file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Config file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise InvalidConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigError(f"Config file {path} must contain a JSON object")
    return MeshConfig.from_dict(data)
