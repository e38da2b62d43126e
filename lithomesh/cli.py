import argparse
import logging
import os
import sys

from .config import MeshConfig, load_config
from .errors import LithoMeshError
from .exporters import EXPORTERS, exporter_for_path, get_exporter
from .image_loader import is_format_supported, load_image, prepare_raster
from .logging_config import setup_logging
from .mesh_generator import MeshGenerator
from .mesh_utils import triangle_count

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 2000  # px

# CLI flag -> MeshConfig field
OVERRIDES = {
    'min_thickness': float,
    'total_thickness': float,
    'frame_border': float,
    'width': float,
    'frame_slope_factor': float,
    'stabilizer_threshold': float,
    'stabilizer_height_factor': float,
    'hanger_count': int,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lithomesh',
        description='Convert an image into a framed, printable lithophane mesh.',
    )
    parser.add_argument('input', help='Input image (png, jpg, webp, tiff, bmp)')
    parser.add_argument('-o', '--output', help='Output file (default: input name with the format extension)')
    parser.add_argument('-f', '--format', choices=sorted(EXPORTERS), default=None,
                        help='Export format (default: from output extension, else stl_bin)')
    parser.add_argument('-c', '--config', help='JSON file with MeshConfig values')
    for name, kind in OVERRIDES.items():
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, type=kind, default=None)
    parser.add_argument('--no-stabilizers', action='store_true', help='Never add stabilizer feet')
    parser.add_argument('--permanent-stabilizers', action='store_true',
                        help='Attach stabilizers without the snap-off gap')
    parser.add_argument('--no-hangers', action='store_true', help='Do not add hanging loops')
    parser.add_argument('--flip', action='store_true', help='Mirror the image vertically before generating')
    parser.add_argument('--max-size', type=int, default=DEFAULT_MAX_SIZE,
                        help='Downscale images larger than this many pixels (0 disables)')
    parser.add_argument('-j', '--processes', type=int, default=None,
                        help='Worker processes for the surface (default: all CPUs)')
    parser.add_argument('--force', action='store_true', help='Overwrite an existing output file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', help='Also write the log to this file')
    return parser


def resolve_config(args) -> MeshConfig:
    """Config file values first, then command line overrides."""
    config = load_config(args.config) if args.config else MeshConfig()
    for name in OVERRIDES:
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    if args.no_stabilizers:
        config.enable_stabilizers = False
    if args.permanent_stabilizers:
        config.permanent_stabilizers = True
    if args.no_hangers:
        config.enable_hangers = False
    return config.validate()


def resolve_output(args):
    """Returns (output_path, exporter)."""
    if args.output:
        exporter = get_exporter(args.format) if args.format else exporter_for_path(args.output)
        return args.output, exporter
    exporter = get_exporter(args.format or 'stl_bin')
    base = os.path.splitext(args.input)[0]
    return f"{base}.{exporter.extension}", exporter


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    ext = os.path.splitext(args.input)[1]
    if not is_format_supported(ext):
        parser.error(f"unsupported image format '{ext}'")

    output, exporter = resolve_output(args)
    if os.path.exists(output) and not args.force:
        logger.error(f"Output file {output} already exists, use --force to overwrite")
        return 1

    try:
        config = resolve_config(args)
        loaded = load_image(args.input, max_size=args.max_size, force_resize=args.max_size > 0)
        if loaded.has_quality_warning:
            logger.warning("This JPEG may have visible compression artifacts; a PNG gives better results")
        raster = prepare_raster(loaded.image, flip_vertical=args.flip)

        generator = MeshGenerator(config)
        mesh = generator.generate(
            raster,
            progress_cb=lambda current, total: logger.info(f"Progress: {current}/{total}"),
            processes=args.processes,
        )
    except LithoMeshError as e:
        logger.error(str(e))
        return 1

    result = exporter.export_mesh(mesh, output)
    if not result.success:
        logger.error(f"Export failed: {result.error_message}")
        return 1

    width, height = generator.mesh_dimensions
    logger.info(
        f"Exported {triangle_count(mesh)} triangles to {output} "
        f"({result.bytes_written / 1024:.1f} KB, {width:.1f}x{height:.1f} mm)"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
