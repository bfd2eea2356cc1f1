"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from pydantic import ValidationError

import tilemapper.config as tm_config
import tilemapper.pipeline as tm_pipeline
import tilemapper.runtime as tm_runtime
from tilemapper.compositor import (
    OUTPUT_TYPE_ALIASES,
    OutputType,
    ResizeFit,
    ResizeKernel,
)
from tilemapper.config_defaults import (
    DEFAULT_EXTENSIONS,
    DEFAULT_FIT,
    DEFAULT_KERNEL,
    DEFAULT_LIST_WIDTH,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_TILE_HEIGHT,
    DEFAULT_TILE_WIDTH,
)
from tilemapper.errors import TilemapperError
from tilemapper.logging_utils import logger, set_verbose

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

PROG = "tilemapper"


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Composite directories of images into a single tilemap image."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            f"  {PROG} sprites/ -o sheet.png\n"
            f"  {PROG} frames/ --l-sequence -W 64 -H 64 -j\n"
            f"  {PROG} art/player --l-animation --long-names -f contain\n\n"
            "Animation layout expects directories shaped like\n"
            "  <animation>/<angle in degrees>/<frame>.png"
        ),
    )
    p.add_argument(
        "paths", nargs="*", metavar="PATH",
        help="Image files or directories to search")
    p.add_argument(
        "-V", "--version", action="version",
        version=f"{PROG} v{tm_runtime.resolve_project_version()}")
    p.add_argument(
        "-v", "--verbose", action="store_true",
        help="Output verbose logging information")

    inputs = p.add_argument_group("input")
    inputs.add_argument(
        "-e", "--extensions", type=str,
        help=(
            "Comma-separated list of file extensions to match when "
            f"searching for input files (default: "
            f"{','.join(DEFAULT_EXTENSIONS)})"
        ))

    output = p.add_argument_group("output")
    output.add_argument(
        "-o", "--output", type=str,
        help=f'Output file path (default: "{DEFAULT_OUTPUT_PATH}")')
    output.add_argument(
        "-j", "--output-json", nargs="?", const=True, default=None,
        metavar="PATH",
        help=(
            "Write a JSON description of the tilemap, optionally to PATH "
            "(default: next to the output image)"
        ))
    output.add_argument(
        "-t", "--output-type", type=str,
        choices=[*(t.value for t in OutputType), *OUTPUT_TYPE_ALIASES],
        help="Output image format, inferred from the output extension "
             "when omitted")

    layout = p.add_argument_group("layout")
    modes = layout.add_mutually_exclusive_group()
    modes.add_argument(
        "-l", "--l-list", dest="layout", action="store_const", const="list",
        help=(
            "Put all tiles in one continuous list, left to right, wrapping "
            "after --l-list-length tiles (default)"
        ))
    modes.add_argument(
        "-s", "--l-sequence", dest="layout", action="store_const",
        const="sequence",
        help="One row per folder; each folder is treated as a sequence")
    modes.add_argument(
        "-a", "--l-animation", dest="layout", action="store_const",
        const="animation",
        help=(
            "One row per animation angle, for folders shaped like "
            "<animation>/<angle>/<frames>"
        ))
    layout.add_argument(
        "-x", "--l-list-length", dest="list_length", type=int,
        help=f"Tiles per row in list layout (default: {DEFAULT_LIST_WIDTH})")
    layout.add_argument(
        "-L", "--long-names", action="store_true", default=None,
        help=(
            'Use full directory names, e.g. "Art/Player/Walk_Forward" '
            'instead of "Walk_Forward"'
        ))

    tiles = p.add_argument_group("tiles")
    tiles.add_argument(
        "-W", "--width", type=int,
        help=f"Width of each tile in pixels (default: {DEFAULT_TILE_WIDTH})")
    tiles.add_argument(
        "-H", "--height", type=int,
        help=f"Height of each tile in pixels (default: {DEFAULT_TILE_HEIGHT})")
    tiles.add_argument(
        "-X", "--min-x", dest="min_x", type=int,
        help="Minimum count of tiles across the X axis")
    tiles.add_argument(
        "-Y", "--min-y", dest="min_y", type=int,
        help="Minimum count of tiles across the Y axis")
    tiles.add_argument(
        "-f", "--fit", type=str,
        help=(
            "Fit mode used when resizing tiles: "
            f"{', '.join(f.value for f in ResizeFit)} "
            f"(default: {DEFAULT_FIT})"
        ))
    tiles.add_argument(
        "-k", "--kernel", type=str,
        help=(
            "Kernel used when resizing tiles: "
            f"{', '.join(k.value for k in ResizeKernel)} "
            f"(default: {DEFAULT_KERNEL})"
        ))

    cfg = p.add_argument_group("config")
    cfg.add_argument(
        "--config", type=str,
        help="Path to a tilemapper TOML config file")
    cfg.add_argument(
        "--validate-config-only", action="store_true",
        help="Validate the config file and exit without building a tilemap")

    return p


def log_parameters(cfg: tm_config.TilemapperConfig) -> None:
    """Log the effective configuration at debug level."""
    logger.debug("Input Paths: %s", ", ".join(cfg.input.paths))
    logger.debug(
        "Extensions: %s",
        ",".join(cfg.input.extensions) if cfg.input.extensions else "(any)",
    )
    logger.debug("Layout: %s", cfg.layout.mode)
    if cfg.layout.mode == "list":
        logger.debug("List Width: %d", cfg.layout.list_width)
    logger.debug("Long Names: %s",
                 "Enabled" if cfg.layout.long_names else "Disabled")
    logger.debug("Tile Size: %dx%d", cfg.tile.width, cfg.tile.height)
    logger.debug("Minimum Tiles: %dx%d",
                 cfg.tile.min_count_x, cfg.tile.min_count_y)
    logger.debug("Fit: %s", cfg.tile.fit)
    logger.debug("Kernel: %s", cfg.tile.kernel)
    logger.debug("Output: %s (%s)", cfg.output.path,
                 cfg.output.resolve_output_type().value)
    logger.debug("Output JSON: %s",
                 cfg.output.resolve_json_path() or "Disabled")


def _cli_overrides(args: argparse.Namespace) -> dict[str, object]:
    """Map the argparse namespace to config override keys."""
    return {
        "paths": list(args.paths),
        "extensions": args.extensions,
        "layout": args.layout,
        "list_length": args.list_length,
        "long_names": args.long_names,
        "width": args.width,
        "height": args.height,
        "min_x": args.min_x,
        "min_y": args.min_y,
        "fit": args.fit,
        "kernel": args.kernel,
        "output": args.output,
        "output_type": args.output_type,
        "output_json": args.output_json,
    }


def run_from_args(args: argparse.Namespace) -> int:
    """Build and write a tilemap from parsed command-line arguments."""
    set_verbose(verbose=args.verbose)
    if args.verbose:
        logger.info("Running in verbose mode")

    base_cfg: tm_config.TilemapperConfig | None = None
    if args.config:
        base_cfg = tm_config.ConfigLoader.load(args.config)
        logger.info("Loaded config from: %s", args.config)
        if args.validate_config_only:
            logger.info("Config %s validated successfully.", args.config)
            return 0

    cfg = tm_config.build_config_from_cli(
        _cli_overrides(args), base_config=base_cfg,
    )
    log_parameters(cfg)

    result = tm_pipeline.build_tilemap(cfg)
    tm_runtime.write_outputs(
        result,
        cfg.output.path,
        cfg.output.resolve_json_path(),
    )
    logger.info(
        "Tilemap saved to: %s (%dx%d, %dx%d tiles)",
        cfg.output.path,
        result.info.width, result.info.height,
        result.info.count_x, result.info.count_y,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command-line interface; return the process exit code."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)
    if args.validate_config_only and not args.config:
        arg_parser.error("--validate-config-only requires --config")
    if not args.paths and not args.config:
        arg_parser.error("the following arguments are required: PATH")

    try:
        return run_from_args(args)
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
    except TilemapperError as exc:
        logger.error("%s", exc)
    except OSError as exc:
        logger.error("I/O error: %s", exc)
    return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
