"""Command-line entry point for merging images into a grid."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import ValidationError

from image_merge.config import ConfigLoader, MergeConfig
from image_merge.config_defaults import (
    DEFAULT_COLUMNS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_ROWS,
    DEFAULT_TIMEOUT_SECONDS,
)
from image_merge.errors import MergeError
from image_merge.formats import estimate_ratio
from image_merge.image_grid.naming import default_output_name, save_canvas
from image_merge.logging_utils import logger, setup_logger
from image_merge.merge import merge

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Sequence

_SIZE_PARTS = 2

T = TypeVar("T")


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        msg = f"{what} must be an integer, got {text!r}"
        raise ValueError(msg) from exc


def positive_int(text: str) -> int:
    """Parse a grid dimension or JPEG quality; zero is rejected."""
    value = _parse_int(text, "value")
    if value <= 0:
        msg = f"value must be positive, got {value}"
        raise ValueError(msg)
    return value


def non_negative_int(text: str) -> int:
    """Parse the 0-based index of the image that sizes every cell."""
    value = _parse_int(text, "image index")
    if value < 0:
        msg = f"image index must not be negative, got {value}"
        raise ValueError(msg)
    return value


def size_2d(text: str) -> tuple[int, int]:
    """Parse a cell size such as ``256x256`` (the ``x`` may be upper case)."""
    parts = text.lower().split("x")
    if len(parts) != _SIZE_PARTS:
        msg = f"cell size must look like WxH, got {text!r}"
        raise ValueError(msg)
    width = _parse_int(parts[0], "cell width and height")
    height = _parse_int(parts[1], "cell width and height")
    if width <= 0 or height <= 0:
        msg = f"cell width and height must be positive, got {text!r}"
        raise ValueError(msg)
    return width, height


def _as_arg_type(validator: Callable[[str], T]) -> Callable[[str], T]:
    """Let argparse report a validator's ``ValueError`` as a usage error."""

    def parse(text: str) -> T:
        try:
            return validator(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return parse


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for the merge tool."""
    parser = argparse.ArgumentParser(
        description=(
            "Merge local images or http(s) URLs into a single grid image, "
            "filled row by row."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  image-merge a.png b.png c.png d.png --columns 2 --rows 2\n"
            "  image-merge --config job.toml --out merged.png\n"
        ),
    )
    parser.add_argument(
        "sources",
        nargs="*",
        help="Image paths or URLs, one per cell.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="TOML job file describing cells, overlays, and output.",
    )

    grid = parser.add_argument_group("grid")
    grid.add_argument(
        "--columns",
        type=_as_arg_type(positive_int),
        default=None,
        help=f"Number of columns (default: {DEFAULT_COLUMNS}).",
    )
    grid.add_argument(
        "--rows",
        type=_as_arg_type(positive_int),
        default=None,
        help=f"Number of rows (default: {DEFAULT_ROWS}).",
    )
    grid.add_argument(
        "--base-dir",
        type=str,
        default=None,
        help="Directory prepended to every local source path.",
    )
    sizing = grid.add_mutually_exclusive_group()
    sizing.add_argument(
        "--grid-size",
        type=_as_arg_type(size_2d),
        default=None,
        help="Fixed cell size as WxH, e.g., 256x256.",
    )
    sizing.add_argument(
        "--size-from",
        type=_as_arg_type(non_negative_int),
        default=None,
        help="Size every cell after the Nth image (0-based).",
    )

    output = parser.add_argument_group("output")
    output.add_argument(
        "--out",
        type=str,
        default=None,
        help=(
            "Output file, .jpg or .png, or an existing directory "
            f"(default: {DEFAULT_OUTPUT_PATH})."
        ),
    )
    output.add_argument(
        "--quality",
        type=_as_arg_type(positive_int),
        default=None,
        help=f"JPEG quality (default: {DEFAULT_JPEG_QUALITY}).",
    )
    output.add_argument(
        "--timeout",
        type=float,
        default=None,
        help=(
            "Shared deadline in seconds for remote sources "
            f"(default: {DEFAULT_TIMEOUT_SECONDS:g})."
        ),
    )
    output.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def _set_if_given(section: dict[str, Any], key: str, value: object) -> None:
    if value is not None:
        section[key] = value


def build_config(args: argparse.Namespace) -> MergeConfig:
    """
    Map parsed arguments onto a MergeConfig.

    With ``--config`` the file is loaded first and any explicitly given
    flags override its values; otherwise positional sources become the
    cells.
    """
    if args.config is not None:
        data = ConfigLoader.load(args.config).model_dump()
    else:
        data = {"cells": [{"source": s} for s in args.sources]}

    grid = data.setdefault("grid", {})
    _set_if_given(grid, "columns", args.columns)
    _set_if_given(grid, "rows", args.rows)
    _set_if_given(grid, "base_dir", args.base_dir)
    if args.grid_size is not None:
        grid["cell_size"] = args.grid_size
        grid["size_from"] = None
    if args.size_from is not None:
        grid["size_from"] = args.size_from
        grid["cell_size"] = None

    _set_if_given(data.setdefault("output", {}), "path", args.out)
    _set_if_given(data["output"], "quality", args.quality)
    _set_if_given(data.setdefault("remote", {}), "timeout_seconds",
                  args.timeout)
    return MergeConfig.model_validate(data)


def run(config: MergeConfig) -> Path:
    """
    Merge the configured job and save the result.

    An output path naming an existing directory receives a
    ``merged_<C>x<R>.jpg`` file inside it.
    """
    job = config.to_job()
    canvas = merge(job, timeout=config.remote.timeout_seconds)
    out_path = Path(config.output.path)
    if out_path.is_dir():
        out_path = default_output_name(job.columns, job.rows, out_path)
    saved = save_canvas(canvas, out_path, quality=config.output.quality)
    try:
        ratio = estimate_ratio(canvas.width, canvas.height)
    except ValueError:
        ratio = "irregular"
    logger.info(
        "Merged %d image(s) into %dx%d (%s) saved to: %s",
        len(job.grids), canvas.width, canvas.height, ratio, saved,
    )
    return saved


def main(argv: Sequence[str] | None = None) -> int:
    """Parse command-line arguments and merge the images."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None and args.sources:
        parser.error("positional sources cannot be combined with --config")
    if args.config is None and not args.sources:
        parser.error("either sources or --config is required")

    if args.verbose:
        setup_logger("image_merge", level=logging.DEBUG)

    try:
        config = build_config(args)
    except (FileNotFoundError, ValidationError) as exc:
        parser.error(str(exc))

    try:
        run(config)
    except MergeError as exc:
        logger.error("Merge failed: %s", exc)  # noqa: TRY400
        return 1

    return 0


__all__ = [
    "build_config",
    "build_parser",
    "main",
    "non_negative_int",
    "positive_int",
    "run",
    "size_2d",
]
