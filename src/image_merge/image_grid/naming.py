"""Path and persistence helpers for merged canvases."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from image_merge.config_defaults import DEFAULT_JPEG_QUALITY
from image_merge.constants import (
    COLOR_BLACK,
    COLOR_MODE_RGB,
    COLOR_MODE_RGBA,
    JPEG_QUALITY_MAX,
    JPEG_QUALITY_MIN,
)
from image_merge.image_grid.core import to_rgba_color
from image_merge.image_io import uses_jpeg_decoder

if TYPE_CHECKING:  # pragma: no cover
    from image_merge.type_defs import Color


def flatten(
    canvas: Image.Image,
    bg_color: Color = COLOR_BLACK,
) -> Image.Image:
    """Composite an RGBA canvas over a solid color and return RGB."""
    bg = Image.new(COLOR_MODE_RGBA, canvas.size, to_rgba_color(bg_color))
    comp = Image.alpha_composite(bg, canvas.convert(COLOR_MODE_RGBA))
    return comp.convert(COLOR_MODE_RGB)


def save_canvas(
    canvas: Image.Image,
    out_path: Path,
    *,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> Path:
    """
    Encode ``canvas`` by file suffix and write it to ``out_path``.

    ``.jpg`` and ``.jpeg`` are written as JPEG at ``quality`` with
    transparency flattened onto black; every other suffix is PNG.
    """
    if not isinstance(out_path, Path):
        msg = "out_path must be a pathlib.Path"
        raise TypeError(msg)
    if not JPEG_QUALITY_MIN <= quality <= JPEG_QUALITY_MAX:
        msg = (f"JPEG quality must be between {JPEG_QUALITY_MIN} and "
               f"{JPEG_QUALITY_MAX}, got {quality}")
        raise ValueError(msg)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    if uses_jpeg_decoder(out_path.name.lower()):
        flatten(canvas).save(out_path, format="JPEG", quality=quality)
    else:
        canvas.save(out_path, format="PNG")
    return out_path


def default_output_name(columns: int, rows: int, out_dir: Path) -> Path:
    """Build a deterministic filename for a merged canvas."""
    return out_dir / f"merged_{columns}x{rows}.jpg"
