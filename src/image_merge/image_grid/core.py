"""Core drawing primitives for compositing images onto a grid canvas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image, ImageColor

from image_merge.constants import COLOR_MODE_RGBA, COLOR_TRANSPARENT

if TYPE_CHECKING:  # pragma: no cover
    from image_merge.type_defs import Color, Size

_RGB_LEN = 3


@dataclass(frozen=True)
class Rect:
    """Half-open pixel rectangle ``[x0, x1) x [y0, y1)``."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def w(self) -> int:
        """Width."""
        return self.x1 - self.x0

    @property
    def h(self) -> int:
        """Height."""
        return self.y1 - self.y0

    def size(self) -> tuple[int, int]:
        """Return (w, h)."""
        return self.w, self.h

    def box(self) -> tuple[int, int, int, int]:
        """Return the Pillow box tuple."""
        return self.x0, self.y0, self.x1, self.y1

    def is_empty(self) -> bool:
        """True when the rectangle covers no pixels."""
        return self.w <= 0 or self.h <= 0

    def translate(self, dx: int, dy: int) -> Rect:
        """Return a copy shifted by (dx, dy)."""
        return Rect(self.x0 + dx, self.y0 + dy, self.x1 + dx, self.y1 + dy)

    def intersect(self, other: Rect) -> Rect:
        """Return the overlap, which may be empty."""
        return Rect(
            max(self.x0, other.x0),
            max(self.y0, other.y0),
            min(self.x1, other.x1),
            min(self.y1, other.y1),
        )


def new_canvas(size: Size) -> Image.Image:
    """Allocate a fully transparent RGBA canvas."""
    return Image.new(COLOR_MODE_RGBA, size, COLOR_TRANSPARENT)


def to_rgba_color(color: Color) -> tuple[int, int, int, int]:
    """Normalize a tuple or Pillow color name to an RGBA tuple."""
    if isinstance(color, str):
        rgba = ImageColor.getcolor(color, COLOR_MODE_RGBA)
        return rgba  # type: ignore[return-value]
    if len(color) == _RGB_LEN:
        return (*color, 255)
    return color  # type: ignore[return-value]


def _canvas_rect(canvas: Image.Image) -> Rect:
    return Rect(0, 0, canvas.width, canvas.height)


def _clip(
    canvas: Image.Image,
    src: Image.Image,
    rect: Rect,
) -> tuple[Rect, Rect]:
    """
    Clip ``rect`` to the canvas and to the source placed at its origin.

    Returns the destination rectangle and the matching source crop.
    """
    src_area = Rect(
        rect.x0, rect.y0, rect.x0 + src.width, rect.y0 + src.height,
    )
    dst = rect.intersect(_canvas_rect(canvas)).intersect(src_area)
    crop = dst.translate(-rect.x0, -rect.y0)
    return dst, crop


def fill_rect(canvas: Image.Image, rect: Rect, color: Color) -> None:
    """Overwrite ``rect`` with a flat color."""
    dst = rect.intersect(_canvas_rect(canvas))
    if dst.is_empty():
        return
    canvas.paste(to_rgba_color(color), dst.box())


def draw_src(canvas: Image.Image, src: Image.Image, rect: Rect) -> None:
    """
    Copy ``src`` into ``rect`` without blending.

    Pixels outside the source, the rectangle, or the canvas are left
    untouched; the source is never scaled.
    """
    dst, crop = _clip(canvas, src, rect)
    if dst.is_empty():
        return
    region = src.crop(crop.box()).convert(COLOR_MODE_RGBA)
    canvas.paste(region, dst.box())


def draw_over(canvas: Image.Image, src: Image.Image, rect: Rect) -> None:
    """Alpha composite ``src`` over the canvas inside ``rect``."""
    dst, crop = _clip(canvas, src, rect)
    if dst.is_empty():
        return
    region = src.crop(crop.box()).convert(COLOR_MODE_RGBA)
    below = canvas.crop(dst.box())
    canvas.paste(Image.alpha_composite(below, region), dst.box())
