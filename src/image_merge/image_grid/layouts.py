"""Grid layout: cell sizing, cell placement, and canvas compositing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from image_merge.errors import GridIndexError
from image_merge.image_grid.core import (
    Rect,
    draw_over,
    draw_src,
    fill_rect,
    new_canvas,
)
from image_merge.job import DefaultSize, FixedSize, FromNthImage
from image_merge.logging_utils import logger
from image_merge.sources import read_grid_image

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Sequence

    from PIL import Image

    from image_merge.job import Grid, MergeJob, Overlay, SizingPolicy
    from image_merge.type_defs import Size

    OverlayReader = Callable[[Overlay, str], Image.Image]


def cell_size(
    images: Sequence[Image.Image],
    policy: SizingPolicy,
) -> Size:
    """
    Return the pixel size shared by every cell.

    Raises:
        GridIndexError: If the policy names an image that was not
            resolved, or there are no images to take a size from.

    """
    match policy:
        case FixedSize(width=w, height=h):
            return w, h
        case FromNthImage(index=idx):
            if idx >= len(images):
                raise GridIndexError(idx, len(images))
            return images[idx].size
        case DefaultSize():
            if not images:
                raise GridIndexError(0, 0)
            return images[0].size
    msg = f"Unknown sizing policy: {policy!r}"
    raise TypeError(msg)


def cell_rect(index: int, columns: int, size: Size) -> Rect:
    """Return the rectangle of cell ``index`` in row-major order."""
    cell_w, cell_h = size
    col = index % columns
    row = index // columns
    x0 = col * cell_w
    y0 = row * cell_h
    return Rect(x0, y0, x0 + cell_w, y0 + cell_h)


def draw_cell(
    canvas: Image.Image,
    grid: Grid,
    image: Image.Image,
    rect: Rect,
) -> None:
    """
    Draw one cell's base image.

    With a background color the cell is flat-filled first and the image
    is blended over it; otherwise the image is copied as is, leaving any
    uncovered part of the cell transparent.
    """
    if grid.background_color is not None:
        fill_rect(canvas, rect, grid.background_color)
        draw_over(canvas, image, rect)
    else:
        draw_src(canvas, image, rect)


def composite(
    images: Sequence[Image.Image],
    job: MergeJob,
    *,
    read_overlay: OverlayReader = read_grid_image,
) -> Image.Image:
    """
    Compose resolved images into a single canvas.

    ``images[i]`` is drawn into the cell of ``job.grids[i]``. Each
    cell's overlays are read (always from the local filesystem or their
    attached image) and blended at the cell rectangle shifted by their
    offset. Cells beyond ``columns * rows`` fall below the canvas and are
    clipped away, but their overlays are still read, so a missing overlay
    fails the merge and a negative offset can bring one into view.

    Raises:
        GridIndexError: If the sizing policy names a missing image.
        MergeError: If an overlay image cannot be read.

    """
    size = cell_size(images, job.sizing)
    canvas_size = (job.columns * size[0], job.rows * size[1])
    logger.debug(
        "Compositing %d cell(s) of %dx%d onto %dx%d canvas",
        len(job.grids),
        size[0],
        size[1],
        canvas_size[0],
        canvas_size[1],
    )
    if len(job.grids) > job.capacity:
        logger.debug(
            "%d cell(s) fall outside the %dx%d grid",
            len(job.grids) - job.capacity,
            job.columns,
            job.rows,
        )
    canvas = new_canvas(canvas_size)

    for i, (grid, image) in enumerate(zip(job.grids, images, strict=False)):
        rect = cell_rect(i, job.columns, size)
        draw_cell(canvas, grid, image, rect)

        for overlay in grid.overlays:
            overlay_img = read_overlay(overlay, job.base_dir)
            draw_over(
                canvas,
                overlay_img,
                rect.translate(overlay.offset_x, overlay.offset_y),
            )

    return canvas
