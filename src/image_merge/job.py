"""
Merge job description: grid cells, overlays, and sizing policies.

A ``MergeJob`` is an immutable value. The ``with_*`` methods return a
modified copy, so options can be applied in any order and a job can be
merged more than once.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from PIL import ImageColor

from image_merge.constants import REMOTE_PREFIX

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable

    from PIL import Image

    from image_merge.type_defs import Color


@dataclass(frozen=True)
class DefaultSize:
    """Every cell takes the size of the first resolved image."""


@dataclass(frozen=True)
class FixedSize:
    """Every cell is exactly ``width`` x ``height`` pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = (f"Grid size must be positive, "
                   f"got {self.width}x{self.height}")
            raise ValueError(msg)


@dataclass(frozen=True)
class FromNthImage:
    """Every cell takes the size of the resolved image at ``index``."""

    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            msg = f"Image index must be non-negative, got {self.index}"
            raise ValueError(msg)


SizingPolicy = DefaultSize | FixedSize | FromNthImage

_COLOR_LENGTHS = (3, 4)
_CHANNEL_MAX = 255


def check_color(color: Color) -> None:
    """
    Reject background colors that cannot be painted.

    Strings must be Pillow color specifiers (``"white"``, ``"#ff000080"``);
    tuples need 3 or 4 channels within 0..255.

    Raises:
        ValueError: If the color is not usable.

    """
    if isinstance(color, str):
        try:
            ImageColor.getrgb(color)
        except ValueError as exc:
            msg = f"Unknown background color: {color!r}"
            raise ValueError(msg) from exc
        return
    if len(color) not in _COLOR_LENGTHS:
        msg = f"Background color needs 3 or 4 channels, got {color!r}"
        raise ValueError(msg)
    if any(not 0 <= c <= _CHANNEL_MAX for c in color):
        msg = f"Background channels must be within 0..255, got {color!r}"
        raise ValueError(msg)


@dataclass(frozen=True)
class Overlay:
    """
    Image drawn on top of a cell, offset from the cell's top left.

    ``image`` takes precedence over ``path``. Overlays are always read
    from the local filesystem, relative to the job's base directory.
    """

    path: str = ""
    offset_x: int = 0
    offset_y: int = 0
    image: Image.Image | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Grid:
    """
    One top-level cell of the merged canvas.

    ``path`` is a local path or an http(s) URL; ``image`` takes
    precedence when set. ``background_color`` is flat-filled under the
    image, which is then alpha blended instead of copied. ``overlays``
    are drawn after the cell image, in order.
    """

    path: str = ""
    background_color: Color | None = None
    overlays: tuple[Overlay, ...] = ()
    image: Image.Image | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.background_color is not None:
            check_color(self.background_color)

    @property
    def is_remote(self) -> bool:
        """True when the locator is an http or https URL."""
        return self.path.startswith(REMOTE_PREFIX)


@dataclass(frozen=True)
class MergeJob:
    """Ordered cells plus the grid shape and sizing policy."""

    grids: tuple[Grid, ...]
    columns: int
    rows: int
    base_dir: str = ""
    sizing: SizingPolicy = field(default_factory=DefaultSize)

    def __post_init__(self) -> None:
        if self.columns <= 0 or self.rows <= 0:
            msg = (f"Grid shape must be positive, "
                   f"got {self.columns}x{self.rows}")
            raise ValueError(msg)
        # Accept any iterable of grids but store a tuple
        object.__setattr__(self, "grids", tuple(self.grids))

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str],
        columns: int,
        rows: int,
    ) -> MergeJob:
        """Build a job with one plain cell per local path or URL."""
        return cls(tuple(Grid(path=p) for p in paths), columns, rows)

    @classmethod
    def from_urls(
        cls,
        urls: Iterable[str],
        columns: int,
        rows: int,
    ) -> MergeJob:
        """Build a job whose cells are all fetched over HTTP."""
        return cls.from_paths(urls, columns, rows)

    @property
    def capacity(self) -> int:
        """Number of cells the canvas holds."""
        return self.columns * self.rows

    def with_base_dir(self, base_dir: str) -> MergeJob:
        """Return a copy reading local paths relative to ``base_dir``."""
        return replace(self, base_dir=base_dir)

    def with_grid_size(self, width: int, height: int) -> MergeJob:
        """Return a copy with a fixed cell size."""
        return replace(self, sizing=FixedSize(width, height))

    def with_grid_size_from_nth(self, index: int) -> MergeJob:
        """Return a copy sizing cells after the image at ``index``."""
        return replace(self, sizing=FromNthImage(index))

    def with_sizing(self, sizing: SizingPolicy) -> MergeJob:
        """Return a copy with an explicit sizing policy."""
        return replace(self, sizing=sizing)

    def uses_remote(self) -> bool:
        """True when any top-level cell points at an http(s) URL."""
        return any(grid.is_remote for grid in self.grids)
