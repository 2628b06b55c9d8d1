"""
Grid compositing split into drawing primitives, layout, and naming.

The most commonly used entry points are re-exported here.
"""

from __future__ import annotations

from . import core, layouts, naming
from .core import Rect, draw_over, draw_src, fill_rect, new_canvas
from .layouts import cell_rect, cell_size, composite
from .naming import default_output_name, flatten, save_canvas

__all__ = [
    "Rect",
    "cell_rect",
    "cell_size",
    "composite",
    "core",
    "default_output_name",
    "draw_over",
    "draw_src",
    "fill_rect",
    "flatten",
    "layouts",
    "naming",
    "new_canvas",
    "save_canvas",
]
