"""Public package exports for the image merger."""

from __future__ import annotations

from .errors import (
    DecodeError,
    EmptyInputError,
    FilesystemError,
    GridIndexError,
    HTTPStatusError,
    MergeError,
    TransportError,
    UnsupportedFormatError,
)
from .job import (
    DefaultSize,
    FixedSize,
    FromNthImage,
    Grid,
    MergeJob,
    Overlay,
    SizingPolicy,
)
from .merge import merge

__all__ = [
    "DecodeError",
    "DefaultSize",
    "EmptyInputError",
    "FilesystemError",
    "FixedSize",
    "FromNthImage",
    "Grid",
    "GridIndexError",
    "HTTPStatusError",
    "MergeError",
    "MergeJob",
    "Overlay",
    "SizingPolicy",
    "TransportError",
    "UnsupportedFormatError",
    "merge",
]
