"""
Magic-byte format detection for encoded image data.

Detection only inspects a short prefix and never decodes; it is used to
route remote bodies to the right decoder.
"""

from __future__ import annotations

from enum import Enum

_SQUARE_TOLERANCE_PX = 2
_RATIO_TOLERANCE = 0.1
_RATIO_4_3 = 4 / 3
_RATIO_16_9 = 16 / 9

_BMP_MIN_LEN = 2
_PREFIX_MIN_LEN = 4
_WEBP_MIN_LEN = 12


class ImageFormat(Enum):
    """Container formats recognizable from their leading bytes."""

    UNKNOWN = ""
    BMP = ".bmp"
    JPEG = ".jpg"
    GIF = ".gif"
    PNG = ".png"
    WEBP = ".webp"

    @property
    def ext(self) -> str:
        """File extension including the dot, empty when unknown."""
        return self.value


def is_bmp(data: bytes) -> bool:
    """Return True when data starts with the BMP signature."""
    if len(data) < _BMP_MIN_LEN:
        return False
    return data[:2] == b"\x42\x4d"


def is_jpeg(data: bytes) -> bool:
    """Return True when data starts with a JPEG SOI marker."""
    if len(data) < _PREFIX_MIN_LEN:
        return False
    return data[:3] == b"\xff\xd8\xff"


def is_gif(data: bytes) -> bool:
    """Return True when data starts with ``GIF8``."""
    if len(data) < _PREFIX_MIN_LEN:
        return False
    return data[:4] == b"GIF8"


def is_png(data: bytes) -> bool:
    """Return True when data starts with the PNG signature."""
    if len(data) < _PREFIX_MIN_LEN:
        return False
    return data[:4] == b"\x89PNG"


def is_webp(data: bytes) -> bool:
    """Return True when bytes 8..12 read ``WEBP``."""
    if len(data) < _WEBP_MIN_LEN:
        return False
    return data[8:12] == b"WEBP"


# Checked in this order; the first match wins.
_DETECTORS = (
    (ImageFormat.BMP, is_bmp),
    (ImageFormat.JPEG, is_jpeg),
    (ImageFormat.GIF, is_gif),
    (ImageFormat.PNG, is_png),
    (ImageFormat.WEBP, is_webp),
)


def identify(data: bytes) -> ImageFormat:
    """Identify the container format of ``data`` by its magic bytes."""
    for fmt, detector in _DETECTORS:
        if detector(data):
            return fmt
    return ImageFormat.UNKNOWN


def _near(ratio: float, target: float) -> bool:
    return abs(ratio - target) <= _RATIO_TOLERANCE


def estimate_ratio(width: float, height: float) -> str:
    """
    Estimate a common aspect ratio label for the given dimensions.

    Sides within 2 px of each other count as square. Otherwise the long
    to short ratio is compared against 4:3 and then 16:9 with a 0.1
    tolerance.

    Raises:
        ValueError: If the dimensions match none of the known ratios.

    """
    if width <= 0 or height <= 0:
        msg = "width and height must be positive"
        raise ValueError(msg)
    if abs(width - height) < _SQUARE_TOLERANCE_PX:
        return "1:1"

    landscape = width > height
    ratio = width / height if landscape else height / width
    if _near(ratio, _RATIO_4_3):
        return "4:3" if landscape else "3:4"
    if _near(ratio, _RATIO_16_9):
        return "16:9" if landscape else "9:16"

    msg = "unsupported aspect ratio"
    raise ValueError(msg)
