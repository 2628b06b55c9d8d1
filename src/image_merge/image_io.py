"""Image decoding for remote bodies and local files."""
from __future__ import annotations

import io
from pathlib import Path

from PIL import Image

from image_merge.constants import (
    COLOR_MODE_RGBA,
    JPEG_EXTENSIONS,
    SUPPORTED_FORMATS_TEXT,
)
from image_merge.errors import (
    DecodeError,
    FilesystemError,
    UnsupportedFormatError,
)
from image_merge.formats import ImageFormat, identify


def _decode(data: bytes, pil_format: str, source: str) -> Image.Image:
    """Decode ``data`` strictly as ``pil_format`` and return RGBA."""
    try:
        with Image.open(io.BytesIO(data), formats=[pil_format]) as img:
            img.load()
            return img.convert(COLOR_MODE_RGBA)
    except (OSError, ValueError) as e:
        raise DecodeError(source, pil_format.lower(), str(e)) from e


def decode_jpeg(data: bytes, source: str = "<bytes>") -> Image.Image:
    """Decode JPEG bytes into an RGBA raster."""
    return _decode(data, "JPEG", source)


def decode_png(data: bytes, source: str = "<bytes>") -> Image.Image:
    """Decode PNG bytes into an RGBA raster."""
    return _decode(data, "PNG", source)


def decode_bytes(data: bytes, source: str = "<bytes>") -> Image.Image:
    """
    Sniff the container format of ``data`` and decode it.

    Only PNG and JPEG are decoded. Any other detected format, or bytes
    that match no known signature, raise UnsupportedFormatError.
    """
    fmt = identify(data)
    if fmt is ImageFormat.PNG:
        return decode_png(data, source)
    if fmt is ImageFormat.JPEG:
        return decode_jpeg(data, source)
    raise UnsupportedFormatError(
        source,
        fmt.name.lower(),
        SUPPORTED_FORMATS_TEXT,
    )


def uses_jpeg_decoder(path: str) -> bool:
    """Return True when the text after the last dot names a JPEG file."""
    return path.rsplit(".", 1)[-1] in JPEG_EXTENSIONS


def read_image_file(path: str) -> Image.Image:
    """
    Read and decode a local image file.

    The decoder is picked from the path's extension rather than the
    file contents: ``jpg`` and ``jpeg`` use the JPEG decoder, anything
    else is decoded as PNG.

    Args:
        path: Path to the image file, relative to the working directory
            or absolute.

    Returns:
        Decoded RGBA image.

    Raises:
        FilesystemError: If the file cannot be opened or read.
        DecodeError: If the bytes are not valid for the chosen decoder.

    """
    abs_path = Path(path).absolute()
    try:
        data = abs_path.read_bytes()
    except OSError as e:
        raise FilesystemError(str(abs_path), e.strerror or str(e)) from e

    if uses_jpeg_decoder(path):
        return decode_jpeg(data, str(abs_path))
    return decode_png(data, str(abs_path))
