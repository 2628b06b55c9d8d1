"""
Test configuration and shared fixtures for image_merge.

This module defines reusable pytest fixtures for building solid color
images, writing them to disk, and encoding them to bytes for fake
remote fetches.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
import io
import threading
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from image_merge.logging_utils import logger

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
YELLOW = (255, 255, 0, 255)
TRANSPARENT = (0, 0, 0, 0)


def solid(
    color: tuple[int, ...],
    size: tuple[int, int] = (10, 10),
) -> Image.Image:
    """Create a solid RGBA image."""
    return Image.new("RGBA", size, color)


def encode(img: Image.Image, fmt: str = "PNG") -> bytes:
    """Encode an image to bytes in the given Pillow format."""
    buf = io.BytesIO()
    if fmt == "JPEG":
        img = img.convert("RGB")
    img.save(buf, format=fmt)
    return buf.getvalue()


class FakeFetcher:
    """Records calls and serves canned (status, body) responses."""

    def __init__(self, responses: dict[str, tuple[int, bytes]]) -> None:
        self.responses = responses
        self.calls: list[str] = []
        self.events: list[threading.Event] = []
        self._lock = threading.Lock()

    def __call__(
        self,
        url: str,
        *,
        timeout: float,  # noqa: ARG002
        cancelled: threading.Event,
    ) -> tuple[int, bytes]:
        with self._lock:
            self.calls.append(url)
            self.events.append(cancelled)
        return self.responses[url]


@pytest.fixture
def make_image_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a solid color image under tmp_path."""

    def _make(
        name: str,
        color: tuple[int, ...] = RED,
        size: tuple[int, int] = (10, 10),
        fmt: str = "PNG",
    ) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode(solid(color, size), fmt))
        return path

    return _make


@pytest.fixture
def quad_files(make_image_file: Callable[..., Path]) -> list[Path]:
    """Four 10x10 PNGs in red, green, blue, and yellow."""
    return [
        make_image_file("red.png", RED),
        make_image_file("green.png", GREEN),
        make_image_file("blue.png", BLUE),
        make_image_file("yellow.png", YELLOW),
    ]


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the merge logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)
