"""
Failure types raised by the merge pipeline.

Every failure is fatal to the enclosing ``merge`` call. Each exception
carries the source identifier and, where one exists, the underlying
cause (chained via ``raise ... from``) so callers can diagnose without
re-running.
"""

from __future__ import annotations


class MergeError(Exception):
    """Base class for every failure surfaced by ``merge``."""


class TransportError(MergeError):
    """Connection, DNS, or deadline failure while fetching a URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"failed to download image {url}: {reason}")


class HTTPStatusError(MergeError):
    """Remote server answered with a status outside the 2xx class."""

    def __init__(self, url: str, status_code: int, body: bytes) -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        text = body.decode("utf-8", errors="replace")
        super().__init__(
            f"status code {status_code} != 2xx for {url}: {text}",
        )


class DecodeError(MergeError):
    """Bytes could not be decoded as the expected image format."""

    def __init__(self, source: str, fmt: str, reason: str) -> None:
        self.source = source
        self.format = fmt
        super().__init__(f"failed to decode {fmt} image {source}: {reason}")


class UnsupportedFormatError(MergeError):
    """Sniffed format is not one the decode path handles."""

    def __init__(self, source: str, detected: str, expected: str) -> None:
        self.source = source
        self.detected = detected
        super().__init__(
            f"unsupported format of image {source} ({detected}), "
            f"expected {expected}",
        )


class FilesystemError(MergeError, OSError):
    """A local image could not be opened or read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"failed to read image file '{path}': {reason}")


class EmptyInputError(MergeError, ValueError):
    """Resolution produced no images."""

    def __init__(self) -> None:
        super().__init__("there is no image to merge")


class GridIndexError(MergeError, IndexError):
    """Sizing policy references an image that was not resolved."""

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(
            f"grid size image index {index} out of range "
            f"for {count} resolved image(s)",
        )
