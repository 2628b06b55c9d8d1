"""
Defines shared type aliases for the image merger.

Centralizes reusable type hints to improve consistency and readability.
"""
from __future__ import annotations

import threading
from typing import Protocol

Color = tuple[int, int, int] | tuple[int, int, int, int] | str
Size = tuple[int, int]


class Fetcher(Protocol):
    """Transport collaborator used for remote grid sources."""

    def __call__(
        self,
        url: str,
        *,
        timeout: float,
        cancelled: threading.Event,
    ) -> tuple[int, bytes]:
        """Return the status code and full body for a GET of ``url``."""
        ...
