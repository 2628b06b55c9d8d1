"""
Acquisition of grid images from memory, local files, or HTTP.

Local mode reads cells one after another and stops at the first
failure. Remote mode fetches every cell concurrently under one shared
deadline and fails as a whole on the first failure it observes.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import (
    FIRST_EXCEPTION,
    Future,
    ThreadPoolExecutor,
    wait,
)
from pathlib import Path
from typing import TYPE_CHECKING

import requests

from image_merge.constants import HTTP_CHUNK_SIZE, REMOTE_TIMEOUT_SECONDS
from image_merge.errors import HTTPStatusError, TransportError
from image_merge.image_io import decode_bytes, read_image_file
from image_merge.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from PIL import Image

    from image_merge.job import Grid, MergeJob, Overlay
    from image_merge.type_defs import Fetcher

_SUCCESS_CLASS = 2  # 2xx


def http_get(
    url: str,
    *,
    timeout: float,
    cancelled: threading.Event,
) -> tuple[int, bytes]:
    """
    Fetch ``url`` with requests and return its status and full body.

    The body is streamed in chunks; reading stops early once
    ``cancelled`` is set, in which case the partial body is discarded by
    raising TransportError.
    """
    try:
        with requests.get(url, timeout=timeout, stream=True) as rsp:
            chunks: list[bytes] = []
            for chunk in rsp.iter_content(chunk_size=HTTP_CHUNK_SIZE):
                if cancelled.is_set():
                    raise TransportError(url, "cancelled")
                chunks.append(chunk)
            return rsp.status_code, b"".join(chunks)
    except requests.RequestException as e:
        raise TransportError(url, str(e)) from e


def local_path(base_dir: str, locator: str) -> str:
    """Prepend ``base_dir`` to ``locator``, even when it is absolute."""
    if not base_dir:
        return locator
    return str(Path(base_dir) / locator.lstrip("/\\"))


def read_grid_image(grid: Grid | Overlay, base_dir: str) -> Image.Image:
    """Return the attached image or read it from the local filesystem."""
    if grid.image is not None:
        return grid.image
    return read_image_file(local_path(base_dir, grid.path))


def resolve_local(job: MergeJob) -> list[Image.Image]:
    """Resolve every top-level cell sequentially, failing fast."""
    return [read_grid_image(grid, job.base_dir) for grid in job.grids]


def _fetch_one(
    url: str,
    fetch: Fetcher,
    deadline: float,
    cancelled: threading.Event,
) -> Image.Image:
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise TransportError(url, "deadline exceeded")
    status_code, body = fetch(url, timeout=remaining, cancelled=cancelled)
    if status_code // 100 != _SUCCESS_CLASS:
        raise HTTPStatusError(url, status_code, body)
    return decode_bytes(body, url)


def resolve_remote(
    grids: Sequence[Grid],
    *,
    fetch: Fetcher = http_get,
    timeout: float = REMOTE_TIMEOUT_SECONDS,
) -> list[Image.Image]:
    """
    Fetch and decode every cell concurrently.

    Results land in the slot matching each cell's position, so the
    returned list follows input order regardless of completion order.
    Cells with an attached image are not fetched. The first failure
    observed (or the deadline expiring) sets the shared cancellation
    event, cancels pending fetches, and is raised; partial results are
    dropped.
    """
    images: list[Image.Image | None] = [grid.image for grid in grids]
    pending = [i for i, img in enumerate(images) if img is None]
    if not pending:
        return images  # type: ignore[return-value]

    lock = threading.Lock()
    cancelled = threading.Event()
    deadline = time.monotonic() + timeout

    def task(idx: int) -> None:
        img = _fetch_one(grids[idx].path, fetch, deadline, cancelled)
        with lock:
            images[idx] = img

    logger.debug("Fetching %d remote image(s)", len(pending))
    pool = ThreadPoolExecutor(
        max_workers=len(pending),
        thread_name_prefix="image-merge-fetch",
    )
    futures: dict[Future[None], int] = {
        pool.submit(task, idx): idx for idx in pending
    }
    try:
        done, not_done = wait(
            futures,
            timeout=timeout,
            return_when=FIRST_EXCEPTION,
        )
        for future in done:
            exc = future.exception()
            if exc is not None:
                raise exc
        if not_done:
            url = grids[futures[next(iter(not_done))]].path
            raise TransportError(url, f"timed out after {timeout:g}s")
    finally:
        cancelled.set()
        pool.shutdown(wait=False, cancel_futures=True)

    return images  # type: ignore[return-value]
