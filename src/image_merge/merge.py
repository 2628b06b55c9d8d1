"""
Merge entry point: pick an acquisition mode, resolve, then composite.

This is the only public operation of the core. Every failure is raised
as a MergeError subclass and no partial canvas is ever returned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from image_merge.constants import REMOTE_TIMEOUT_SECONDS
from image_merge.errors import EmptyInputError
from image_merge.image_grid.layouts import composite
from image_merge.logging_utils import logger
from image_merge.sources import http_get, resolve_local, resolve_remote

if TYPE_CHECKING:  # pragma: no cover
    from PIL import Image

    from image_merge.job import MergeJob
    from image_merge.type_defs import Fetcher


def resolve_images(
    job: MergeJob,
    *,
    fetch: Fetcher = http_get,
    timeout: float = REMOTE_TIMEOUT_SECONDS,
) -> list[Image.Image]:
    """Resolve the job's top-level cells in local or remote mode."""
    if job.uses_remote():
        logger.debug("Resolving %d cell(s) remotely", len(job.grids))
        return resolve_remote(job.grids, fetch=fetch, timeout=timeout)
    logger.debug("Resolving %d cell(s) locally", len(job.grids))
    return resolve_local(job)


def merge(
    job: MergeJob,
    *,
    fetch: Fetcher = http_get,
    timeout: float = REMOTE_TIMEOUT_SECONDS,
) -> Image.Image:
    """
    Read the job's images and merge them into one RGBA canvas.

    Remote mode is used when any top-level cell points at an http(s)
    URL; otherwise every cell is read from disk in order.

    Args:
        job: The merge job to run.
        fetch: Transport used in remote mode.
        timeout: Shared deadline in seconds for all remote fetches.

    Returns:
        The merged canvas, owned by the caller.

    Raises:
        EmptyInputError: If the job resolves to no images.
        MergeError: For any transport, status, decode, filesystem, or
            sizing failure.

    """
    images = resolve_images(job, fetch=fetch, timeout=timeout)
    if not images:
        raise EmptyInputError
    return composite(images, job)
