"""
Logger setup shared by the merge core and the command line.

Remote fetches run on worker threads, so the default format names the
thread that emitted each record.
"""

import logging

DEFAULT_LOG_FORMAT = (
    "%(asctime)s [%(levelname)s] %(threadName)s: %(message)s"
)


def setup_logger(
        name: str = "image_merge",
        level: int = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Return the named logger with a single stream handler attached.

    Only the first call for a name installs a handler and turns off
    propagation; later calls, such as ``--verbose`` switching the CLI to
    DEBUG, only change the level.

    Args:
        name: Logger name.
        level: Threshold applied on every call.
        formatter: Formatter for a newly installed handler.
        handler: Handler to install instead of stderr.

    Returns:
        The configured logger.

    """
    merge_logger = logging.getLogger(name)
    merge_logger.setLevel(level)
    if not merge_logger.handlers:
        target = handler if handler is not None else logging.StreamHandler()
        target.setFormatter(
            formatter or logging.Formatter(DEFAULT_LOG_FORMAT),
        )
        merge_logger.addHandler(target)
        merge_logger.propagate = False
    return merge_logger


logger = setup_logger()
