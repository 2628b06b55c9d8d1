"""
Constants used internally by the image merger.

These are implementation-level defaults that should not be overridden
via config files or CLI arguments.
"""

# Shared deadline for one batch of remote fetches
REMOTE_TIMEOUT_SECONDS = 60.0

# Streamed HTTP bodies are read in chunks so cancellation is noticed
HTTP_CHUNK_SIZE = 64 * 1024

# Locators starting with this prefix (covers https) switch to remote mode
REMOTE_PREFIX = "http"

# Canvas and decoded raster pixel format
COLOR_MODE_RGBA = "RGBA"
COLOR_MODE_RGB = "RGB"
COLOR_TRANSPARENT = (0, 0, 0, 0)
COLOR_BLACK = (0, 0, 0)

# Local files with one of these extensions use the JPEG decoder
JPEG_EXTENSIONS = ("jpg", "jpeg")

# Formats the decode path accepts for sniffed remote bytes
SUPPORTED_FORMATS_TEXT = "png or jpeg"

# JPEG encoding bounds for persisted results
JPEG_QUALITY_MIN = 1
JPEG_QUALITY_MAX = 95
