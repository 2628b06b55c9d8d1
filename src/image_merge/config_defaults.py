"""Shared default values for user-facing configuration settings."""
from image_merge.constants import REMOTE_TIMEOUT_SECONDS

# Grid
DEFAULT_COLUMNS = 2
DEFAULT_ROWS = 2

# Remote
DEFAULT_TIMEOUT_SECONDS = REMOTE_TIMEOUT_SECONDS

# Output
DEFAULT_OUTPUT_PATH = "merged.jpg"
DEFAULT_JPEG_QUALITY = 80
