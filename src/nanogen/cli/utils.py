"""
Utility functions for the CLI: exit codes and default output paths.
"""

import time

from nanogen.core.images import download_filename

# Exit codes
EXIT_SUCCESS = 0
EXIT_PROVIDER_OR_NETWORK = 1
EXIT_VALIDATION_OR_CONFIG = 2


def default_output_path(timestamp_ms: int | None = None) -> str:
    """Return default output path: nanogen-<unix ms>.png in current directory."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return download_filename(timestamp_ms)


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_PROVIDER_OR_NETWORK",
    "EXIT_VALIDATION_OR_CONFIG",
    "default_output_path",
]
