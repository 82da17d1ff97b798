"""
nanogen - Generate and edit images with the Gemini image model.

A small library plus a Gradio web UI: type a prompt, optionally attach a
reference image to edit, pick an aspect ratio, and get back an image.

Library usage:
- generate_or_edit(prompt, source_image, aspect_ratio) returns a data URI.
- Session / reduce model the submission lifecycle (idle, loading, success, error).
- Configuration can be passed per call (config=...) or shared via get_config() / set_config().
- Logging: set_verbosity(0|1|2) or configure_logging(verbose_level, quiet);
  NANOGEN_VERBOSITY env (0/1/2) is read when the CLI or UI runs.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("nanogen")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source in development)
    __version__ = "0.0.0.dev"

from nanogen.core.adapter import generate_or_edit
from nanogen.core.config import DEFAULT_MODEL, Config, get_config, set_config
from nanogen.core.images import (
    clean_base64,
    download_filename,
    load_source_image,
    save_result,
)
from nanogen.core.session import Session, exception_to_message, submit_stream
from nanogen.core.state import Snapshot, SubmissionStatus, reduce
from nanogen.core.types import AspectRatio, GenerationResult
from nanogen.logging_config import configure_logging, set_verbosity
from nanogen.utils.exceptions import (
    ConfigurationError,
    EmptyResultError,
    NanogenError,
    ProviderRefusalError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)

__all__ = [
    "AspectRatio",
    "clean_base64",
    "Config",
    "ConfigurationError",
    "configure_logging",
    "DEFAULT_MODEL",
    "download_filename",
    "EmptyResultError",
    "exception_to_message",
    "generate_or_edit",
    "GenerationResult",
    "get_config",
    "load_source_image",
    "NanogenError",
    "ProviderRefusalError",
    "reduce",
    "RequestTimeoutError",
    "save_result",
    "Session",
    "set_config",
    "set_verbosity",
    "Snapshot",
    "SubmissionStatus",
    "submit_stream",
    "TransportError",
    "ValidationError",
]
