"""
Logging setup for nanogen.

Nothing is configured at import time: an application embedding nanogen gets
no output from the "nanogen" logger tree until it calls set_verbosity or
configure_logging (the CLI and the web UI both do, on startup).

Verbosity levels:
    0  INFO. One line per request (model, mode, aspect ratio) and its timing.
    1  INFO, plus the prompt text.
    2  DEBUG, plus request URLs, status codes, state machine steps and the
       Gemini request/response payloads with image data truncated.

Payload logging can also be switched on alone with NANOGEN_DEBUG_API
(Config.debug_api); see wants_payload_log(). The API key is never logged.
"""

import logging
import os

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "nanogen"
VERBOSITY_ENV = "NANOGEN_VERBOSITY"
MAX_VERBOSITY = 2

_log_prompts = False
_log_payloads = False


def _root() -> logging.Logger:
    """Return the nanogen logger, attaching a stderr handler on first use."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root


def set_verbosity(level: int) -> None:
    """Apply verbosity 0, 1 or 2 (values outside the range are clamped)."""
    global _log_prompts, _log_payloads
    level = max(0, min(level, MAX_VERBOSITY))
    _root().setLevel(logging.DEBUG if level == MAX_VERBOSITY else logging.INFO)
    _log_prompts = level >= 1
    _log_payloads = level >= MAX_VERBOSITY


def configure_logging(verbose_level: int = 0, quiet: bool = False) -> None:
    """
    Configure logging for the CLI or the web UI.

    quiet wins over verbose_level: only warnings and errors are emitted, and
    neither prompts nor payloads are logged.
    """
    global _log_prompts, _log_payloads
    if quiet:
        _root().setLevel(logging.WARNING)
        _log_prompts = False
        _log_payloads = False
        return
    set_verbosity(verbose_level)


def log_prompts() -> bool:
    """True when prompt text may be logged (verbosity 1 or 2)."""
    return _log_prompts


def wants_payload_log(debug_api: bool = False) -> bool:
    """
    True when Gemini request/response payloads should be logged.

    That is the case at verbosity 2, or when debug_api is set and the nanogen
    logger still emits INFO records (so --quiet silences it too).
    """
    if _log_payloads:
        return True
    return debug_api and logging.getLogger(ROOT_LOGGER_NAME).isEnabledFor(logging.INFO)


def get_verbosity_from_env() -> int:
    """NANOGEN_VERBOSITY as 0, 1 or 2; anything else counts as 0."""
    raw = os.environ.get(VERBOSITY_ENV, "").strip()
    return int(raw) if raw in ("1", "2") else 0


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the nanogen tree ("core.adapter" -> "nanogen.core.adapter")."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "configure_logging",
    "get_logger",
    "get_verbosity_from_env",
    "log_prompts",
    "set_verbosity",
    "wants_payload_log",
]
