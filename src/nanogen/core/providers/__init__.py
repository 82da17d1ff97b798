"""
Image model transports: protocol and the built-in Gemini implementation.
"""

from nanogen.core.providers.base import ImageTransport as ImageTransport
from nanogen.core.providers.gemini import GeminiTransport

_default_transport: ImageTransport | None = None


def get_transport() -> ImageTransport:
    """Return the process-wide default transport (Gemini REST)."""
    global _default_transport
    if _default_transport is None:
        _default_transport = GeminiTransport()
    return _default_transport


def set_transport(transport: ImageTransport | None) -> None:
    """Replace the default transport; None restores the Gemini transport on next use."""
    global _default_transport
    _default_transport = transport


__all__ = ["GeminiTransport", "ImageTransport", "get_transport", "set_transport"]
