"""
Transport protocol for the image model.

Defines the narrow interface the request adapter depends on, so the adapter can
be exercised with a fake in tests.
"""

from typing import Any, Protocol

from nanogen.core.config import Config


class ImageTransport(Protocol):
    """Sends one multi-part request to the image model and returns the decoded JSON body."""

    def send(
        self,
        parts: list[dict[str, Any]],
        generation_config: dict[str, Any],
        config: Config,
    ) -> dict[str, Any]:
        """Send parts plus generation config; return the provider response.

        Must raise TransportError (or RequestTimeoutError) on any network,
        HTTP or decoding failure.
        """
        ...
