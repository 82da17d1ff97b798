"""
Gemini image model transport.

Handles HTTP communication with the Gemini generateContent REST endpoint.
"""

import json
import time
from typing import Any

import requests

from nanogen.core.config import Config
from nanogen.logging_config import get_logger, wants_payload_log
from nanogen.utils.exceptions import RequestTimeoutError, TransportError

logger = get_logger(__name__)

_DEBUG_TRUNCATE_THRESHOLD = 200
_DEBUG_NEVER_TRUNCATE_KEYS = frozenset({"text", "message"})


def _truncate_image_data_for_log(obj: Any, parent_key: str | None = None) -> Any:
    """Recursively replace long base64 strings with placeholders for safe logging."""
    if isinstance(obj, dict):
        return {k: _truncate_image_data_for_log(v, k) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_truncate_image_data_for_log(v, None) for v in obj]
    if isinstance(obj, str) and len(obj) >= _DEBUG_TRUNCATE_THRESHOLD:
        if parent_key in _DEBUG_NEVER_TRUNCATE_KEYS:
            return obj
        return f"<string, {len(obj)} chars>"
    return obj


def _error_message_from_body(response: requests.Response) -> str:
    """Return error.message from a Gemini JSON error body, or '' if there is none."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or "")
    return ""


class GeminiTransport:
    """Transport for the Gemini generateContent API."""

    def build_url(self, config: Config) -> str:
        return f"{config.base_url.rstrip('/')}/models/{config.model}:generateContent"

    def build_body(
        self, parts: list[dict[str, Any]], generation_config: dict[str, Any]
    ) -> dict[str, Any]:
        """Build the generateContent request body."""
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                **generation_config,
            },
        }

    def _check_status(self, response: requests.Response, model: str) -> None:
        """Map non-2xx status codes to TransportError with the best available message."""
        status = response.status_code
        if 200 <= status < 300:
            return
        detail = _error_message_from_body(response)
        if detail:
            message = detail
        elif status in (401, 403):
            message = "Authentication failed. Please check your API key."
        elif status == 404:
            message = f"Model not found or endpoint unavailable: {model}"
        elif status == 429:
            message = "Rate limit exceeded. Please wait before making more requests."
        elif status >= 500:
            message = f"Gemini service error: {status}"
        else:
            message = f"API request failed with status {status}"
        raise TransportError(message, status_code=status, response=response.text)

    def send(
        self,
        parts: list[dict[str, Any]],
        generation_config: dict[str, Any],
        config: Config,
    ) -> dict[str, Any]:
        """POST one generateContent request and return the decoded JSON body."""
        url = self.build_url(config)
        headers = {
            "x-goog-api-key": config.api_key,
            "Content-Type": "application/json",
        }
        body = self.build_body(parts, generation_config)
        timeout = config.generation_timeout

        logger.debug("API request url=%s timeout=%s parts=%d", url, timeout, len(parts))
        if wants_payload_log(config.debug_api):
            logger.info(
                "API request payload (image data truncated): %s",
                json.dumps(_truncate_image_data_for_log(body), indent=2, default=str),
            )

        start_time = time.time()
        try:
            response = requests.post(url, headers=headers, json=body, timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(
                f"Request timed out after {timeout} seconds.", original_error=e
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(
                "Failed to connect to the Gemini API. Please check your internet connection.",
                original_error=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Network error during API request: {str(e)}", original_error=e
            ) from e
        elapsed = time.time() - start_time
        logger.debug("API response status=%s time=%.2fs", response.status_code, elapsed)

        self._check_status(response, config.model)

        try:
            result = response.json()
        except ValueError as e:
            raise TransportError(
                f"Failed to parse API response as JSON: {str(e)}",
                status_code=response.status_code,
                response=response.text,
                original_error=e,
            ) from e
        if not isinstance(result, dict):
            raise TransportError(
                "Unexpected API response format.",
                status_code=response.status_code,
                response=response.text,
            )

        if wants_payload_log(config.debug_api):
            logger.info(
                "API response (image data truncated): %s",
                json.dumps(_truncate_image_data_for_log(result), indent=2, default=str),
            )
        return result
