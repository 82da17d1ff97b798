"""
Image generation and editing via the Gemini image model.

Builds the multi-part request (optional inline source image, then the prompt),
sends it once through a transport, and decodes the first inline image of the
response into a data URI.
"""

import time
from typing import Any

from nanogen.core.config import Config, get_config
from nanogen.core.images import (
    DEFAULT_MIME_TYPE,
    clean_base64,
    create_image_data_url,
    mime_type_from_data_url,
)
from nanogen.core.providers import ImageTransport, get_transport
from nanogen.core.types import DEFAULT_ASPECT_RATIO, AspectRatio
from nanogen.logging_config import get_logger, log_prompts
from nanogen.utils.exceptions import (
    EmptyResultError,
    NanogenError,
    ProviderRefusalError,
    TransportError,
)

logger = get_logger(__name__)

# Max prompt length for logging (large so prompts are effectively never truncated)
_PROMPT_LOG_MAX = 50_000

EMPTY_RESULT_MESSAGE = "No image was generated. Please try a different prompt."
TRANSPORT_FALLBACK_MESSAGE = "Failed to generate image."


def build_parts(prompt: str, source_image: str | None) -> list[dict[str, Any]]:
    """
    Build the ordered request parts: image part first (when given), then the prompt.

    The provider relies on this order.
    """
    parts: list[dict[str, Any]] = []
    if source_image:
        parts.append(
            {
                "inlineData": {
                    "mimeType": mime_type_from_data_url(source_image),
                    "data": clean_base64(source_image),
                }
            }
        )
    parts.append({"text": prompt})
    return parts


def build_generation_config(aspect_ratio: AspectRatio) -> dict[str, Any]:
    """Aspect ratio hint; always sent, even though the model may ignore it when editing."""
    return {"imageConfig": {"aspectRatio": AspectRatio.parse(aspect_ratio).value}}


def _first_candidate_parts(response: dict[str, Any]) -> list[dict[str, Any]]:
    candidates = response.get("candidates") or []
    if not candidates:
        return []
    content = candidates[0].get("content") or {}
    return content.get("parts") or []


def response_text(response: dict[str, Any]) -> str:
    """Concatenated text parts of the first candidate ('' if none)."""
    texts = [
        part["text"]
        for part in _first_candidate_parts(response)
        if isinstance(part.get("text"), str) and not part.get("thought")
    ]
    return "".join(texts)


def extract_image_data_url(response: dict[str, Any]) -> str:
    """
    Return the first inline image of the first candidate as a data URI.

    Later image parts and candidates are ignored.

    Raises:
        ProviderRefusalError: If there is no image but the model replied with text
        EmptyResultError: If there is neither an image nor text
    """
    for part in _first_candidate_parts(response):
        inline = part.get("inlineData") or part.get("inline_data")
        if inline and inline.get("data"):
            mime = inline.get("mimeType") or inline.get("mime_type") or DEFAULT_MIME_TYPE
            return create_image_data_url(inline["data"], mime)

    text = response_text(response)
    if text:
        raise ProviderRefusalError(
            f'The model returned text instead of an image: "{text}"', text=text
        )
    raise EmptyResultError(EMPTY_RESULT_MESSAGE)


def generate_or_edit(
    prompt: str,
    source_image: str | None = None,
    aspect_ratio: AspectRatio | str = DEFAULT_ASPECT_RATIO,
    *,
    config: Config | None = None,
    transport: ImageTransport | None = None,
) -> str:
    """
    Generate an image from a prompt, or edit source_image according to the prompt.

    The prompt is not re-validated here; callers reject empty prompts.

    Args:
        prompt: Text prompt
        source_image: Optional data URI (or bare base64) of the image to edit
        aspect_ratio: Requested output ratio (advisory when editing)
        config: Optional config; if None, uses the shared config from get_config()
        transport: Optional transport; if None, uses the default Gemini transport

    Returns:
        The generated image as a data URI

    Raises:
        ConfigurationError: If no API key is configured (before any network call)
        ProviderRefusalError: If the model replied with text only
        EmptyResultError: If the model replied with neither image nor text
        TransportError: If the request failed
    """
    config = config or get_config()
    config.validate()
    transport = transport or get_transport()

    parts = build_parts(prompt, source_image)
    generation_config = build_generation_config(aspect_ratio)

    is_edit = bool(source_image)
    logger.info(
        "Generating image model=%s edit=%s aspect_ratio=%s",
        config.model,
        is_edit,
        generation_config["imageConfig"]["aspectRatio"],
    )
    if log_prompts():
        truncated = prompt if len(prompt) <= _PROMPT_LOG_MAX else prompt[:_PROMPT_LOG_MAX] + "..."
        logger.info("Prompt: %s", truncated)

    start_time = time.time()
    try:
        response = transport.send(parts, generation_config, config)
        image_url = extract_image_data_url(response)
    except NanogenError as e:
        logger.error("Gemini API error: %s", e)
        raise
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        message = str(e) or TRANSPORT_FALLBACK_MESSAGE
        raise TransportError(message, original_error=e) from e

    logger.info("Generated in %.1fs model=%s", time.time() - start_time, config.model)
    return image_url
