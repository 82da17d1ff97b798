"""
Source image handling for nanogen.

Turns a user-picked file into a base64 data URI, splits data URIs for the
request body, and writes results to disk for download.
"""

import base64
import io
from pathlib import Path

from PIL import Image

from nanogen.core.types import GenerationResult
from nanogen.logging_config import get_logger
from nanogen.utils.exceptions import ValidationError

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "image/png"
DOWNLOAD_PREFIX = "nanogen"
NOT_AN_IMAGE_MESSAGE = "Please upload an image file."


def clean_base64(data: str) -> str:
    """
    Strip a data URI header, keeping only the base64 payload.

    A string with no comma is already a bare payload and is returned unchanged.
    """
    if "," in data:
        return data.split(",")[1]
    return data


def mime_type_from_data_url(data_url: str, default: str = DEFAULT_MIME_TYPE) -> str:
    """Return the MIME type declared in a data URI header, or default if absent."""
    if not data_url.startswith("data:") or "," not in data_url:
        return default
    header = data_url[5:].split(",", 1)[0]
    mime = header.split(";", 1)[0].strip().lower()
    return mime or default


def create_image_data_url(encoded_image: str, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Create a data URI from a base64 payload."""
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded_image}"


def load_source_image(source: str | Path | bytes) -> str:
    """
    Load a user-selected file (path or raw bytes) as a data URI.

    The bytes are sent as-is; Pillow is only used to check that they are an image
    and to find the MIME type.

    Raises:
        ValidationError: If the input is missing or is not a readable image
    """
    if isinstance(source, bytes):
        data = source
    else:
        path = Path(source)
        if not path.is_file():
            raise ValidationError(f"Image file not found: {path}", field="image")
        data = path.read_bytes()

    if not data:
        raise ValidationError(NOT_AN_IMAGE_MESSAGE, field="image")

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
            fmt = image.format
    except Exception as e:
        raise ValidationError(NOT_AN_IMAGE_MESSAGE, field="image") from e

    mime = Image.MIME.get(fmt or "", DEFAULT_MIME_TYPE)
    logger.debug("Loaded source image format=%s bytes=%d", fmt, len(data))
    return create_image_data_url(base64.b64encode(data).decode("ascii"), mime)


def download_filename(timestamp_ms: int) -> str:
    """Return the download file name for a result: nanogen-<unix ms>.png."""
    return f"{DOWNLOAD_PREFIX}-{timestamp_ms}.png"


def save_result(result: GenerationResult, directory: str | Path) -> Path:
    """
    Save a result as PNG under directory using download_filename().

    Non-PNG provider output is re-encoded so the .png name stays truthful.
    """
    out_path = Path(directory) / download_filename(result.timestamp)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if result.mime_type == "image/png":
        out_path.write_bytes(result.image_data)
    else:
        result.image.save(str(out_path), "PNG")
    logger.info("Saved result to %s", out_path)
    return out_path
