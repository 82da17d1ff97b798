"""
Shared value types: aspect ratios and generation results.
"""

import base64
import io
import time
from dataclasses import dataclass, field
from enum import Enum

from PIL import Image

from nanogen.utils.exceptions import ValidationError


class AspectRatio(str, Enum):
    """Output width:height ratios accepted by the image model."""

    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    WIDE = "16:9"
    TALL = "9:16"

    @classmethod
    def parse(cls, value: "str | AspectRatio") -> "AspectRatio":
        """
        Return the AspectRatio for a ratio string (e.g. "16:9") or enum name (e.g. "WIDE").

        Raises:
            ValidationError: If value is not one of the supported ratios
        """
        if isinstance(value, AspectRatio):
            return value
        raw = (value or "").strip()
        for ratio in cls:
            if raw == ratio.value or raw.upper() == ratio.name:
                return ratio
        raise ValidationError(
            f"Unsupported aspect ratio: {value!r}. "
            f"Supported: {', '.join(r.value for r in cls)}",
            field="aspect_ratio",
        )


DEFAULT_ASPECT_RATIO = AspectRatio.SQUARE


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class GenerationResult:
    """A generated or edited image, held in memory for the current session only."""

    image_url: str  # data:<mime>;base64,<payload>
    prompt: str
    is_edit: bool
    timestamp: int = field(default_factory=_now_ms)  # unix ms

    @property
    def mime_type(self) -> str:
        """MIME type declared in the data URI header (e.g. 'image/png')."""
        header = self.image_url.split(",", 1)[0]
        return header[5:].split(";", 1)[0] or "image/png"

    @property
    def image_data(self) -> bytes:
        """Decoded image bytes in the provider's format."""
        return base64.b64decode(self.image_url.split(",", 1)[1])

    @property
    def image(self) -> Image.Image:
        """The result as a PIL Image (for display or re-encoding)."""
        return Image.open(io.BytesIO(self.image_data)).copy()
