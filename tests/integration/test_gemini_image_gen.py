"""
Integration tests for Gemini image generation and editing.

These tests call the real Gemini API. They are slow and may cost money.
Run rarely and only when you need to verify the live API path.

To run:
  NANOGEN_RUN_INTEGRATION_TESTS=1 GEMINI_API_KEY=... pytest -m integration --run-slow
"""

import os
from pathlib import Path

import pytest

from nanogen.core.adapter import generate_or_edit
from nanogen.core.config import Config
from nanogen.core.images import save_result
from nanogen.core.types import AspectRatio, GenerationResult

# Project root (tests/integration -> tests -> project root)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_TMP_DIR = _PROJECT_ROOT / "tmp"


def _integration_enabled() -> bool:
    return os.getenv("NANOGEN_RUN_INTEGRATION_TESTS", "").strip() == "1"


@pytest.mark.integration
@pytest.mark.slow
@pytest.mark.expensive
class TestGeminiImageGeneration:
    """Real Gemini image generation (requires API key and opt-in env)."""

    @pytest.fixture(autouse=True)
    def _require_opt_in(self) -> None:
        if not _integration_enabled():
            pytest.skip(
                "Integration tests are disabled. "
                "Set NANOGEN_RUN_INTEGRATION_TESTS=1 to run (slow, costs money)."
            )
        if not Config.from_env().api_key:
            pytest.skip("GEMINI_API_KEY not set. Set it in .env or environment.")

    def test_generate_then_edit(self) -> None:
        """Generate a simple image, then edit it, saving both under tmp/."""
        config = Config.from_env()
        prompt = "A single red circle on a white background."
        image_url = generate_or_edit(prompt, None, AspectRatio.SQUARE, config=config)

        assert image_url.startswith("data:image/")
        generated = GenerationResult(image_url=image_url, prompt=prompt, is_edit=False)
        assert generated.image.size[0] > 0
        save_result(generated, _TMP_DIR)

        edit_prompt = "Make the circle blue."
        edited_url = generate_or_edit(edit_prompt, image_url, AspectRatio.SQUARE, config=config)
        assert edited_url.startswith("data:image/")
        edited = GenerationResult(image_url=edited_url, prompt=edit_prompt, is_edit=True)
        assert edited.image_data
