"""Unit tests for the request adapter (request building and response decoding)."""

from typing import Any

import pytest

from nanogen.core.adapter import (
    EMPTY_RESULT_MESSAGE,
    build_generation_config,
    build_parts,
    extract_image_data_url,
    generate_or_edit,
    response_text,
)
from nanogen.core.config import Config
from nanogen.core.types import AspectRatio
from nanogen.utils.exceptions import (
    ConfigurationError,
    EmptyResultError,
    ProviderRefusalError,
    TransportError,
)


class FakeTransport:
    """Records calls and returns a canned response (or raises)."""

    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None):
        self.response = response if response is not None else {}
        self.error = error
        self.calls: list[tuple[list[dict[str, Any]], dict[str, Any]]] = []

    def send(self, parts, generation_config, config):
        self.calls.append((parts, generation_config))
        if self.error is not None:
            raise self.error
        return self.response


def _response(*parts: dict[str, Any]) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": list(parts)}}]}


IMAGE_RESPONSE = _response({"inlineData": {"mimeType": "image/jpeg", "data": "AAA="}})


@pytest.fixture
def config() -> Config:
    return Config(api_key="test-key")


@pytest.mark.unit
class TestBuildParts:
    def test_text_only(self):
        parts = build_parts("a cat", None)
        assert parts == [{"text": "a cat"}]

    def test_image_then_text(self):
        parts = build_parts("make it blue", "data:image/png;base64,QUJD")
        assert len(parts) == 2
        assert parts[0] == {"inlineData": {"mimeType": "image/png", "data": "QUJD"}}
        assert parts[1] == {"text": "make it blue"}

    def test_image_mime_taken_from_data_url(self):
        parts = build_parts("x", "data:image/webp;base64,QUJD")
        assert parts[0]["inlineData"]["mimeType"] == "image/webp"

    def test_bare_base64_source_defaults_to_png(self):
        parts = build_parts("x", "QUJD")
        assert parts[0]["inlineData"] == {"mimeType": "image/png", "data": "QUJD"}

    def test_empty_source_is_text_only(self):
        assert build_parts("x", "") == [{"text": "x"}]


@pytest.mark.unit
class TestBuildGenerationConfig:
    @pytest.mark.parametrize("ratio", list(AspectRatio))
    def test_all_ratios(self, ratio: AspectRatio):
        assert build_generation_config(ratio) == {"imageConfig": {"aspectRatio": ratio.value}}

    def test_accepts_string(self):
        assert build_generation_config("9:16") == {"imageConfig": {"aspectRatio": "9:16"}}


@pytest.mark.unit
class TestExtractImageDataUrl:
    def test_first_inline_image(self):
        assert extract_image_data_url(IMAGE_RESPONSE) == "data:image/jpeg;base64,AAA="

    def test_missing_mime_defaults_to_png(self):
        response = _response({"inlineData": {"data": "BBB="}})
        assert extract_image_data_url(response) == "data:image/png;base64,BBB="

    def test_first_match_wins(self):
        response = _response(
            {"text": "Here you go"},
            {"inlineData": {"mimeType": "image/png", "data": "FIRST"}},
            {"inlineData": {"mimeType": "image/png", "data": "SECOND"}},
        )
        assert extract_image_data_url(response) == "data:image/png;base64,FIRST"

    def test_only_first_candidate_is_used(self):
        response = {
            "candidates": [
                {"content": {"parts": [{"text": "no image here"}]}},
                {"content": {"parts": [{"inlineData": {"mimeType": "image/png", "data": "X"}}]}},
            ]
        }
        with pytest.raises(ProviderRefusalError):
            extract_image_data_url(response)

    def test_inline_part_without_data_is_skipped(self):
        response = _response(
            {"inlineData": {"mimeType": "image/png", "data": ""}},
            {"inlineData": {"mimeType": "image/png", "data": "REAL"}},
        )
        assert extract_image_data_url(response) == "data:image/png;base64,REAL"

    def test_snake_case_inline_data(self):
        response = _response({"inline_data": {"mime_type": "image/webp", "data": "CCC="}})
        assert extract_image_data_url(response) == "data:image/webp;base64,CCC="

    def test_text_only_raises_refusal_with_text(self):
        response = _response({"text": "I cannot create that."})
        with pytest.raises(ProviderRefusalError) as exc_info:
            extract_image_data_url(response)
        assert "I cannot create that." in str(exc_info.value)
        assert exc_info.value.text == "I cannot create that."

    def test_neither_raises_empty_result(self):
        with pytest.raises(EmptyResultError) as exc_info:
            extract_image_data_url(_response())
        assert str(exc_info.value) == EMPTY_RESULT_MESSAGE

    def test_no_candidates_raises_empty_result(self):
        with pytest.raises(EmptyResultError):
            extract_image_data_url({"candidates": []})
        with pytest.raises(EmptyResultError):
            extract_image_data_url({})

    def test_response_text_joins_text_parts(self):
        response = _response({"text": "Hello "}, {"text": "world"})
        assert response_text(response) == "Hello world"


@pytest.mark.unit
class TestGenerateOrEdit:
    def test_missing_key_fails_before_network(self):
        transport = FakeTransport(IMAGE_RESPONSE)
        with pytest.raises(ConfigurationError) as exc_info:
            generate_or_edit("a cat", None, config=Config(api_key=""), transport=transport)
        assert "API Key is missing" in str(exc_info.value)
        assert transport.calls == []

    def test_generate_sends_one_text_part(self, config: Config):
        transport = FakeTransport(IMAGE_RESPONSE)
        url = generate_or_edit("a cat", None, AspectRatio.WIDE, config=config, transport=transport)
        assert url == "data:image/jpeg;base64,AAA="
        assert len(transport.calls) == 1
        parts, generation_config = transport.calls[0]
        assert parts == [{"text": "a cat"}]
        assert generation_config == {"imageConfig": {"aspectRatio": "16:9"}}

    def test_edit_sends_image_then_text_and_still_sends_ratio(self, config: Config):
        transport = FakeTransport(IMAGE_RESPONSE)
        generate_or_edit(
            "add a hat",
            "data:image/png;base64,SOURCE",
            AspectRatio.PORTRAIT,
            config=config,
            transport=transport,
        )
        parts, generation_config = transport.calls[0]
        assert [list(p) for p in parts] == [["inlineData"], ["text"]]
        assert parts[0]["inlineData"]["data"] == "SOURCE"
        assert parts[1]["text"] == "add a hat"
        assert generation_config["imageConfig"]["aspectRatio"] == "3:4"

    def test_default_aspect_ratio_is_square(self, config: Config):
        transport = FakeTransport(IMAGE_RESPONSE)
        generate_or_edit("a cat", config=config, transport=transport)
        assert transport.calls[0][1] == {"imageConfig": {"aspectRatio": "1:1"}}

    def test_refusal_propagates(self, config: Config):
        transport = FakeTransport(_response({"text": "I cannot create that."}))
        with pytest.raises(ProviderRefusalError) as exc_info:
            generate_or_edit("x", None, config=config, transport=transport)
        assert "I cannot create that." in str(exc_info.value)

    def test_empty_result_propagates(self, config: Config):
        transport = FakeTransport(_response())
        with pytest.raises(EmptyResultError):
            generate_or_edit("x", None, config=config, transport=transport)

    def test_transport_error_passes_through(self, config: Config):
        error = TransportError("quota exceeded", status_code=429)
        transport = FakeTransport(error=error)
        with pytest.raises(TransportError) as exc_info:
            generate_or_edit("x", None, config=config, transport=transport)
        assert exc_info.value is error
        assert len(transport.calls) == 1

    def test_unexpected_error_wrapped_as_transport_error(self, config: Config):
        transport = FakeTransport(error=RuntimeError("socket closed"))
        with pytest.raises(TransportError) as exc_info:
            generate_or_edit("x", None, config=config, transport=transport)
        assert str(exc_info.value) == "socket closed"
        assert isinstance(exc_info.value.original_error, RuntimeError)

    def test_unexpected_error_without_message_uses_fallback(self, config: Config):
        transport = FakeTransport(error=RuntimeError())
        with pytest.raises(TransportError) as exc_info:
            generate_or_edit("x", None, config=config, transport=transport)
        assert str(exc_info.value) == "Failed to generate image."

    def test_malformed_response_becomes_transport_error(self, config: Config):
        transport = FakeTransport({"candidates": ["not-a-dict"]})
        with pytest.raises(TransportError):
            generate_or_edit("x", None, config=config, transport=transport)
