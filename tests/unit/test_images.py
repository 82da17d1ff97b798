"""Unit tests for source image loading, data URI helpers and result saving."""

import base64
import io
from pathlib import Path

import pytest
from PIL import Image

from nanogen.core.images import (
    NOT_AN_IMAGE_MESSAGE,
    clean_base64,
    create_image_data_url,
    download_filename,
    load_source_image,
    mime_type_from_data_url,
    save_result,
)
from nanogen.core.types import AspectRatio, GenerationResult
from nanogen.utils.exceptions import ValidationError


def _image_bytes(fmt: str = "PNG", size: tuple[int, int] = (4, 4)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 10, 10)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.mark.unit
class TestCleanBase64:
    def test_strips_data_url_prefix(self):
        assert clean_base64("data:image/png;base64,AAAA") == "AAAA"

    def test_bare_payload_unchanged(self):
        assert clean_base64("iVBORw0KGgo=") == "iVBORw0KGgo="

    def test_stripping_twice_is_same_as_once(self):
        once = clean_base64("data:image/jpeg;base64,/9j/4AAQ")
        assert clean_base64(once) == once


@pytest.mark.unit
class TestDataUrlHelpers:
    def test_mime_type_from_header(self):
        assert mime_type_from_data_url("data:image/jpeg;base64,AAA=") == "image/jpeg"

    def test_mime_type_default_for_bare_payload(self):
        assert mime_type_from_data_url("AAA=") == "image/png"

    def test_mime_type_default_for_empty_header(self):
        assert mime_type_from_data_url("data:;base64,AAA=") == "image/png"

    def test_create_image_data_url(self):
        assert create_image_data_url("AAA=", "image/webp") == "data:image/webp;base64,AAA="
        assert create_image_data_url("AAA=") == "data:image/png;base64,AAA="


@pytest.mark.unit
class TestLoadSourceImage:
    def test_png_file_to_data_url(self, tmp_path: Path):
        raw = _image_bytes("PNG")
        path = tmp_path / "ref.png"
        path.write_bytes(raw)
        data_url = load_source_image(path)
        assert data_url.startswith("data:image/png;base64,")
        assert base64.b64decode(clean_base64(data_url)) == raw

    def test_jpeg_bytes_keep_jpeg_mime(self):
        data_url = load_source_image(_image_bytes("JPEG"))
        assert data_url.startswith("data:image/jpeg;base64,")

    def test_non_image_rejected(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("not an image")
        with pytest.raises(ValidationError) as exc_info:
            load_source_image(path)
        assert str(exc_info.value) == NOT_AN_IMAGE_MESSAGE
        assert exc_info.value.field == "image"

    def test_empty_bytes_rejected(self):
        with pytest.raises(ValidationError):
            load_source_image(b"")

    def test_missing_file_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError) as exc_info:
            load_source_image(tmp_path / "missing.png")
        assert "not found" in str(exc_info.value)


@pytest.mark.unit
class TestGenerationResult:
    def test_decodes_image(self):
        raw = _image_bytes("PNG", (3, 2))
        result = GenerationResult(
            image_url=create_image_data_url(base64.b64encode(raw).decode("ascii")),
            prompt="p",
            is_edit=False,
        )
        assert result.mime_type == "image/png"
        assert result.image_data == raw
        assert result.image.size == (3, 2)
        assert result.timestamp > 0


@pytest.mark.unit
class TestAspectRatio:
    def test_values(self):
        assert [r.value for r in AspectRatio] == ["1:1", "3:4", "4:3", "16:9", "9:16"]

    def test_parse_value_and_name(self):
        assert AspectRatio.parse("16:9") is AspectRatio.WIDE
        assert AspectRatio.parse("tall") is AspectRatio.TALL
        assert AspectRatio.parse(AspectRatio.SQUARE) is AspectRatio.SQUARE

    def test_parse_unknown_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            AspectRatio.parse("2:1")
        assert exc_info.value.field == "aspect_ratio"


@pytest.mark.unit
class TestDownload:
    def test_download_filename(self):
        assert download_filename(1700000000123) == "nanogen-1700000000123.png"

    def test_save_png_result_writes_bytes(self, tmp_path: Path):
        raw = _image_bytes("PNG")
        result = GenerationResult(
            image_url=create_image_data_url(base64.b64encode(raw).decode("ascii")),
            prompt="p",
            is_edit=False,
            timestamp=42,
        )
        out = save_result(result, tmp_path)
        assert out == tmp_path / "nanogen-42.png"
        assert out.read_bytes() == raw

    def test_save_jpeg_result_reencodes_png(self, tmp_path: Path):
        raw = _image_bytes("JPEG")
        result = GenerationResult(
            image_url=create_image_data_url(base64.b64encode(raw).decode("ascii"), "image/jpeg"),
            prompt="p",
            is_edit=True,
            timestamp=7,
        )
        out = save_result(result, tmp_path)
        assert out.name == "nanogen-7.png"
        assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
