"""Tests for the stub converters and the conversion dispatcher."""
import re
from pathlib import Path
from typing import List, Tuple

import pytest

from convertiq.config import ConversionSettings
from convertiq.conversion.converters import (
    Converter,
    DocumentConverter,
    ImageConverter,
    MediaConverter,
)
from convertiq.conversion.dispatcher import (
    ConversionDispatcher,
    build_output_filename,
    is_valid_target_format,
)
from convertiq.conversion.schemas import ConversionRequest, ConversionResult
from convertiq.formats.schemas import ConversionCategory
from convertiq.uploads.schemas import StagedFile


class RecordingConverter(Converter):
    """Converter double that records calls and writes a marker output."""

    def __init__(self, category: ConversionCategory) -> None:
        self.category = category
        self.calls: List[Tuple[str, str, str]] = []

    async def convert(self, input_path, output_path, target_format):
        self.calls.append((input_path, output_path, target_format))
        Path(output_path).write_bytes(b"converted")
        return ConversionResult.ok(output_path)


@pytest.fixture
def recorders():
    return {category: RecordingConverter(category) for category in ConversionCategory}


@pytest.fixture
def input_file(tmp_path) -> Path:
    path = tmp_path / "input.bin"
    path.write_bytes(bytes(range(256)) * 4)
    return path


def _request(path: Path, mime_type: str, target: str = "pdf") -> ConversionRequest:
    staged = StagedFile(
        storage_path=str(path),
        original_name=path.name,
        mime_type=mime_type,
        size_bytes=path.stat().st_size,
    )
    return ConversionRequest(input=staged, target_format=target)


class TestStubConverters:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("converter_cls", [DocumentConverter, ImageConverter, MediaConverter])
    async def test_output_is_byte_identical(self, converter_cls, input_file, tmp_path):
        output = tmp_path / "out" / "result.pdf"
        result = await converter_cls(delay_seconds=0).convert(str(input_file), str(output), "PDF")

        assert result.success is True
        assert result.output_path == str(output)
        assert result.error_message is None
        assert output.read_bytes() == input_file.read_bytes()

    @pytest.mark.asyncio
    async def test_missing_input_is_reported_not_raised(self, tmp_path):
        result = await ImageConverter(delay_seconds=0).convert(
            str(tmp_path / "nope.png"), str(tmp_path / "out.jpg"), "JPG"
        )
        assert result.success is False
        assert result.output_path is None
        assert result.error_message
        assert not (tmp_path / "out.jpg").exists()

    @pytest.mark.asyncio
    async def test_unwritable_output_is_reported(self, input_file, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file where a directory should be")
        result = await DocumentConverter(delay_seconds=0).convert(
            str(input_file), str(blocker / "out.pdf"), "PDF"
        )
        assert result.success is False
        assert result.error_message

    def test_default_delays(self):
        assert DocumentConverter().delay_seconds == 1.5
        assert ImageConverter().delay_seconds == 1.0
        assert MediaConverter().delay_seconds == 3.0


class TestDispatcher:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("mime_type,expected", [
        ("application/pdf", ConversionCategory.DOCUMENT),
        ("text/plain", ConversionCategory.DOCUMENT),
        ("image/webp", ConversionCategory.IMAGE),
        ("audio/ogg", ConversionCategory.MEDIA),
        ("video/quicktime", ConversionCategory.MEDIA),
    ])
    async def test_exactly_one_converter_runs(self, recorders, input_file, tmp_path, mime_type, expected):
        dispatcher = ConversionDispatcher(recorders)
        output = tmp_path / "out.pdf"

        result = await dispatcher.convert(_request(input_file, mime_type), str(output))

        assert result.success is True
        for category, recorder in recorders.items():
            assert len(recorder.calls) == (1 if category is expected else 0)
        assert recorders[expected].calls[0] == (str(input_file), str(output), "PDF")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mime_type", ["application/zip", "text/html", "font/ttf", ""])
    async def test_unsupported_runs_nothing(self, recorders, input_file, tmp_path, mime_type):
        dispatcher = ConversionDispatcher(recorders)
        output = tmp_path / "out.pdf"

        result = await dispatcher.convert(_request(input_file, mime_type), str(output))

        assert result.success is False
        assert result.error_message == "Unsupported file type for conversion"
        assert all(not r.calls for r in recorders.values())
        assert not output.exists()

    @pytest.mark.asyncio
    async def test_missing_category_is_unsupported(self, recorders, input_file, tmp_path):
        del recorders[ConversionCategory.IMAGE]
        dispatcher = ConversionDispatcher(recorders)
        assert dispatcher.supports("image/png") is False
        result = await dispatcher.convert(_request(input_file, "image/png"), str(tmp_path / "o.jpg"))
        assert result.success is False

    def test_from_settings_uses_configured_delays(self):
        dispatcher = ConversionDispatcher.from_settings(
            ConversionSettings(document_delay_seconds=0.1, image_delay_seconds=0.2, media_delay_seconds=0.3)
        )
        assert dispatcher.converter_for("application/pdf").delay_seconds == 0.1
        assert dispatcher.converter_for("image/png").delay_seconds == 0.2
        assert dispatcher.converter_for("video/mp4").delay_seconds == 0.3


class TestHelpers:
    def test_request_normalises_target(self, input_file):
        assert _request(input_file, "text/plain", " pdf ").target_format == "PDF"

    def test_output_filename(self):
        assert re.fullmatch(r"notes-\d+\.pdf", build_output_filename("notes.txt", "PDF"))

    def test_output_filename_multi_dot_target(self):
        assert re.fullmatch(r"backup-\d+\.tar\.gz", build_output_filename("backup.zip", "TAR.GZ"))

    @pytest.mark.parametrize("token,valid", [
        ("PDF", True),
        ("tar.gz", True),
        ("7Z", True),
        ("", False),
        ("../pdf", False),
        ("p df", False),
        ("pdf/", False),
        ("..", False),
    ])
    def test_target_format_validation(self, token, valid):
        assert is_valid_target_format(token) is valid
