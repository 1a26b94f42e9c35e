"""Conversion dispatcher: routes a staged file to one converter family."""
import logging
import random
import re
import time
from pathlib import Path
from typing import Mapping, Optional

from ..config import ConversionSettings
from ..errors import UnsupportedTypeError
from ..formats.classifier import category_for
from ..formats.schemas import ConversionCategory
from .converters import Converter, DocumentConverter, ImageConverter, MediaConverter
from .schemas import ConversionRequest, ConversionResult

logger = logging.getLogger(__name__)

TARGET_FORMAT_PATTERN = re.compile(r"^[A-Za-z0-9]+(\.[A-Za-z0-9]+)*$")

_dispatcher: Optional["ConversionDispatcher"] = None


def get_dispatcher() -> Optional["ConversionDispatcher"]:
    return _dispatcher


def set_dispatcher(dispatcher: Optional["ConversionDispatcher"]) -> None:
    global _dispatcher
    _dispatcher = dispatcher


def is_valid_target_format(target_format: str) -> bool:
    return bool(TARGET_FORMAT_PATTERN.match(target_format or ""))


def build_output_filename(original_name: str, target_format: str) -> str:
    """``notes.txt`` + ``PDF`` -> ``notes-<epoch ms>.pdf``."""
    stem = Path(Path(original_name).name).stem or "converted"
    return f"{stem}-{int(time.time() * 1000)}.{target_format.lower()}"


def new_download_id() -> str:
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"


class ConversionDispatcher:
    """Picks the converter for a staged file by MIME prefix and runs it.

    Args:
        converters: One converter per category. Categories without an entry
                    are treated as unsupported.
    """

    def __init__(self, converters: Mapping[ConversionCategory, Converter]) -> None:
        self._converters = dict(converters)

    @classmethod
    def from_settings(cls, settings: ConversionSettings) -> "ConversionDispatcher":
        return cls({
            ConversionCategory.DOCUMENT: DocumentConverter(settings.document_delay_seconds),
            ConversionCategory.IMAGE: ImageConverter(settings.image_delay_seconds),
            ConversionCategory.MEDIA: MediaConverter(settings.media_delay_seconds),
        })

    def converter_for(self, mime_type: str) -> Optional[Converter]:
        category = category_for(mime_type)
        if category is None:
            return None
        return self._converters.get(category)

    def supports(self, mime_type: str) -> bool:
        return self.converter_for(mime_type) is not None

    async def convert(self, request: ConversionRequest, output_path: str) -> ConversionResult:
        """Run the single converter matching the input's MIME type.

        Unsupported types fail immediately: no converter runs and no output
        file is created. No retries are attempted.
        """
        converter = self.converter_for(request.input.mime_type)
        if converter is None:
            logger.info(
                "No converter for %s (%s)", request.input.original_name, request.input.mime_type
            )
            return ConversionResult.failed(UnsupportedTypeError().message)

        logger.info(
            "Converting %s (%s) to %s via %s converter",
            request.input.original_name,
            request.input.mime_type,
            request.target_format,
            converter.category.value,
        )
        return await converter.convert(request.input.storage_path, output_path, request.target_format)
