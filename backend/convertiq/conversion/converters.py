"""Converter interface and the stub converters behind it.

Each converter family (document, image, audio/video) implements ``Converter``.
The stubs here do not transform anything: they wait for a fixed processing
delay and copy the input bytes to the output path. Real conversion logic
plugs in by subclassing ``Converter`` and registering it with the
dispatcher; the contract stays the same.

Usage:
    converter = DocumentConverter(delay_seconds=0)
    result = await converter.convert("in.txt", "out.pdf", "PDF")
"""
import asyncio
import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..formats.schemas import ConversionCategory
from .schemas import ConversionResult

logger = logging.getLogger(__name__)


class Converter(ABC):
    """Abstract converter for one category of input files."""

    category: ConversionCategory

    @abstractmethod
    async def convert(self, input_path: str, output_path: str, target_format: str) -> ConversionResult:
        """Convert *input_path* into *target_format* at *output_path*.

        Must never raise for filesystem failures; those are reported as a
        failed ConversionResult carrying the error message.
        """


class StubConverter(Converter):
    """Simulated converter: sleep, then copy bytes verbatim."""

    default_delay_seconds: float = 1.0

    def __init__(self, delay_seconds: Optional[float] = None) -> None:
        self.delay_seconds = self.default_delay_seconds if delay_seconds is None else delay_seconds

    async def convert(self, input_path: str, output_path: str, target_format: str) -> ConversionResult:
        try:
            await asyncio.sleep(self.delay_seconds)
            Path(output_path).parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, input_path, output_path)
        except OSError as e:
            logger.error(f"{self.category.value.capitalize()} conversion error: {e}")
            return ConversionResult.failed(str(e))

        logger.debug(
            "%s stub produced %s (target=%s)", self.category.value, output_path, target_format
        )
        return ConversionResult.ok(output_path)


class DocumentConverter(StubConverter):
    category = ConversionCategory.DOCUMENT
    default_delay_seconds = 1.5


class ImageConverter(StubConverter):
    category = ConversionCategory.IMAGE
    default_delay_seconds = 1.0


class MediaConverter(StubConverter):
    """Audio and video share one converter family."""
    category = ConversionCategory.MEDIA
    default_delay_seconds = 3.0
