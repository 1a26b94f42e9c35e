"""Upload receiver: writes multipart file parts into the staging directory.

Files are stored as: <staging>/<original name>-<epoch ms>-<random>.<ext>
"""
import logging
import random
import time
from pathlib import Path
from typing import Mapping, Optional

from fastapi import UploadFile

from ..config import StagingConfig
from ..errors import FileTooLargeError, NoFilePartError
from .schemas import StagedFile, UploadForm

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024

_service: Optional["UploadReceiver"] = None


def get_upload_receiver() -> Optional["UploadReceiver"]:
    return _service


def set_upload_receiver(receiver: Optional["UploadReceiver"]) -> None:
    global _service
    _service = receiver


def generate_storage_name(original_name: str) -> str:
    """Build a collision-free storage name for an upload.

    The client's name is kept (minus any directory part) so staged files
    stay recognisable, then a millisecond timestamp and a random integer are
    appended, followed by the original extension again.
    """
    name = Path(original_name or "").name or "upload"
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{name}-{unique_suffix}{Path(name).suffix}"


class UploadReceiver:
    """Persists uploaded file parts under unique names in the staging area."""

    def __init__(self, staging: StagingConfig, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
        self._staging = staging
        self._max_upload_bytes = max_upload_bytes

    @property
    def staging_dir(self) -> Path:
        return self._staging.directory

    def ensure_staging_dir(self) -> Path:
        """Create the staging directory on demand."""
        self._staging.directory.mkdir(parents=True, exist_ok=True)
        return self._staging.directory

    async def receive(
        self,
        file: Optional[UploadFile],
        fields: Optional[Mapping[str, str]] = None,
    ) -> UploadForm:
        """Write *file* to staging and describe it.

        Args:
            file: The ``file`` part of the multipart body, or None if absent.
            fields: Remaining text fields of the form.

        Returns:
            UploadForm with the StagedFile descriptor and the text fields.

        Raises:
            NoFilePartError: If no file part was submitted.
            FileTooLargeError: If the body exceeds the configured limit.
        """
        if file is None or not file.filename:
            raise NoFilePartError()

        content = await file.read()
        size_bytes = len(content)
        if size_bytes > self._max_upload_bytes:
            raise FileTooLargeError(
                f"File size ({size_bytes} bytes) exceeds limit "
                f"({self._max_upload_bytes} bytes)"
            )

        staging_dir = self.ensure_staging_dir()
        file_path = staging_dir / generate_storage_name(file.filename)
        file_path.write_bytes(content)

        logger.info(f"Staged upload: {file_path} ({size_bytes} bytes)")

        staged = StagedFile(
            storage_path=str(file_path),
            original_name=file.filename,
            mime_type=file.content_type or "application/octet-stream",
            size_bytes=size_bytes,
        )
        return UploadForm(file=staged, fields=dict(fields or {}))
