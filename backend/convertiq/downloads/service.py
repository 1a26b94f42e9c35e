"""Download responder: serves converted artifacts out of the staging area."""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

from ..config import StagingConfig
from ..errors import DownloadFailedError, NotFoundError
from ..lifecycle.manager import TempFileLifecycleManager

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: Dict[str, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
    "txt": "text/plain",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "mp4": "video/mp4",
    "avi": "video/x-msvideo",
    "mov": "video/quicktime",
    "webm": "video/webm",
}

_TIMESTAMP_SUFFIX = re.compile(r"-\d+$")

_responder: Optional["DownloadResponder"] = None


def get_download_responder() -> Optional["DownloadResponder"]:
    return _responder


def set_download_responder(responder: Optional["DownloadResponder"]) -> None:
    global _responder
    _responder = responder


def content_type_for(filename: str) -> str:
    ext = Path(filename).suffix[1:].lower()
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def display_name_for(filename: str) -> str:
    """``notes-1700000000000.pdf`` -> ``notes - Converted.pdf``."""
    path = Path(filename)
    ext = path.suffix[1:].lower()
    clean = _TIMESTAMP_SUFFIX.sub("", path.stem)
    return f"{clean} - Converted.{ext}" if ext else f"{clean} - Converted"


@dataclass
class DownloadPayload:
    content: bytes
    content_type: str
    display_name: str

    @property
    def content_disposition(self) -> str:
        """Attachment header with an ASCII fallback and the RFC 6266 UTF-8 name.

        Header values go out as latin-1, so the plain ``filename`` only carries
        printable ASCII; clients that understand ``filename*`` get the real name.
        """
        fallback = "".join(ch if " " <= ch <= "~" else "_" for ch in self.display_name)
        fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
        encoded = quote(self.display_name, safe="")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


class DownloadResponder:
    """Reads an artifact into memory and hands its deletion to the lifecycle manager."""

    def __init__(self, staging: StagingConfig, lifecycle: TempFileLifecycleManager) -> None:
        self._staging = staging
        self._lifecycle = lifecycle

    def resolve(self, filename: str) -> Optional[Path]:
        """Map *filename* into the staging directory.

        Returns None for names that escape the directory or do not exist.
        """
        staging_dir = self._staging.directory.resolve()
        candidate = (staging_dir / filename).resolve()
        if candidate.parent != staging_dir:
            return None
        if not candidate.is_file():
            return None
        return candidate

    async def serve(self, filename: str) -> DownloadPayload:
        """Load *filename* for download.

        Raises:
            NotFoundError: Unknown, expired, or out-of-staging filename.
            DownloadFailedError: The file exists but could not be read.
        """
        file_path = self.resolve(filename)
        if file_path is None:
            raise NotFoundError()

        try:
            content = file_path.read_bytes()
        except FileNotFoundError:
            # Expired between the existence check and the read.
            raise NotFoundError()
        except OSError as e:
            logger.error(f"Download error for {filename}: {e}")
            raise DownloadFailedError()

        payload = DownloadPayload(
            content=content,
            content_type=content_type_for(filename),
            display_name=display_name_for(filename),
        )
        await self._lifecycle.claim_download(file_path)

        logger.info(f"Serving {filename} ({len(content)} bytes)")
        return payload
