"""Static file-type table and MIME-prefix routing.

``FILE_TYPES`` is the display table shown to clients. ``category_for`` is the
coarse grouping the dispatcher routes on. Both are read-only and built once
at import time.
"""
from typing import Dict, List, Optional, Tuple

from .schemas import ConversionCategory, FileTypeDescriptor, FileTypeEntry


def _entry(label: str, icon: str, *conversions: str) -> FileTypeDescriptor:
    return FileTypeDescriptor(label=label, icon=icon, conversions=list(conversions))


FILE_TYPES: Dict[str, FileTypeDescriptor] = {
    # Documents
    "application/pdf": _entry("PDF", "red", "DOCX", "JPG", "PNG", "TXT"),
    "application/msword": _entry("DOC", "blue", "PDF", "DOCX", "TXT"),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": _entry(
        "DOCX", "blue", "PDF", "DOC", "TXT"
    ),
    "application/rtf": _entry("RTF", "blue", "PDF", "DOCX", "TXT"),
    "application/vnd.oasis.opendocument.text": _entry("ODT", "blue", "PDF", "DOCX", "TXT"),
    "text/plain": _entry("TXT", "gray", "PDF", "DOCX", "HTML"),
    "text/html": _entry("HTML", "orange", "PDF", "TXT", "DOCX"),
    "text/markdown": _entry("MD", "gray", "PDF", "HTML", "DOCX", "TXT"),
    "application/vnd.ms-excel": _entry("XLS", "green", "XLSX", "CSV", "PDF"),
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": _entry(
        "XLSX", "green", "XLS", "CSV", "PDF"
    ),
    "text/csv": _entry("CSV", "green", "XLSX", "XLS", "JSON", "PDF"),
    "application/vnd.ms-powerpoint": _entry("PPT", "red", "PPTX", "PDF"),
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": _entry(
        "PPTX", "red", "PPT", "PDF"
    ),
    # Images
    "image/jpeg": _entry("JPG", "green", "PNG", "WEBP", "GIF", "PDF", "AVIF"),
    "image/png": _entry("PNG", "green", "JPG", "WEBP", "GIF", "PDF", "AVIF"),
    "image/webp": _entry("WEBP", "green", "JPG", "PNG", "GIF"),
    "image/gif": _entry("GIF", "green", "JPG", "PNG", "WEBP", "MP4"),
    "image/svg+xml": _entry("SVG", "green", "PNG", "JPG", "PDF"),
    "image/tiff": _entry("TIFF", "green", "JPG", "PNG", "PDF"),
    "image/bmp": _entry("BMP", "green", "JPG", "PNG", "PDF"),
    "image/avif": _entry("AVIF", "green", "JPG", "PNG", "WEBP"),
    # Audio
    "audio/mpeg": _entry("MP3", "purple", "WAV", "OGG", "AAC", "FLAC"),
    "audio/wav": _entry("WAV", "purple", "MP3", "OGG", "AAC", "FLAC"),
    "audio/ogg": _entry("OGG", "purple", "MP3", "WAV", "AAC"),
    "audio/aac": _entry("AAC", "purple", "MP3", "WAV", "OGG"),
    "audio/flac": _entry("FLAC", "purple", "MP3", "WAV", "OGG", "AAC"),
    "audio/webm": _entry("WEBM Audio", "purple", "MP3", "WAV", "OGG"),
    # Video
    "video/mp4": _entry("MP4", "orange", "AVI", "MOV", "GIF", "WEBM", "MKV"),
    "video/x-msvideo": _entry("AVI", "orange", "MP4", "MOV", "WEBM", "MKV"),
    "video/quicktime": _entry("MOV", "orange", "MP4", "AVI", "WEBM", "MKV"),
    "video/webm": _entry("WEBM", "orange", "MP4", "AVI", "MOV", "MKV"),
    "video/x-matroska": _entry("MKV", "orange", "MP4", "AVI", "WEBM"),
    "video/3gpp": _entry("3GP", "orange", "MP4", "AVI", "MOV"),
    "video/x-flv": _entry("FLV", "orange", "MP4", "AVI", "WEBM"),
    # Archives
    "application/zip": _entry("ZIP", "yellow", "RAR", "7Z", "TAR.GZ"),
    "application/x-rar-compressed": _entry("RAR", "yellow", "ZIP", "7Z", "TAR.GZ"),
    "application/x-7z-compressed": _entry("7Z", "yellow", "ZIP", "RAR", "TAR.GZ"),
    "application/gzip": _entry("GZIP", "yellow", "ZIP", "RAR", "7Z", "TAR"),
    "application/x-tar": _entry("TAR", "yellow", "ZIP", "RAR", "7Z", "TAR.GZ"),
}

DEFAULT_FILE_TYPE = FileTypeDescriptor(label="Unknown", icon="gray", conversions=[])

# Listed in the display table but no converter family handles them.
ARCHIVE_MIME_TYPES: Tuple[str, ...] = (
    "application/zip",
    "application/x-rar-compressed",
    "application/x-7z-compressed",
    "application/gzip",
    "application/x-tar",
)


def classify(mime_type: str) -> FileTypeDescriptor:
    """Return the descriptor for an exact MIME match, else ``DEFAULT_FILE_TYPE``.

    Callers get a copy, so mutating the result never touches the table.
    """
    descriptor = FILE_TYPES.get(mime_type or "", DEFAULT_FILE_TYPE)
    return descriptor.model_copy(deep=True)


def category_for(mime_type: str) -> Optional[ConversionCategory]:
    """Route a MIME type to a converter family by its prefix.

    Examples:
        >>> category_for("text/plain")
        <ConversionCategory.DOCUMENT: 'document'>
        >>> category_for("video/mp4")
        <ConversionCategory.MEDIA: 'media'>
        >>> category_for("application/zip") is None
        True
    """
    mime_type = (mime_type or "").lower()
    if mime_type in ARCHIVE_MIME_TYPES:
        return None
    if mime_type.startswith("application/") or mime_type == "text/plain":
        return ConversionCategory.DOCUMENT
    if mime_type.startswith("image/"):
        return ConversionCategory.IMAGE
    if mime_type.startswith("audio/") or mime_type.startswith("video/"):
        return ConversionCategory.MEDIA
    return None


def list_file_types() -> List[FileTypeEntry]:
    return [
        FileTypeEntry(mime_type=mime, **descriptor.model_dump())
        for mime, descriptor in FILE_TYPES.items()
    ]
