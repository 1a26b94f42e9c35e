"""Pydantic schemas for staged uploads.

A StagedFile is created when a multipart file part is written to the staging
directory. The request that created it owns it until it is handed to the
conversion dispatcher; the lifecycle manager deletes it.
"""
from dataclasses import dataclass, field
from typing import Dict

from pydantic import BaseModel, Field


class StagedFile(BaseModel):
    storage_path: str = Field(..., description="Absolute path on disk, unique per upload")
    original_name: str = Field(..., description="Filename as sent by the client")
    mime_type: str = Field(..., description="MIME type declared by the client")
    size_bytes: int = Field(..., description="Number of bytes written")


@dataclass
class UploadForm:
    """Result of receiving one multipart submission."""
    file: StagedFile
    fields: Dict[str, str] = field(default_factory=dict)


class UploadedFileInfo(BaseModel):
    name: str
    type: str
    size: int
    path: str


class UploadProbeResponse(BaseModel):
    """Response of the diagnostic upload endpoint."""
    success: bool = True
    fileInfo: UploadedFileInfo
