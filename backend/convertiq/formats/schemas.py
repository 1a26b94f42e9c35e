"""Pydantic schemas for the format classifier.

Two groupings live side by side:
- FileTypeDescriptor: fine-grained, client-facing (label, icon, targets)
- ConversionCategory: coarse, server-side routing by MIME prefix
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ConversionCategory(str, Enum):
    """Converter families the dispatcher can route to."""
    DOCUMENT = "document"
    IMAGE = "image"
    MEDIA = "media"


class FileTypeDescriptor(BaseModel):
    label: str = Field(..., description="Human-readable type label, e.g. PDF")
    icon: str = Field("gray", description="Icon colour hint for the client")
    conversions: List[str] = Field(default_factory=list, description="Allowed target format tokens, in display order")


class FileTypeEntry(FileTypeDescriptor):
    mime_type: str = Field(..., description="MIME type this entry is keyed by")


class ClassificationResponse(BaseModel):
    mime_type: str
    descriptor: FileTypeDescriptor
    category: Optional[ConversionCategory] = Field(
        None, description="Routing category, null when no converter exists"
    )
