"""FastAPI router exposing the file-type table to clients."""
from typing import List

from fastapi import APIRouter, Query

from .classifier import category_for, classify, list_file_types
from .schemas import ClassificationResponse, FileTypeEntry

router = APIRouter(prefix="/api/formats", tags=["formats"])


@router.get("", response_model=List[FileTypeEntry])
async def get_file_types() -> List[FileTypeEntry]:
    """List every known MIME type with its label, icon and conversion targets."""
    return list_file_types()


@router.get("/classify", response_model=ClassificationResponse)
async def classify_mime_type(mime_type: str = Query(..., description="MIME type to look up")):
    """Classify one MIME type.

    Unknown types come back as the "Unknown" descriptor with no targets and
    a null category; this endpoint never fails for a well-formed query.
    """
    return ClassificationResponse(
        mime_type=mime_type,
        descriptor=classify(mime_type),
        category=category_for(mime_type),
    )
