"""FastAPI router for the diagnostic upload endpoint."""
import logging
from typing import Optional

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse

from ..errors import ConvertiqError
from .schemas import UploadedFileInfo, UploadProbeResponse
from .service import get_upload_receiver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["uploads"])


@router.post("/test-upload", response_model=UploadProbeResponse)
async def test_upload(file: Optional[UploadFile] = File(None)):
    """Stage a file and describe it, without converting it.

    The staged file is left in place for manual inspection; nothing
    schedules its deletion.
    """
    try:
        form = await get_upload_receiver().receive(file)
    except ConvertiqError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception:
        logger.exception("Upload failed")
        return JSONResponse(status_code=500, content={"error": "Upload failed"})

    staged = form.file
    return UploadProbeResponse(
        fileInfo=UploadedFileInfo(
            name=staged.original_name,
            type=staged.mime_type,
            size=staged.size_bytes,
            path=staged.storage_path,
        )
    )
