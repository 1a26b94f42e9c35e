"""FastAPI router for downloading converted files."""
import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from ..errors import ConvertiqError
from .service import get_download_responder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["downloads"])


@router.get("/download/{filename}")
async def download_file(filename: str):
    """Download a converted file by its stored filename.

    The file is deleted one retention window after it is first served.

    Raises:
        404 (text): unknown or expired filename
        500 (text): the file could not be read
    """
    try:
        payload = await get_download_responder().serve(filename)
        return Response(
            content=payload.content,
            media_type=payload.content_type,
            headers={"Content-Disposition": payload.content_disposition},
        )
    except ConvertiqError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)
    except Exception:
        logger.exception("Download failed for %s", filename)
        return PlainTextResponse("Download failed", status_code=500)
