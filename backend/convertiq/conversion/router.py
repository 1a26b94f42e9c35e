"""FastAPI router for POST /api/convert.

Ties the components together for one request:
upload receiver -> dispatcher -> lifecycle manager.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from ..errors import (
    ConversionError,
    ConvertiqError,
    InvalidTargetFormatError,
    MissingTargetFormatError,
    UnexpectedError,
    UnsupportedTypeError,
)
from ..lifecycle.manager import get_lifecycle_manager
from ..uploads.service import get_upload_receiver
from .dispatcher import build_output_filename, get_dispatcher, is_valid_target_format, new_download_id
from .schemas import ConversionRequest, ConvertResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["conversion"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/convert", response_model=ConvertResponse)
async def convert_file(
    file: Optional[UploadFile] = File(None),
    targetFormat: Optional[str] = Form(None),
):
    """Upload a file and convert it to *targetFormat*.

    On success the input is deleted and the output is kept for one retention
    window, downloadable via GET /api/download/{filename}. On any failure
    every file this request created is deleted and no output reference is
    returned.

    Returns:
        200 ConvertResponse on success
        400 {"error"} for missing file, missing/invalid format, unsupported type
        413 {"error"} when the upload exceeds the size limit
        500 {"error"} for converter or unexpected failures
    """
    receiver = get_upload_receiver()
    dispatcher = get_dispatcher()
    lifecycle = get_lifecycle_manager()

    to_cleanup: List[str] = []
    output_path: Optional[str] = None

    try:
        fields = {"targetFormat": targetFormat} if targetFormat is not None else {}
        form = await receiver.receive(file, fields)
        staged = form.file
        to_cleanup.append(staged.storage_path)

        target = form.fields.get("targetFormat", "").strip()
        if not target:
            raise MissingTargetFormatError()
        if not is_valid_target_format(target):
            raise InvalidTargetFormatError()
        if not dispatcher.supports(staged.mime_type):
            raise UnsupportedTypeError()

        output_filename = build_output_filename(staged.original_name, target)
        output_path = str(receiver.staging_dir / output_filename)

        result = await dispatcher.convert(ConversionRequest(input=staged, target_format=target), output_path)
        if not result.success:
            to_cleanup.append(output_path)
            raise ConversionError(result.error_message or "Conversion failed")

        await lifecycle.discard(to_cleanup)
        await lifecycle.retain(result.output_path)

        logger.info(f"Converted {staged.original_name} -> {output_filename}")

        return ConvertResponse(
            download_id=new_download_id(),
            filename=output_filename,
            original_name=staged.original_name,
            converted_format=target,
        )

    except ConvertiqError as e:
        await lifecycle.discard(to_cleanup)
        logger.info("Conversion rejected (%s): %s", e.status_code, e.message)
        return _error(e.status_code, e.message)
    except Exception as e:
        logger.exception("Conversion error")
        await lifecycle.discard(to_cleanup + [output_path])
        return _error(500, UnexpectedError(str(e)).message)
