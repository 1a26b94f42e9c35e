"""Types for conversion requests, converter results and the convert API."""
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..uploads.schemas import StagedFile


@dataclass
class ConversionRequest:
    """One dispatch call: a staged input and the requested target token."""
    input: StagedFile
    target_format: str

    def __post_init__(self) -> None:
        self.target_format = self.target_format.strip().upper()


@dataclass
class ConversionResult:
    """Outcome of a converter.

    Attributes:
        success: Whether an output file was produced.
        output_path: Path of the output; set iff success.
        error_message: Why conversion failed; set iff not success.
    """
    success: bool
    output_path: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, output_path: str) -> "ConversionResult":
        return cls(success=True, output_path=output_path)

    @classmethod
    def failed(cls, error_message: str) -> "ConversionResult":
        return cls(success=False, error_message=error_message)


class ConvertResponse(BaseModel):
    """Body of a successful POST /api/convert."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    download_id: str = Field(..., alias="downloadId")
    filename: str = Field(..., description="Stored output filename, used for download")
    original_name: str = Field(..., alias="originalName")
    converted_format: str = Field(..., alias="convertedFormat")
