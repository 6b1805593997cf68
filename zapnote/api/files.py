"""
Transcript Upload API

Accepts a transcript file, extracts its text and reports whether the
text is usable. Extraction failures are returned as data
(``success=false`` plus a user-facing message), not as HTTP errors.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from zapnote.core.config import Config
from zapnote.dependencies import get_config, get_extraction_router
from zapnote.extraction import ExtractionRequest, FileExtractionRouter

logger = logging.getLogger(__name__)
router = APIRouter()


class ExtractionResponse(BaseModel):
    """Response for a single transcript upload."""
    success: bool
    filename: str
    text: str = ""
    failure_reason: Optional[str] = None
    message: Optional[str] = None
    page_count: Optional[int] = None
    extractor: str
    strategy: Optional[str] = None
    metadata: Dict[str, Any] = {}


@router.post("/extract", response_model=ExtractionResponse)
async def extract_transcript(
    file: UploadFile = File(...),
    config: Config = Depends(get_config),
    extraction_router: FileExtractionRouter = Depends(get_extraction_router),
):
    """
    Extract transcript text from an uploaded TXT, PDF or DOCX file.

    Args:
        file: Uploaded transcript

    Returns:
        ExtractionResponse with the text or the reason extraction failed
    """
    filename = file.filename or "unnamed"
    file_data = await file.read()
    logger.info(f"Received {filename} ({len(file_data)} bytes, {file.content_type})")

    max_bytes = config.server.max_upload_bytes
    if len(file_data) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large (max {config.server.max_upload_mb}MB)",
        )
    if not file_data:
        raise HTTPException(status_code=400, detail="Empty file")

    result = await extraction_router.extract(
        ExtractionRequest(data=file_data, mimetype=file.content_type, filename=filename)
    )

    if result.succeeded:
        logger.info(f"Extracted {len(result.text)} chars from {filename} via {result.strategy}")
    else:
        logger.info(f"Extraction failed for {filename}: {result.failure_reason.value}")

    return ExtractionResponse(
        success=result.succeeded,
        filename=filename,
        text=result.text,
        failure_reason=result.failure_reason.value if result.failure_reason else None,
        message=result.message,
        page_count=result.page_count,
        extractor=result.extractor_name,
        strategy=result.strategy,
        metadata=result.metadata,
    )
