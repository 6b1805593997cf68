"""
Minutes API

Generates structured minutes from transcript text and answers questions
about them.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from zapnote.dependencies import get_minutes_service
from zapnote.minutes import MinutesDocument, MinutesGenerationError, MinutesService

logger = logging.getLogger(__name__)
router = APIRouter()


class GenerateMinutesRequest(BaseModel):
    """Transcript to summarize."""
    transcript: str


class QuestionRequest(BaseModel):
    """Question about a meeting, with the minutes/transcript as context."""
    question: str
    context: Optional[str] = None


class AnswerResponse(BaseModel):
    """Answer to a question."""
    answer: str


@router.post("/generate", response_model=MinutesDocument)
async def generate_minutes(
    request: GenerateMinutesRequest,
    service: MinutesService = Depends(get_minutes_service),
):
    """
    Generate meeting minutes from a transcript.

    Returns:
        MinutesDocument with HTML, structured JSON and timeline table
    """
    if not request.transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript is required")

    try:
        return await service.generate(request.transcript)
    except MinutesGenerationError as e:
        logger.error(f"Failed to generate meeting minutes: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to generate meeting minutes: {e}")


@router.post("/ask", response_model=AnswerResponse)
async def ask_question(
    request: QuestionRequest,
    service: MinutesService = Depends(get_minutes_service),
):
    """
    Answer a question about a meeting.

    Returns:
        AnswerResponse with the model's answer
    """
    if not request.question.strip():
        raise HTTPException(status_code=400, detail="Question is required")

    try:
        answer = await service.answer_question(request.question, request.context)
    except MinutesGenerationError as e:
        logger.error(f"Failed to process question: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to process question: {e}")

    return AnswerResponse(answer=answer)
