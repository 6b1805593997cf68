"""
Minutes Service for ZapNote.

Turns a transcript into structured minutes, and answers questions about
existing minutes, using an Ollama-hosted model.

Example:
    service = MinutesService(config.minutes)

    document = await service.generate(transcript)
    print(document.minutes_json.title)

    answer = await service.answer_question("Who owns the budget review?", context)
"""
import html
import json
import logging
import re
from datetime import date
from typing import Any, Optional

import ollama
from pydantic import ValidationError

from zapnote.core.config import MinutesConfig

from .models import AgendaItem, MeetingMinutes, MinutesDocument, TimelineRow
from .prompts import (
    MINUTES_SYSTEM_PROMPT,
    MINUTES_USER_TEMPLATE,
    QA_CONTEXT_TEMPLATE,
    QA_SYSTEM_PROMPT,
    QA_USER_TEMPLATE,
)

logger = logging.getLogger(__name__)

_CODE_FENCE_START = re.compile(r'^```\w*\n')
_CODE_FENCE_END = re.compile(r'\n?```$')


class MinutesGenerationError(Exception):
    """Raised when minutes or answers cannot be produced."""
    pass


def _strip_code_fence(content: str) -> str:
    result = content.strip()
    result = _CODE_FENCE_START.sub('', result)
    result = _CODE_FENCE_END.sub('', result)
    return result.strip()


def _excerpt(content: str, limit: int) -> str:
    if len(content) <= limit:
        return content
    return content[:limit] + "..."


def build_fallback_document(content: str, today: Optional[date] = None) -> MinutesDocument:
    """Wrap a free-text model reply in the minutes structure.

    Used when the model ignores the JSON instructions.
    """
    today = today or date.today()
    body = html.escape(content).replace("\n", "<br>")
    return MinutesDocument(
        minutes_html=(
            '<div class="meeting-notes">'
            '<h2>Meeting Notes</h2>'
            f'<div class="content">{body}</div>'
            '</div>'
        ),
        minutes_json=MeetingMinutes(
            title="Generated Meeting Notes",
            date=today.isoformat(),
            participants=[],
            agenda_items=[
                AgendaItem(
                    topic="Meeting Discussion",
                    discussion=_excerpt(content, 500),
                )
            ],
        ),
        minutes_table=[
            TimelineRow(
                time="Full Meeting",
                speaker="Various",
                topic="Meeting Discussion",
                key_points=[_excerpt(content, 200)],
            )
        ],
    )


def parse_minutes(content: str) -> Optional[MinutesDocument]:
    """Parse the model reply as a MinutesDocument; None when it is not valid JSON minutes."""
    try:
        data = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as e:
        logger.info(f"Model reply is not JSON ({e}), using fallback structure")
        return None

    try:
        return MinutesDocument.model_validate(data)
    except ValidationError as e:
        logger.info(f"Model reply does not match minutes schema ({e.error_count()} errors), using fallback structure")
        return None


class MinutesService:
    """
    Service for generating meeting minutes and answering questions.

    The model is treated as an opaque text-to-JSON function; any reply
    that does not parse is wrapped by build_fallback_document().
    """

    def __init__(self, config: Optional[MinutesConfig] = None, client: Optional[Any] = None):
        """
        Initialize the minutes service.

        Args:
            config: Model and sampling settings.
            client: Ollama async client (created from config when omitted).
        """
        self._config = config or MinutesConfig()
        self._client = client or ollama.AsyncClient(
            host=self._config.host,
            timeout=self._config.request_timeout_seconds,
        )

    @property
    def model(self) -> str:
        return self._config.model

    async def _chat(self, system_prompt: str, user_prompt: str, **kwargs) -> str:
        try:
            response = await self._client.chat(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **kwargs,
            )
        except Exception as e:
            logger.error(f"Ollama request failed (model={self._config.model}): {e}")
            raise MinutesGenerationError(f"LLM request failed: {e}") from e

        content = response.get("message", {}).get("content", "")
        if not content:
            logger.error(f"Ollama returned an empty reply (model={self._config.model})")
            raise MinutesGenerationError("LLM returned an empty response")
        return content

    async def generate(self, transcript: str) -> MinutesDocument:
        """
        Generate structured minutes from a transcript.

        Args:
            transcript: Extracted transcript text.

        Returns:
            MinutesDocument (fallback structure when the reply is not valid JSON).

        Raises:
            MinutesGenerationError: Empty transcript or failed LLM call.
        """
        if not transcript or not transcript.strip():
            raise MinutesGenerationError("Transcript is required")

        logger.info(f"Generating meeting minutes for transcript length: {len(transcript)}")
        content = await self._chat(
            MINUTES_SYSTEM_PROMPT,
            MINUTES_USER_TEMPLATE.format(transcript=transcript),
            format="json",
            options={
                "temperature": self._config.temperature,
                "num_predict": self._config.max_tokens,
            },
        )
        logger.info(f"Generated content length: {len(content)}")

        return parse_minutes(content) or build_fallback_document(content)

    async def answer_question(self, question: str, context: Optional[str] = None) -> str:
        """
        Answer a question about meeting minutes.

        Args:
            question: User question.
            context: Minutes and/or transcript text to answer from.

        Returns:
            The model's answer.

        Raises:
            MinutesGenerationError: Empty question or failed LLM call.
        """
        if not question or not question.strip():
            raise MinutesGenerationError("Question is required")

        logger.info(f"Processing Q&A for question: {question[:100]}")
        context_block = QA_CONTEXT_TEMPLATE.format(context=context) if context else ""
        answer = await self._chat(
            QA_SYSTEM_PROMPT,
            QA_USER_TEMPLATE.format(context_block=context_block, question=question),
            options={
                "temperature": self._config.qa_temperature,
                "num_predict": self._config.qa_max_tokens,
            },
        )
        logger.info(f"Generated answer length: {len(answer)}")
        return answer
