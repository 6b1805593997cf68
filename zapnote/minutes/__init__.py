"""Meeting minutes generation and Q&A."""
from .models import ActionItem, AgendaItem, MeetingMinutes, MinutesDocument, TimelineRow
from .service import MinutesGenerationError, MinutesService, build_fallback_document, parse_minutes

__all__ = [
    "ActionItem",
    "AgendaItem",
    "MeetingMinutes",
    "MinutesDocument",
    "TimelineRow",
    "MinutesGenerationError",
    "MinutesService",
    "build_fallback_document",
    "parse_minutes",
]
