"""Pydantic models for generated meeting minutes."""
from typing import List, Optional

from pydantic import BaseModel, Field


class ActionItem(BaseModel):
    """A task assigned during the meeting."""

    task: str
    assignee: str = "Unassigned"
    deadline: str = "TBD"


class AgendaItem(BaseModel):
    """One discussed topic with its outcomes."""

    topic: str
    discussion: str = ""
    decisions: List[str] = Field(default_factory=list)
    action_items: List[ActionItem] = Field(default_factory=list)


class MeetingMinutes(BaseModel):
    """Structured minutes."""

    title: str
    date: str
    participants: List[str] = Field(default_factory=list)
    agenda_items: List[AgendaItem] = Field(default_factory=list)
    next_meeting: Optional[str] = None


class TimelineRow(BaseModel):
    """One row of the flattened timeline table."""

    time: str
    speaker: str
    topic: str
    key_points: List[str] = Field(default_factory=list)
    decisions: List[str] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)


class MinutesDocument(BaseModel):
    """Everything the LLM returns for one transcript."""

    minutes_html: str
    minutes_json: MeetingMinutes
    minutes_table: List[TimelineRow] = Field(default_factory=list)
