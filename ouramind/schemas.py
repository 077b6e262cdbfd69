"""
schemas.py — Plain data handed to the presentation layer.

Nothing here touches the database; services build these from ORM rows so a
request layer can serialize them however it likes (``model_dump()``).
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict


DominantEmotion = tuple[str, float]

# mood name -> {"before": value, "after": value}
MoodRatings = dict[str, dict[str, Optional[int]]]


class EntryView(BaseModel):
    id: int
    text: str
    date: date
    is_public: bool = False
    public_token: Optional[str] = None


class CreatedEntry(BaseModel):
    entry_id: int
    dominant_emotions: list[DominantEmotion]


class UpdatedEntry(BaseModel):
    entry_id: int
    dominant_emotions: list[DominantEmotion]


class ToolView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    path: str


class PromptView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question: str


class MoodView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ToolUsage(ToolView):
    """Catalog row for tool administration; counts stored prompt answers."""

    usage_count: int = 0


class EntryDetail(BaseModel):
    """Everything the single-entry page shows."""

    entry: EntryView
    dominant_emotions: list[DominantEmotion]
    suggested_tools: list[ToolView]
    completed_tools: list[ToolView]


class PublicEntry(BaseModel):
    text: str
    date: date


class TrendPoint(BaseModel):
    """One calendar day. ``None`` means no entry that day had a score for the emotion."""

    date: date
    values: dict[str, Optional[float]]
