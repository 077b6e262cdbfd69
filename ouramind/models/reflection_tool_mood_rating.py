from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ouramind.database import Base


class ReflectionToolMoodRating(Base):
    """A before- or after-reflection rating of one mood, for one tool on one entry."""
    __tablename__ = "reflection_tool_mood_ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    journal_entry_id = Column(
        Integer, ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False
    )
    tool_id = Column(Integer, ForeignKey("reflection_tools.id", ondelete="CASCADE"), nullable=False)
    mood_id = Column(Integer, ForeignKey("moods.id", ondelete="CASCADE"), nullable=False)
    kind = Column("type", String(10), nullable=False)  # "before" | "after"
    value = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    mood = relationship("Mood", lazy="joined")

    __table_args__ = (
        UniqueConstraint(
            "user_id", "journal_entry_id", "tool_id", "mood_id", "type", name="uq_mood_rating"
        ),
    )
