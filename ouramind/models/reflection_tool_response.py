from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index

from ouramind.database import Base


class ReflectionToolResponse(Base):
    """One answer to one tool prompt, written while reflecting on a journal entry."""
    __tablename__ = "reflection_tool_responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    journal_entry_id = Column(
        Integer, ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False
    )
    tool_id = Column(Integer, ForeignKey("reflection_tools.id", ondelete="CASCADE"), nullable=False)
    prompt_id = Column(
        Integer, ForeignKey("reflection_tool_prompts.id", ondelete="CASCADE"), nullable=False
    )
    response = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_response_user_entry_tool", "user_id", "journal_entry_id", "tool_id"),
    )
