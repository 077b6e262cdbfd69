from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, Index
from sqlalchemy.orm import relationship

from ouramind.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)  # owner, issued by the auth layer
    ciphertext = Column(Text, nullable=False)  # "<b64 iv>:<b64 ciphertext+tag>"
    date = Column(Date, nullable=False, default=lambda: _utcnow().date())  # trend bucket
    is_public = Column(Boolean, nullable=False, default=False)
    public_token = Column(String(64), nullable=True, unique=True)  # set iff is_public
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, nullable=True)

    scores = relationship(
        "EmotionScore",
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_journal_user_date", "user_id", "date"),
    )

    def __repr__(self):
        return f"<JournalEntry id={self.id} user_id={self.user_id}>"
