from sqlalchemy import Column, Integer, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ouramind.database import Base


class EmotionScore(Base):
    __tablename__ = "journal_emotions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    journal_entry_id = Column(
        Integer, ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False
    )
    emotion_id = Column(Integer, ForeignKey("emotions.id"), nullable=False)
    intensity = Column(Float, nullable=False)  # 0.0 - 1.0

    entry = relationship("JournalEntry", back_populates="scores")
    emotion = relationship("Emotion", lazy="joined")

    __table_args__ = (
        UniqueConstraint("journal_entry_id", "emotion_id", name="uq_entry_emotion"),
    )
