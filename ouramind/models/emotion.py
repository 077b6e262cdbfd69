from sqlalchemy import Column, Integer, String

from ouramind.database import Base


class Emotion(Base):
    """Fixed catalog row (joy, sadness, anger, fear, disgust). Seeded, never edited here."""
    __tablename__ = "emotions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
