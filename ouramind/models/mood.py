from sqlalchemy import Column, Integer, String

from ouramind.database import Base


class Mood(Base):
    """Moods a user rates before and after working through a reflection tool."""
    __tablename__ = "moods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
