from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship

from ouramind.database import Base


class ReflectionToolPrompt(Base):
    __tablename__ = "reflection_tool_prompts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tool_id = Column(Integer, ForeignKey("reflection_tools.id", ondelete="CASCADE"), nullable=False)
    question = Column(Text, nullable=False)

    tool = relationship("ReflectionTool", back_populates="prompts")
