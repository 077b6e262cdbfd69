from sqlalchemy import Column, Integer, String, Text, ForeignKey, Table
from sqlalchemy.orm import relationship

from ouramind.database import Base


# "this tool helps with these emotions"
emotion_tool_map = Table(
    "emotion_reflection_tool_map",
    Base.metadata,
    Column("emotion_id", Integer, ForeignKey("emotions.id", ondelete="CASCADE"), primary_key=True),
    Column("tool_id", Integer, ForeignKey("reflection_tools.id", ondelete="CASCADE"), primary_key=True),
)


class ReflectionTool(Base):
    __tablename__ = "reflection_tools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    path = Column(String(100), unique=True, nullable=False)  # url slug, e.g. "thought-record"

    emotions = relationship("Emotion", secondary=emotion_tool_map, order_by="Emotion.id")
    prompts = relationship(
        "ReflectionToolPrompt",
        back_populates="tool",
        order_by="ReflectionToolPrompt.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<ReflectionTool id={self.id} path={self.path!r}>"
