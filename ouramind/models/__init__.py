# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from ouramind.models.emotion import Emotion
from ouramind.models.mood import Mood
from ouramind.models.journal import JournalEntry
from ouramind.models.emotion_score import EmotionScore
from ouramind.models.reflection_tool import ReflectionTool, emotion_tool_map
from ouramind.models.reflection_tool_prompt import ReflectionToolPrompt
from ouramind.models.reflection_tool_response import ReflectionToolResponse
from ouramind.models.reflection_tool_mood_rating import ReflectionToolMoodRating

__all__ = [
    "Emotion",
    "Mood",
    "JournalEntry",
    "EmotionScore",
    "ReflectionTool",
    "emotion_tool_map",
    "ReflectionToolPrompt",
    "ReflectionToolResponse",
    "ReflectionToolMoodRating",
]
