"""
tool_service.py — Reflection tools
Suggests tools for an entry's dominant emotions, manages the tool catalog
(tool + prompts + emotion mappings, written all-or-nothing) and stores what a
user submits when working through a tool for one entry: answers to the tool's
prompts and before/after ratings of each mood.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ouramind.config import MOOD_RATING_MIN, MOOD_RATING_MAX
from ouramind.errors import NotFound, ValidationFailed
from ouramind.models.emotion import Emotion
from ouramind.models.journal import JournalEntry
from ouramind.models.mood import Mood
from ouramind.models.reflection_tool import ReflectionTool, emotion_tool_map
from ouramind.models.reflection_tool_mood_rating import ReflectionToolMoodRating
from ouramind.models.reflection_tool_prompt import ReflectionToolPrompt
from ouramind.models.reflection_tool_response import ReflectionToolResponse
from ouramind.schemas import ToolView, ToolUsage, PromptView, MoodView, MoodRatings

logger = logging.getLogger(__name__)

RATING_KINDS = ("before", "after")


class ToolService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    def suggest(self, dominant_emotions: list[tuple[str, float]]) -> list[ToolView]:
        """
        Tools mapped to any dominant emotion, each tool once.

        Grouped by the first emotion that matched it, in the order the
        emotions are given; within one emotion, by tool id.
        """
        seen: set[int] = set()
        suggestions: list[ToolView] = []
        for name, _intensity in dominant_emotions:
            tools = (
                self.db.query(ReflectionTool)
                .join(emotion_tool_map, emotion_tool_map.c.tool_id == ReflectionTool.id)
                .join(Emotion, Emotion.id == emotion_tool_map.c.emotion_id)
                .filter(Emotion.name == name)
                .order_by(ReflectionTool.id)
                .all()
            )
            for tool in tools:
                if tool.id in seen:
                    continue
                seen.add(tool.id)
                suggestions.append(ToolView.model_validate(tool))
        return suggestions

    # ------------------------------------------------------------------
    def get_by_path(self, path: str) -> ReflectionTool:
        tool = self.db.query(ReflectionTool).filter(ReflectionTool.path == path).first()
        if tool is None:
            raise NotFound(f"Reflection tool '{path}' not found")
        return tool

    def get_prompts(self, tool_id: int) -> list[PromptView]:
        return [PromptView.model_validate(p) for p in self._tool(tool_id).prompts]

    def get_tool_emotions(self, tool_id: int) -> list[str]:
        """Names of the emotions a tool is mapped to, in catalog order."""
        return [e.name for e in self._tool(tool_id).emotions]

    def list_tools(self) -> list[ToolView]:
        tools = self.db.query(ReflectionTool).order_by(ReflectionTool.name).all()
        return [ToolView.model_validate(t) for t in tools]

    def tool_usage(self) -> list[ToolUsage]:
        """Every tool with the number of prompt answers stored for it, by name."""
        rows = (
            self.db.query(ReflectionTool, func.count(ReflectionToolResponse.id))
            .outerjoin(ReflectionToolResponse, ReflectionToolResponse.tool_id == ReflectionTool.id)
            .group_by(ReflectionTool.id)
            .order_by(ReflectionTool.name)
            .all()
        )
        return [
            ToolUsage(**ToolView.model_validate(tool).model_dump(), usage_count=count)
            for tool, count in rows
        ]

    def list_moods(self) -> list[MoodView]:
        return [MoodView.model_validate(m) for m in self.db.query(Mood).order_by(Mood.id).all()]

    def create_tool(
        self,
        name: str,
        path: str,
        description: str | None = None,
        instructions: str | None = None,
        prompts: list[str] | None = None,
        emotions: list[str] | None = None,
    ) -> ToolView:
        """Create a tool with its prompts and emotion mappings in one transaction."""
        name, path = self._require_name_and_path(name, path)
        if self._path_taken(path):
            raise ValidationFailed(f"A tool with path '{path}' already exists")
        wanted, found = self._resolve_emotions(emotions or [])

        try:
            tool = ReflectionTool(
                name=name,
                path=path,
                description=description,
                instructions=instructions,
            )
            tool.emotions = found
            tool.prompts = [
                ReflectionToolPrompt(question=q) for q in (prompts or []) if q and q.strip()
            ]
            self.db.add(tool)
            self.db.commit()
            self.db.refresh(tool)
        except IntegrityError as e:
            # lost a race with another writer on the unique path
            self.db.rollback()
            raise ValidationFailed(f"A tool with path '{path}' already exists") from e
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Created reflection tool {tool.id} ({tool.path}) for {wanted}")
        return ToolView.model_validate(tool)

    def update_tool(
        self,
        tool_id: int,
        name: str,
        path: str,
        description: str | None = None,
        instructions: str | None = None,
        emotions: list[str] | None = None,
    ) -> ToolView:
        """
        Overwrite a tool's details. ``emotions=None`` keeps the current
        mappings; a list replaces them. Prompts are left alone so stored
        answers keep pointing at the questions they answered.
        """
        tool = self._tool(tool_id)
        name, path = self._require_name_and_path(name, path)
        if self._path_taken(path, exclude_id=tool_id):
            raise ValidationFailed(f"A tool with path '{path}' already exists")
        found = self._resolve_emotions(emotions)[1] if emotions is not None else None

        try:
            tool.name = name
            tool.path = path
            tool.description = description
            tool.instructions = instructions
            if found is not None:
                tool.emotions = found
            self.db.commit()
            self.db.refresh(tool)
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationFailed(f"A tool with path '{path}' already exists") from e
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Updated reflection tool {tool_id} ({tool.path})")
        return ToolView.model_validate(tool)

    def delete_tool(self, tool_id: int) -> None:
        tool = self._tool(tool_id)
        try:
            self.db.query(ReflectionToolResponse).filter(
                ReflectionToolResponse.tool_id == tool_id
            ).delete()
            self.db.query(ReflectionToolMoodRating).filter(
                ReflectionToolMoodRating.tool_id == tool_id
            ).delete()
            self.db.delete(tool)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Deleted reflection tool {tool_id}")

    # ------------------------------------------------------------------
    def save_reflection(
        self,
        user_id: int,
        entry_id: int,
        path: str,
        answers: dict[int, str],
        ratings: MoodRatings | None = None,
    ) -> None:
        """
        Store the user's answers and mood ratings for one tool on one entry.

        Replaces any earlier submission for the same (user, entry, tool) in a
        single transaction. Every prompt and every mood gets a row; whatever
        was not answered or rated is stored as None.
        """
        self._require_entry(entry_id, user_id)
        tool = self.get_by_path(path)
        prompt_ids = [p.id for p in tool.prompts]
        stray = sorted(set(answers) - set(prompt_ids))
        if stray:
            raise ValidationFailed(f"Answers for prompts not in '{path}': {stray}")
        moods = self.db.query(Mood).order_by(Mood.id).all()
        ratings = self._validate_ratings(ratings or {}, {m.name for m in moods})

        try:
            self._responses_query(user_id, entry_id, tool.id).delete()
            self._ratings_query(user_id, entry_id, tool.id).delete()
            for prompt_id in prompt_ids:
                self.db.add(ReflectionToolResponse(
                    user_id=user_id,
                    journal_entry_id=entry_id,
                    tool_id=tool.id,
                    prompt_id=prompt_id,
                    response=answers.get(prompt_id),
                ))
            for mood in moods:
                given = ratings.get(mood.name, {})
                for kind in RATING_KINDS:
                    self.db.add(ReflectionToolMoodRating(
                        user_id=user_id,
                        journal_entry_id=entry_id,
                        tool_id=tool.id,
                        mood_id=mood.id,
                        kind=kind,
                        value=given.get(kind),
                    ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Saved reflection '{path}' on entry {entry_id} for user {user_id}")

    def get_reflection(self, user_id: int, entry_id: int, path: str) -> dict[int, str | None]:
        """prompt id -> response for a submitted reflection; empty if none."""
        self._require_entry(entry_id, user_id)
        tool = self.get_by_path(path)
        rows = self._responses_query(user_id, entry_id, tool.id).all()
        return {r.prompt_id: r.response for r in rows}

    def get_mood_ratings(self, user_id: int, entry_id: int, path: str) -> MoodRatings:
        """mood name -> {"before": value, "after": value}; empty if nothing was submitted."""
        self._require_entry(entry_id, user_id)
        tool = self.get_by_path(path)
        ratings: MoodRatings = {}
        for row in self._ratings_query(user_id, entry_id, tool.id).order_by(ReflectionToolMoodRating.mood_id):
            ratings.setdefault(row.mood.name, {})[row.kind] = row.value
        return ratings

    def delete_reflection(self, user_id: int, entry_id: int, path: str) -> None:
        self._require_entry(entry_id, user_id)
        tool = self.get_by_path(path)
        try:
            self._responses_query(user_id, entry_id, tool.id).delete()
            self._ratings_query(user_id, entry_id, tool.id).delete()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def completed_tools(self, entry_id: int, user_id: int) -> list[ToolView]:
        """Distinct tools the user has already answered for this entry."""
        tools = (
            self.db.query(ReflectionTool)
            .join(ReflectionToolResponse, ReflectionToolResponse.tool_id == ReflectionTool.id)
            .filter(
                ReflectionToolResponse.journal_entry_id == entry_id,
                ReflectionToolResponse.user_id == user_id,
            )
            .distinct()
            .order_by(ReflectionTool.id)
            .all()
        )
        return [ToolView.model_validate(t) for t in tools]

    # ------------------------------------------------------------------
    def _tool(self, tool_id: int) -> ReflectionTool:
        tool = self.db.get(ReflectionTool, tool_id)
        if tool is None:
            raise NotFound(f"Reflection tool {tool_id} not found")
        return tool

    def _path_taken(self, path: str, exclude_id: int | None = None) -> bool:
        query = self.db.query(ReflectionTool.id).filter(ReflectionTool.path == path)
        if exclude_id is not None:
            query = query.filter(ReflectionTool.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def _require_name_and_path(name: str, path: str) -> tuple[str, str]:
        if not name or not name.strip():
            raise ValidationFailed("Tool name must not be empty")
        if not path or not path.strip():
            raise ValidationFailed("Tool path must not be empty")
        return name.strip(), path.strip()

    def _resolve_emotions(self, emotions: list[str]) -> tuple[list[str], list[Emotion]]:
        wanted = list(dict.fromkeys(emotions))
        found = (
            self.db.query(Emotion).filter(Emotion.name.in_(wanted)).order_by(Emotion.id).all()
            if wanted else []
        )
        unknown = sorted(set(wanted) - {e.name for e in found})
        if unknown:
            raise ValidationFailed(f"Unknown emotions: {unknown}")
        return wanted, found

    @staticmethod
    def _validate_ratings(ratings: MoodRatings, moods: set[str]) -> MoodRatings:
        unknown = sorted(set(ratings) - moods)
        if unknown:
            raise ValidationFailed(f"Unknown moods: {unknown}")
        for mood, pair in ratings.items():
            if not isinstance(pair, dict) or set(pair) - set(RATING_KINDS):
                raise ValidationFailed(f"Rating for '{mood}' must use the keys {list(RATING_KINDS)}")
            for kind, value in pair.items():
                if value is None:
                    continue
                if (
                    isinstance(value, bool)
                    or not isinstance(value, int)
                    or not MOOD_RATING_MIN <= value <= MOOD_RATING_MAX
                ):
                    raise ValidationFailed(
                        f"{kind} rating for '{mood}' must be an integer "
                        f"from {MOOD_RATING_MIN} to {MOOD_RATING_MAX}"
                    )
        return ratings

    def _responses_query(self, user_id: int, entry_id: int, tool_id: int):
        return self.db.query(ReflectionToolResponse).filter(
            ReflectionToolResponse.user_id == user_id,
            ReflectionToolResponse.journal_entry_id == entry_id,
            ReflectionToolResponse.tool_id == tool_id,
        )

    def _ratings_query(self, user_id: int, entry_id: int, tool_id: int):
        return self.db.query(ReflectionToolMoodRating).filter(
            ReflectionToolMoodRating.user_id == user_id,
            ReflectionToolMoodRating.journal_entry_id == entry_id,
            ReflectionToolMoodRating.tool_id == tool_id,
        )

    def _require_entry(self, entry_id: int, user_id: int) -> None:
        exists = (
            self.db.query(JournalEntry.id)
            .filter(JournalEntry.id == entry_id, JournalEntry.user_id == user_id)
            .first()
        )
        if exists is None:
            raise NotFound(f"Journal entry {entry_id} not found")
