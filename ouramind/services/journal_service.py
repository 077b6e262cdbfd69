"""
journal_service.py — Encrypted journal entries
Create/read/update/delete of entries scoped to their owner. Content is
encrypted before it reaches the database and classified before anything is
written, so a failed classification never leaves a half-written entry.
Every classified emotion is stored; only the returned selection is thresholded.
"""

import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from ouramind.config import EMOTION_THRESHOLD, EMOTION_LIMIT
from ouramind.errors import NotFound, ValidationFailed, ConfigurationError
from ouramind.models.emotion import Emotion
from ouramind.models.emotion_score import EmotionScore
from ouramind.models.journal import JournalEntry
from ouramind.models.reflection_tool_mood_rating import ReflectionToolMoodRating
from ouramind.models.reflection_tool_response import ReflectionToolResponse
from ouramind.schemas import CreatedEntry, UpdatedEntry, EntryView, EntryDetail
from ouramind.services.cipher import EntryCipher
from ouramind.services.classifier_gateway import ClassifierGateway
from ouramind.services.emotion_selector import select_dominant
from ouramind.services.tool_service import ToolService

logger = logging.getLogger(__name__)


class JournalService:
    def __init__(
        self,
        db: Session,
        cipher: EntryCipher,
        gateway: ClassifierGateway,
        threshold: float = EMOTION_THRESHOLD,
        limit: int = EMOTION_LIMIT,
    ):
        self.db = db
        self.cipher = cipher
        self.gateway = gateway
        self.threshold = threshold
        self.limit = limit

    # ------------------------------------------------------------------
    def create(self, user_id: int, plaintext: str, on: date | None = None) -> CreatedEntry:
        """Encrypt, classify and store a new entry with one score row per emotion."""
        self._require_content(plaintext)
        ciphertext = self.cipher.encrypt(plaintext)
        scores = self.gateway.classify(plaintext)
        emotion_ids = self._emotion_ids(scores)

        try:
            entry = JournalEntry(
                user_id=user_id,
                ciphertext=ciphertext,
                date=on or datetime.now(timezone.utc).date(),
            )
            entry.scores = [
                EmotionScore(emotion_id=emotion_ids[name], intensity=intensity)
                for name, intensity in scores.items()
            ]
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except Exception:
            self.db.rollback()
            raise

        dominant = select_dominant(scores, self.threshold, self.limit, self.gateway.catalog)
        logger.info(
            f"Created entry {entry.id} for user {user_id} "
            f"({len(scores)} scores, dominant={[name for name, _ in dominant]})"
        )
        return CreatedEntry(entry_id=entry.id, dominant_emotions=dominant)

    def get(self, entry_id: int, user_id: int) -> EntryView:
        return self._to_view(self._owned(entry_id, user_id))

    def update(self, entry_id: int, user_id: int, plaintext: str) -> UpdatedEntry:
        """Re-encrypt and re-classify; the score set is swapped in the same transaction."""
        entry = self._owned(entry_id, user_id)
        self._require_content(plaintext)
        ciphertext = self.cipher.encrypt(plaintext)
        scores = self.gateway.classify(plaintext)
        emotion_ids = self._emotion_ids(scores)

        try:
            entry.ciphertext = ciphertext
            entry.updated_at = datetime.now(timezone.utc)
            self.db.query(EmotionScore).filter(
                EmotionScore.journal_entry_id == entry.id
            ).delete()
            self.db.expire(entry, ["scores"])
            # flush the delete before inserting so the (entry, emotion) key is free
            self.db.flush()
            for name, intensity in scores.items():
                self.db.add(EmotionScore(
                    journal_entry_id=entry.id,
                    emotion_id=emotion_ids[name],
                    intensity=intensity,
                ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        dominant = select_dominant(scores, self.threshold, self.limit, self.gateway.catalog)
        logger.info(f"Updated entry {entry_id} for user {user_id} ({len(scores)} scores replaced)")
        return UpdatedEntry(entry_id=entry_id, dominant_emotions=dominant)

    def delete(self, entry_id: int, user_id: int) -> None:
        """Remove scores and reflections first, then the entry, all in one transaction."""
        entry = self._owned(entry_id, user_id)
        try:
            self.db.query(ReflectionToolResponse).filter(
                ReflectionToolResponse.journal_entry_id == entry.id
            ).delete()
            self.db.query(ReflectionToolMoodRating).filter(
                ReflectionToolMoodRating.journal_entry_id == entry.id
            ).delete()
            self.db.query(EmotionScore).filter(
                EmotionScore.journal_entry_id == entry.id
            ).delete()
            self.db.query(JournalEntry).filter(
                JournalEntry.id == entry.id, JournalEntry.user_id == user_id
            ).delete()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Deleted entry {entry_id} for user {user_id}")

    # ------------------------------------------------------------------
    def list_entries(self, user_id: int) -> list[EntryView]:
        """All of a user's entries, newest first, decrypted."""
        entries = (
            self.db.query(JournalEntry)
            .filter(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.date.desc(), JournalEntry.id.desc())
            .all()
        )
        return [self._to_view(e) for e in entries]

    def dominant_for_entry(self, entry_id: int, user_id: int) -> list[tuple[str, float]]:
        """Re-run the selection policy over an entry's stored scores."""
        entry = self._owned(entry_id, user_id)
        rows = (
            self.db.query(Emotion.name, EmotionScore.intensity)
            .join(EmotionScore, EmotionScore.emotion_id == Emotion.id)
            .filter(EmotionScore.journal_entry_id == entry.id)
            .all()
        )
        scores = {name: intensity for name, intensity in rows}
        return select_dominant(scores, self.threshold, self.limit, self.gateway.catalog)

    def detail(self, entry_id: int, user_id: int) -> EntryDetail:
        """Entry text plus its dominant emotions, suggested tools and finished reflections."""
        view = self.get(entry_id, user_id)
        dominant = self.dominant_for_entry(entry_id, user_id)
        tools = ToolService(self.db)
        return EntryDetail(
            entry=view,
            dominant_emotions=dominant,
            suggested_tools=tools.suggest(dominant),
            completed_tools=tools.completed_tools(entry_id, user_id),
        )

    # ------------------------------------------------------------------
    def _owned(self, entry_id: int, user_id: int) -> JournalEntry:
        # Foreign entries look exactly like missing ones
        entry = (
            self.db.query(JournalEntry)
            .filter(JournalEntry.id == entry_id, JournalEntry.user_id == user_id)
            .first()
        )
        if entry is None:
            raise NotFound(f"Journal entry {entry_id} not found")
        return entry

    def _emotion_ids(self, scores: dict[str, float]) -> dict[str, int]:
        rows = self.db.query(Emotion).filter(Emotion.name.in_(list(scores))).all()
        ids = {e.name: e.id for e in rows}
        missing = [name for name in scores if name not in ids]
        if missing:
            raise ConfigurationError(f"Emotion catalog is missing {missing}; run init_db()")
        return ids

    @staticmethod
    def _require_content(plaintext: str) -> None:
        if not isinstance(plaintext, str) or not plaintext.strip():
            raise ValidationFailed("Journal entry content must not be empty")

    def _to_view(self, entry: JournalEntry) -> EntryView:
        return EntryView(
            id=entry.id,
            text=self.cipher.decrypt(entry.ciphertext),
            date=entry.date,
            is_public=bool(entry.is_public),
            public_token=entry.public_token,
        )
