"""
trend_service.py — Mood trends for charting
Buckets a user's stored emotion scores by calendar day and emotion and returns
one averaged point per day that has entries. A missing (day, emotion) pair is
None, never 0.0, so "not measured" stays distinguishable from "measured low".
"""

import logging
from datetime import date, datetime, timezone, timedelta

from sqlalchemy.orm import Session

from ouramind.config import EMOTION_CATALOG
from ouramind.errors import ValidationFailed
from ouramind.models.emotion import Emotion
from ouramind.models.emotion_score import EmotionScore
from ouramind.models.journal import JournalEntry
from ouramind.schemas import TrendPoint

logger = logging.getLogger(__name__)


def _parse_day(value, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationFailed(f"{field} must be an ISO date (YYYY-MM-DD)") from e
    raise ValidationFailed(f"{field} is required")


class TrendService:
    def __init__(self, db: Session):
        self.db = db

    def last_days(
        self,
        user_id: int,
        days: int = 30,
        emotions: list[str] | None = None,
        today: date | None = None,
    ) -> list[TrendPoint]:
        """Rolling window: the last `days` calendar days, today included."""
        if isinstance(days, bool) or not isinstance(days, int) or days < 1:
            raise ValidationFailed("days must be a positive integer")
        end = today or datetime.now(timezone.utc).date()
        try:
            start = end - timedelta(days=days - 1)
        except OverflowError as e:
            raise ValidationFailed("days is out of range") from e
        return self.aggregate(user_id, start, end, emotions)

    def between(self, user_id: int, start_date, end_date, emotions: list[str] | None = None) -> list[TrendPoint]:
        """Explicit inclusive range; accepts dates or ISO strings."""
        start = _parse_day(start_date, "start_date")
        end = _parse_day(end_date, "end_date")
        return self.aggregate(user_id, start, end, emotions)

    def aggregate(
        self, user_id: int, start: date, end: date, emotions: list[str] | None = None
    ) -> list[TrendPoint]:
        if start > end:
            raise ValidationFailed("start date must not be after end date")
        names = self._emotion_list(emotions)

        # 1) entries in range
        entries = (
            self.db.query(JournalEntry.id, JournalEntry.date)
            .filter(
                JournalEntry.user_id == user_id,
                JournalEntry.date >= start,
                JournalEntry.date <= end,
            )
            .all()
        )
        if not entries:
            return []
        day_of = {entry_id: day for entry_id, day in entries}

        # 2) their scores, restricted to the requested emotions
        rows = (
            self.db.query(EmotionScore.journal_entry_id, Emotion.name, EmotionScore.intensity)
            .join(Emotion, Emotion.id == EmotionScore.emotion_id)
            .filter(
                EmotionScore.journal_entry_id.in_(list(day_of)),
                Emotion.name.in_(names),
            )
            .all()
        )

        # 3) day -> emotion -> [sum, count]
        buckets: dict[date, dict[str, list]] = {day: {} for day in day_of.values()}
        for entry_id, name, intensity in rows:
            acc = buckets[day_of[entry_id]].setdefault(name, [0.0, 0])
            acc[0] += intensity
            acc[1] += 1

        # 4) mean per present pair, None otherwise; 5) ascending by day
        points = []
        for day in sorted(buckets):
            per_emotion = buckets[day]
            values = {}
            for name in names:
                acc = per_emotion.get(name)
                values[name] = round(acc[0] / acc[1], 2) if acc else None
            points.append(TrendPoint(date=day, values=values))

        logger.debug(f"Trend for user {user_id}: {len(points)} day(s) from {start} to {end}")
        return points

    @staticmethod
    def _emotion_list(emotions) -> list[str]:
        if emotions is None:
            return list(EMOTION_CATALOG)
        if isinstance(emotions, str):
            emotions = emotions.split(",")
        names = list(dict.fromkeys(e.strip() for e in emotions if e and e.strip()))
        if not names:
            raise ValidationFailed("At least one emotion is required")
        return names
