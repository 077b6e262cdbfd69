"""
emotion_selector.py — Dominant emotion policy
Picks the emotions that clear the threshold, strongest first, at most `limit`.
Equal intensities keep catalog order so suggestions render identically every time.
"""

from ouramind.config import EMOTION_CATALOG, EMOTION_THRESHOLD, EMOTION_LIMIT
from ouramind.errors import ValidationFailed


def select_dominant(
    scores: dict[str, float],
    threshold: float = EMOTION_THRESHOLD,
    limit: int = EMOTION_LIMIT,
    catalog: tuple[str, ...] = EMOTION_CATALOG,
) -> list[tuple[str, float]]:
    """
    Returns [(emotion, intensity), ...] sorted by intensity descending.

    An empty list means nothing cleared the threshold; that is a normal result.
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValidationFailed("threshold must be between 0 and 1")
    if limit < 0:
        raise ValidationFailed("limit must not be negative")

    position = {name: i for i, name in enumerate(catalog)}

    def rank(item):
        name, intensity = item
        # unknown names go after the catalog, alphabetically
        return (-intensity, position.get(name, len(catalog)), name)

    kept = [(name, float(v)) for name, v in scores.items() if v >= threshold]
    kept.sort(key=rank)
    return kept[:limit]
