"""
classifier_gateway.py — Emotion classification boundary
Wraps a classifier provider into the pipeline's shape: text in, one intensity
per catalog emotion out. Every way the remote call can go wrong surfaces as
ClassificationFailed; no zero-filled fallback, no retries.
"""

import logging
import math

from ouramind.config import EMOTION_CATALOG, CLASSIFIER_TIMEOUT
from ouramind.errors import ClassificationFailed, ValidationFailed
from ouramind.providers.base import BaseClassifierProvider

logger = logging.getLogger(__name__)


class ClassifierGateway:
    def __init__(
        self,
        provider: BaseClassifierProvider,
        catalog: tuple[str, ...] = EMOTION_CATALOG,
        timeout: float = CLASSIFIER_TIMEOUT,
    ):
        self.provider = provider
        self.catalog = tuple(catalog)
        self.timeout = timeout

    def classify(self, text: str) -> dict[str, float]:
        """Return {emotion: intensity in [0, 1]} for every catalog emotion, in catalog order."""
        if not isinstance(text, str) or not text.strip():
            raise ValidationFailed("Cannot classify empty text")

        try:
            result = self.provider.analyze(text, self.timeout)
        except Exception as e:
            logger.error(f"Classifier {self.provider.name} raised {type(e).__name__}")
            raise ClassificationFailed(f"{self.provider.name} call failed: {e}") from e

        if not isinstance(result, dict) or result.get("status") != "success":
            error = result.get("error") if isinstance(result, dict) else "no result"
            logger.error(f"Classifier {self.provider.name} failed: {error}")
            raise ClassificationFailed(f"{self.provider.name} call failed: {error}")

        return self._normalize(result.get("emotions"))

    def _normalize(self, raw) -> dict[str, float]:
        if not isinstance(raw, dict):
            raise ClassificationFailed("Classifier returned no emotion map")

        scores: dict[str, float] = {}
        for name in self.catalog:
            value = raw.get(name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ClassificationFailed(f"Missing or non-numeric score for '{name}'")
            value = float(value)
            if math.isnan(value) or not 0.0 <= value <= 1.0:
                raise ClassificationFailed(f"Score for '{name}' is outside [0, 1]")
            scores[name] = value

        ignored = set(raw) - set(self.catalog)
        if ignored:
            logger.debug(f"Ignoring non-catalog emotions: {sorted(ignored)}")
        return scores
