"""
pipeline.py — Startup wiring
Builds the process-wide pieces (cipher, classifier gateway) once from Settings
and hands out request-scoped services bound to a database session:

    pipeline = build_pipeline()
    for db in get_db():
        created = pipeline.journal(db).create(user_id, text)
"""

import logging

from sqlalchemy.orm import Session

from ouramind.config import Settings, EMOTION_CATALOG, load_settings
from ouramind.errors import ConfigurationError
from ouramind.providers.base import BaseClassifierProvider
from ouramind.providers.watson_provider import WatsonProvider
from ouramind.services.cipher import EntryCipher
from ouramind.services.classifier_gateway import ClassifierGateway
from ouramind.services.journal_service import JournalService
from ouramind.services.share_service import ShareService
from ouramind.services.tool_service import ToolService
from ouramind.services.trend_service import TrendService

logger = logging.getLogger(__name__)


class Pipeline:
    def __init__(self, settings: Settings, provider: BaseClassifierProvider):
        self.settings = settings
        self.cipher = EntryCipher(settings.encryption_key)
        self.gateway = ClassifierGateway(provider, EMOTION_CATALOG, settings.classifier_timeout)

    def journal(self, db: Session) -> JournalService:
        return JournalService(
            db,
            self.cipher,
            self.gateway,
            threshold=self.settings.emotion_threshold,
            limit=self.settings.emotion_limit,
        )

    def tools(self, db: Session) -> ToolService:
        return ToolService(db)

    def trends(self, db: Session) -> TrendService:
        return TrendService(db)

    def share(self, db: Session) -> ShareService:
        return ShareService(db, self.cipher)


def build_pipeline(
    settings: Settings | None = None,
    provider: BaseClassifierProvider | None = None,
) -> Pipeline:
    """Fail fast on bad configuration; call once per process."""
    settings = settings or load_settings()
    if provider is None:
        if not settings.watson_api_url or not settings.watson_api_key:
            raise ConfigurationError("WATSON_API_URL and WATSON_API_KEY must be set")
        provider = WatsonProvider(
            settings.watson_api_key,
            settings.watson_api_url,
            version=settings.watson_api_version,
        )
    pipeline = Pipeline(settings, provider)
    logger.info(f"Pipeline ready (classifier={provider.name}, timeout={settings.classifier_timeout}s)")
    return pipeline
