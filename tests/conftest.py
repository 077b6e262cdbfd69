"""
Pytest configuration for the journal pipeline

Every test gets a fresh in-memory SQLite database with the emotion and mood catalogs
seeded, a cipher with a fixed key and a scriptable fake classifier.
"""

import pytest
from sqlalchemy.orm import Session

import ouramind.models  # noqa: F401  (registers tables)
from ouramind.database import Base, make_engine, seed_emotions, seed_moods
from ouramind.providers.base import BaseClassifierProvider
from ouramind.services.cipher import EntryCipher
from ouramind.services.classifier_gateway import ClassifierGateway
from ouramind.services.journal_service import JournalService
from ouramind.services.share_service import ShareService
from ouramind.services.tool_service import ToolService
from ouramind.services.trend_service import TrendService

TEST_KEY = b"0123456789abcdef0123456789abcdef"

NEUTRAL = {"joy": 0.1, "sadness": 0.1, "anger": 0.1, "fear": 0.1, "disgust": 0.1}


class FakeProvider(BaseClassifierProvider):
    """Returns queued emotion maps (or the default) instead of calling a service."""

    def __init__(self, default=None):
        self.default = dict(default or NEUTRAL)
        self.queue = []
        self.calls = []
        self.fail_with = None

    @property
    def name(self) -> str:
        return "fake"

    def push(self, **scores):
        merged = dict(NEUTRAL)
        merged.update(scores)
        self.queue.append(merged)

    def analyze(self, text: str, timeout: float) -> dict:
        self.calls.append((text, timeout))
        if self.fail_with is not None:
            return {"emotions": None, "provider": self.name, "status": "failed", "error": self.fail_with}
        emotions = self.queue.pop(0) if self.queue else dict(self.default)
        return {"emotions": emotions, "provider": self.name, "status": "success", "error": None}


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = Session(bind=engine)
    seed_emotions(session)
    seed_moods(session)
    yield session
    session.close()


@pytest.fixture
def cipher():
    return EntryCipher(TEST_KEY)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def gateway(provider):
    return ClassifierGateway(provider, timeout=2.0)


@pytest.fixture
def journal(db, cipher, gateway):
    return JournalService(db, cipher, gateway)


@pytest.fixture
def tools(db):
    return ToolService(db)


@pytest.fixture
def trends(db):
    return TrendService(db)


@pytest.fixture
def share(db, cipher):
    return ShareService(db, cipher)
