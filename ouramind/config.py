import base64
import binascii
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from ouramind.errors import ConfigurationError

load_dotenv()

# --- Database ---
# Default to local SQLite, but prefer environment variable (MySQL/Postgres in production)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/ouramind.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Entry encryption ---
# 32 raw characters, or base64 of 32 random bytes
ENCRYPTION_KEY = os.getenv("ENCRYPTION_KEY", "")
ENCRYPTION_KEY_LENGTH = 32

# --- Emotion classification (IBM Watson NLU) ---
WATSON_API_KEY = os.getenv("WATSON_API_KEY", "")
WATSON_API_URL = os.getenv("WATSON_API_URL", "")
WATSON_API_VERSION = os.getenv("WATSON_API_VERSION", "2022-04-07")
CLASSIFIER_TIMEOUT = float(os.getenv("CLASSIFIER_TIMEOUT", "10"))

# --- Dominant emotion policy ---
EMOTION_THRESHOLD = float(os.getenv("EMOTION_THRESHOLD", "0.3"))
EMOTION_LIMIT = int(os.getenv("EMOTION_LIMIT", "2"))

# Catalog order doubles as the tie-break order for equal intensities
EMOTION_CATALOG = ("joy", "sadness", "anger", "fear", "disgust")

# --- Reflection mood ratings (before / after a tool) ---
MOOD_CATALOG = tuple(
    m.strip() for m in os.getenv("MOODS", "calm,anxious,sad,angry,hopeful").split(",") if m.strip()
)
MOOD_RATING_MIN = 0
MOOD_RATING_MAX = 10

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, assembled once at startup."""

    encryption_key: bytes
    watson_api_key: str
    watson_api_url: str
    watson_api_version: str
    classifier_timeout: float
    emotion_threshold: float
    emotion_limit: int
    log_level: str


def decode_encryption_key(raw: str) -> bytes:
    """
    Turn the configured key into exactly ENCRYPTION_KEY_LENGTH bytes.

    Accepts a 32-character string (used as UTF-8 bytes) or the standard
    base64 encoding of 32 bytes. Anything else is a configuration error.
    """
    if not raw:
        raise ConfigurationError("ENCRYPTION_KEY is not set")

    as_bytes = raw.encode("utf-8")
    if len(as_bytes) == ENCRYPTION_KEY_LENGTH:
        return as_bytes

    try:
        decoded = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        decoded = b""
    if len(decoded) == ENCRYPTION_KEY_LENGTH:
        return decoded

    raise ConfigurationError(
        f"ENCRYPTION_KEY must be {ENCRYPTION_KEY_LENGTH} bytes "
        f"(raw or base64), got {len(as_bytes)} characters"
    )


def load_settings() -> Settings:
    """Build Settings from the module constants; fails fast on a bad key."""
    if not 0.0 <= EMOTION_THRESHOLD <= 1.0:
        raise ConfigurationError("EMOTION_THRESHOLD must be between 0 and 1")
    if EMOTION_LIMIT < 0:
        raise ConfigurationError("EMOTION_LIMIT must not be negative")
    if CLASSIFIER_TIMEOUT <= 0:
        raise ConfigurationError("CLASSIFIER_TIMEOUT must be positive")

    return Settings(
        encryption_key=decode_encryption_key(ENCRYPTION_KEY),
        watson_api_key=WATSON_API_KEY,
        watson_api_url=WATSON_API_URL,
        watson_api_version=WATSON_API_VERSION,
        classifier_timeout=CLASSIFIER_TIMEOUT,
        emotion_threshold=EMOTION_THRESHOLD,
        emotion_limit=EMOTION_LIMIT,
        log_level=LOG_LEVEL,
    )
