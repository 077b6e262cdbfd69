import os
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from ouramind.config import DATABASE_URL, EMOTION_CATALOG, MOOD_CATALOG, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def make_engine(url: str):
    """Create an engine with pool settings suited to the backend behind *url*."""
    engine_args = {}
    if url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
    else:
        # Production settings for PostgreSQL / MySQL
        engine_args.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,
        })

    eng = create_engine(url, **engine_args, echo=False)

    if url.startswith("sqlite"):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return eng


try:
    engine = make_engine(DATABASE_URL)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.error(f"Failed to create engine: {e}")
    raise

Base = declarative_base()


def get_db():
    """Request-scoped dependency — yields a database session and closes it after use."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_emotions(db: Session) -> None:
    """Insert any missing catalog emotions, in catalog order."""
    from ouramind.models.emotion import Emotion

    existing = {name for (name,) in db.query(Emotion.name).all()}
    missing = [name for name in EMOTION_CATALOG if name not in existing]
    if not missing:
        return
    try:
        for name in missing:
            db.add(Emotion(name=name))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Seeded {len(missing)} emotion(s) into the catalog.")


def seed_moods(db: Session) -> None:
    """Insert any missing moods used for before/after reflection ratings."""
    from ouramind.models.mood import Mood

    existing = {name for (name,) in db.query(Mood.name).all()}
    missing = [name for name in MOOD_CATALOG if name not in existing]
    if not missing:
        return
    try:
        for name in missing:
            db.add(Mood(name=name))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Seeded {len(missing)} mood(s).")


def init_db(bind=None) -> None:
    """Create the data/ directory if needed, create all tables and seed the emotion and mood catalogs."""
    bind = bind or engine
    if str(bind.url).startswith("sqlite:///./"):
        os.makedirs("data", exist_ok=True)

    # Import all models so they register with Base.metadata
    import ouramind.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
    db = Session(bind=bind)
    try:
        seed_emotions(db)
        seed_moods(db)
    finally:
        db.close()
    logger.info("Database initialized successfully.")
