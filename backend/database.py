import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from config import DATABASE_URL, LOG_LEVEL
import logging

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def make_engine(url: str):
    """Build an engine; SQLite needs check_same_thread off, Postgres gets a pool."""
    engine_args = {}
    if url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
    else:
        # Production settings for PostgreSQL
        engine_args.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,
        })
    return create_engine(url, **engine_args, echo=False)


try:
    engine = make_engine(DATABASE_URL)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.error(f"Failed to create engine: {e}")
    raise e

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a database session and closes it after use."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None, session_factory=None):
    """Create the data/ directory and tables, then normalize the stored scoreboard once."""
    bind = bind or engine
    session_factory = session_factory or SessionLocal

    if str(bind.url).startswith("sqlite") and bind.url.database not in (None, "", ":memory:"):
        os.makedirs(os.path.dirname(os.path.abspath(bind.url.database)), exist_ok=True)

    # Import models so they register with Base.metadata
    from models.scoreboard import Scoreboard  # noqa: F401

    Base.metadata.create_all(bind=bind)
    logger.info("Database initialized successfully.")

    from services.scoreboard_repository import ScoreboardRepository

    db = session_factory()
    try:
        ScoreboardRepository.normalize_stored(db)
    finally:
        db.close()
