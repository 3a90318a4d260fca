# db/database.py

import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from starlette.config import Config

from db.base import Base

logger = logging.getLogger(__name__)

# --- Configuration (Load from Environment) ---

# Values come from a .env file when present, OS environment variables win
config = Config(".env")

DATABASE_URL = config("DATABASE_URL", default="sqlite:///./roundup_autopilot.db")
SQL_ECHO = config("SQL_ECHO", cast=bool, default=False)


def build_engine(url: str = DATABASE_URL, echo: bool = SQL_ECHO):
    """Creates the engine; SQLite needs cross-thread access under FastAPI's threadpool."""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, connect_args=connect_args)


# --- Database Engine Setup ---
engine = build_engine()

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False, # Essential for working with ORM objects outside the session
)


# --- Dependency Function for FastAPI ---

def get_db() -> Generator[Session, None, None]:
    """
    Dependency that yields a Session per request.
    Commits when the endpoint finishes, rolls back on any exception so a failed
    transfer never leaves partial balance changes behind.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        logger.warning("Rolling back request session after error")
        session.rollback()
        raise
    finally:
        session.close()


def create_db_and_tables(bind=None):
    """
    Creates all defined tables.
    Model modules are imported here so their tables are registered on Base.
    """
    from models import savings_automation, ledger  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")
