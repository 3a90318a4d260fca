"""
Round-Up Autopilot test configuration.
In-memory SQLite shared through a StaticPool, plus a TestClient wired to it.
"""
import os
import sys

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before db.database / api.dependencies are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ROUNDUP_API_KEY"] = "test-api-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db.database import create_db_and_tables, get_db
from api.dependencies import get_expected_api_key


OWNER = "0x" + "11" * 20
OTHER_OWNER = "0x" + "22" * 20
SAVINGS = "0x" + "5a" * 20
MERCHANT = "0x" + "3c" * 20
USDC = "0x" + "a0" * 20

API_KEY = "test-api-key"


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def client(session_factory):
    from app import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    get_expected_api_key.cache_clear()
    app.dependency_overrides[get_db] = override_get_db
    # Not entered as a context manager: the lifespan would create tables in the default engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Factory for request headers carrying the API key and the caller identity."""
    def _headers(owner=OWNER):
        return {"X-API-Key": API_KEY, "X-Owner-Id": owner}
    return _headers
