# tests/conftest.py

import os
import tempfile

# Must be set before config/database are imported anywhere.
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.mkdtemp(), "bootstrap.db")
os.environ["PLAYER1_NAME"] = "Nish"
os.environ["PLAYER2_NAME"] = "Jess"
os.environ["WATER_ML_PER_POINT"] = "750"

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import get_db, init_db, make_engine
from dependencies import get_now, get_policy
from services.scoreboard_state import ScoreState
from services.scoring import ScoringPolicy


@pytest.fixture()
def policy() -> ScoringPolicy:
    return ScoringPolicy(water_ml_per_point=750, reset_period=timedelta(hours=24), history_days=7)


@pytest.fixture()
def now() -> datetime:
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def state(now, policy) -> ScoreState:
    return ScoreState.fresh("Nish", "Jess", now, policy.reset_period)


@pytest.fixture()
def session_factory(tmp_path):
    """A fresh SQLite file per test, with tables created by init_db."""
    engine = make_engine(f"sqlite:///{tmp_path / 'scores.db'}")
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    init_db(bind=engine, session_factory=factory)
    yield factory
    engine.dispose()


@pytest.fixture()
def clock(now) -> SimpleNamespace:
    """Mutable clock the API reads through the get_now dependency."""
    return SimpleNamespace(now=now)


@pytest.fixture()
def client(session_factory, clock, policy):
    from main import app

    def override_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_now] = lambda: clock.now
    app.dependency_overrides[get_policy] = lambda: policy
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
