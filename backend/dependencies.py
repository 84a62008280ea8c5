"""FastAPI dependencies shared by the routers (overridable in tests)."""

from datetime import datetime

from services.scoreboard_state import utcnow
from services.scoring import ScoringPolicy


def get_now() -> datetime:
    return utcnow()


def get_policy() -> ScoringPolicy:
    return ScoringPolicy.from_config()
