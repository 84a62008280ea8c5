"""
scoreboard_repository.py — Persistence for the singleton scoreboard
Maps the Scoreboard row to a ScoreState and back. Tasks and history live in
JSON text columns, so the whole document is read and written as one row.
Writes are guarded by the row's version counter: if another request saved in
between, the write is refused with a ConflictError.
"""

import json
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

import config
from models.scoreboard import Scoreboard
from services.errors import ConflictError
from services.scoreboard_state import (
    HistoryEntry, ScoreState, normalize, tasks_from_json, utcnow,
)
from services.scoring import ScoringPolicy

logger = logging.getLogger(__name__)

# the deployment holds exactly one scoreboard
SCOREBOARD_ID = 1


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything here is UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ScoreboardRepository:

    @staticmethod
    def to_state(row: Scoreboard) -> ScoreState:
        return ScoreState(
            id=row.id,
            player1=row.player1,
            player2=row.player2,
            player1_score=row.player1_score or 0,
            player2_score=row.player2_score or 0,
            tasks=tasks_from_json(json.loads(row.daily_tasks or "[]")),
            history=[HistoryEntry.from_dict(h) for h in json.loads(row.daily_history or "[]")],
            last_reset=_aware(row.last_reset),
            next_reset=_aware(row.next_reset),
            last_updated=_aware(row.last_updated),
            version=row.version,
        )

    @staticmethod
    def _write(row: Scoreboard, state: ScoreState) -> None:
        row.player1 = state.player1
        row.player2 = state.player2
        row.player1_score = state.player1_score
        row.player2_score = state.player2_score
        row.daily_tasks = json.dumps([t.to_dict() for t in state.tasks], allow_nan=False)
        row.daily_history = json.dumps([h.to_dict() for h in state.history], allow_nan=False)
        row.last_reset = state.last_reset
        row.next_reset = state.next_reset
        row.last_updated = state.last_updated

    @staticmethod
    def _get_row(db: Session) -> Scoreboard | None:
        return db.query(Scoreboard).order_by(Scoreboard.id).first()

    @staticmethod
    def create(db: Session, now: datetime | None = None, policy: ScoringPolicy | None = None) -> ScoreState:
        """Insert a fresh scoreboard with the default tasks and zero scores."""
        now = now or utcnow()
        policy = policy or ScoringPolicy.from_config()
        state = ScoreState.fresh(config.PLAYER1_NAME, config.PLAYER2_NAME, now, policy.reset_period)
        row = Scoreboard(id=SCOREBOARD_ID)
        ScoreboardRepository._write(row, state)
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
        except IntegrityError:
            # another request created it first
            db.rollback()
            logger.info("Scoreboard already created by a concurrent request, loading it")
            return ScoreboardRepository.to_state(db.get(Scoreboard, SCOREBOARD_ID))
        except Exception:
            db.rollback()
            raise
        logger.info("New scoreboard created with default tasks")
        return ScoreboardRepository.to_state(row)

    @staticmethod
    def load_or_create(db: Session, now: datetime | None = None, policy: ScoringPolicy | None = None) -> ScoreState:
        row = ScoreboardRepository._get_row(db)
        if row is None:
            return ScoreboardRepository.create(db, now, policy)
        return ScoreboardRepository.to_state(row)

    @staticmethod
    def save(db: Session, state: ScoreState, now: datetime | None = None,
             policy: ScoringPolicy | None = None) -> ScoreState:
        """Normalize and persist the state. Raises ConflictError if the row moved on."""
        now = now or utcnow()
        row = db.get(Scoreboard, state.id) if state.id is not None else None
        if row is None or row.version != state.version:
            raise ConflictError("Scores were updated by someone else, reload and try again")

        normalize(state, policy)
        state.last_updated = now
        ScoreboardRepository._write(row, state)
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning("Concurrent scoreboard update detected, write refused")
            raise ConflictError("Scores were updated by someone else, reload and try again")
        except Exception:
            db.rollback()
            raise
        state.version = row.version
        return state

    @staticmethod
    def wipe(db: Session, now: datetime | None = None, policy: ScoringPolicy | None = None) -> ScoreState:
        """Drop every scoreboard row and start over."""
        try:
            deleted = db.query(Scoreboard).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Scoreboard wiped ({deleted} row(s) removed)")
        return ScoreboardRepository.create(db, now, policy)

    @staticmethod
    def normalize_stored(db: Session, policy: ScoringPolicy | None = None) -> bool:
        """Startup pass: bring an existing document back in line with the invariants."""
        row = ScoreboardRepository._get_row(db)
        if row is None:
            return False
        state = ScoreboardRepository.to_state(row)
        if not normalize(state, policy):
            return False
        ScoreboardRepository.save(db, state, policy=policy)
        logger.info("Stored scoreboard normalized")
        return True
