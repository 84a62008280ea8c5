"""
reset_service.py — Daily rollover
The scoreboard is Active while now < next_reset and Due afterwards. There is no
background timer: every request that loads the document calls check_and_reset,
which archives the finished day and zeroes the board when Due.
"""

import logging
from datetime import datetime

from services.scoreboard_state import HistoryEntry, ScoreState
from services.scoring import ScoringPolicy

logger = logging.getLogger(__name__)


class ResetService:
    @staticmethod
    def is_due(state: ScoreState, now: datetime) -> bool:
        return now >= state.next_reset

    @staticmethod
    def winner(state: ScoreState) -> str:
        if state.player1_score > state.player2_score:
            return state.player_key(1)
        if state.player2_score > state.player1_score:
            return state.player_key(2)
        return "tie"

    @staticmethod
    def snapshot(state: ScoreState, now: datetime) -> HistoryEntry:
        return HistoryEntry(
            date=now.date().isoformat(),
            player1_score=state.player1_score,
            player2_score=state.player2_score,
            winner=ResetService.winner(state),
            tasks_completed={
                state.player_key(1): sum(1 for t in state.tasks if t.player1_value > 0),
                state.player_key(2): sum(1 for t in state.tasks if t.player2_value > 0),
            },
        )

    @staticmethod
    def archive_day(state: ScoreState, now: datetime, history_days: int = 7) -> HistoryEntry:
        """Record today's result; a same-day entry is overwritten in place."""
        entry = ResetService.snapshot(state, now)
        for i, existing in enumerate(state.history):
            if existing.date == entry.date:
                state.history[i] = entry
                break
        else:
            state.history.insert(0, entry)
        del state.history[history_days:]
        return entry

    @staticmethod
    def check_and_reset(state: ScoreState, now: datetime, policy: ScoringPolicy | None = None) -> bool:
        """Roll the day over if due. Returns True when a reset happened."""
        policy = policy or ScoringPolicy.from_config()
        if not ResetService.is_due(state, now):
            return False

        logger.info(f"Performing automatic reset (period elapsed at {state.next_reset.isoformat()})")
        entry = ResetService.archive_day(state, now, policy.history_days)

        state.player1_score = 0
        state.player2_score = 0
        for task in state.tasks:
            task.player1_value = 0
            task.player2_value = 0

        state.last_reset = now
        state.next_reset = now + policy.reset_period
        state.last_updated = now
        logger.info(f"Scores reset; history saved for {entry.date} (winner: {entry.winner})")
        return True
