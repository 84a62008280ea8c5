# tests/test_reset_service.py

from datetime import timedelta

from services.reset_service import ResetService
from services.scoreboard_state import HistoryEntry
from services.score_service import ScoreService


def test_not_due_is_a_no_op(state, now, policy):
    ScoreService.add_water(state, 1, 1500, policy)

    assert ResetService.check_and_reset(state, now + timedelta(hours=23), policy) is False
    assert state.player1_score == 2
    assert state.history == []


def test_due_archives_then_zeroes_everything(state, now, policy):
    ScoreService.add_water(state, 1, 1500, policy)
    ScoreService.add_workout(state, 2, hours=0.5, policy=policy)
    later = now + timedelta(hours=24)

    assert ResetService.check_and_reset(state, later, policy) is True

    entry = state.history[0]
    assert entry.date == later.date().isoformat()
    assert (entry.player1_score, entry.player2_score) == (2, 1)
    assert entry.winner == "nish"
    assert entry.tasks_completed == {"nish": 1, "jess": 1}

    assert state.player1_score == state.player2_score == 0
    assert all(t.player1_value == 0 and t.player2_value == 0 for t in state.tasks)
    assert state.last_reset == later
    assert state.next_reset == later + timedelta(hours=24)


def test_reset_is_idempotent_within_a_request(state, now, policy):
    later = now + timedelta(hours=25)
    assert ResetService.check_and_reset(state, later, policy) is True
    assert ResetService.check_and_reset(state, later, policy) is False
    assert len(state.history) == 1


def test_equal_scores_record_a_tie(state, now, policy):
    ScoreService.add_water(state, 1, 750, policy)
    ScoreService.add_water(state, 2, 750, policy)
    ResetService.check_and_reset(state, now + timedelta(days=1), policy)
    assert state.history[0].winner == "tie"


def test_zero_zero_day_is_a_tie(state, now, policy):
    ResetService.check_and_reset(state, now + timedelta(days=1), policy)
    assert state.history[0].winner == "tie"


def test_same_day_entry_is_overwritten(state, now, policy):
    day = (now + timedelta(days=1)).date().isoformat()
    state.history = [HistoryEntry(date=day, player1_score=9, player2_score=9, winner="tie")]
    ScoreService.add_water(state, 2, 750, policy)

    ResetService.archive_day(state, now + timedelta(days=1), policy.history_days)

    assert len(state.history) == 1
    assert state.history[0].winner == "jess"
    assert state.history[0].player2_score == 1


def test_history_keeps_most_recent_seven(state, now, policy):
    state.history = [
        HistoryEntry(date=f"2025-05-{day:02d}", player1_score=0, player2_score=0, winner="tie")
        for day in range(31, 24, -1)
    ]
    assert len(state.history) == 7

    ResetService.check_and_reset(state, now + timedelta(days=1), policy)

    assert len(state.history) == 7
    assert state.history[0].date == "2025-06-02"
    assert state.history[-1].date == "2025-05-26"


def test_time_until_reset_is_floored_at_zero(state, now):
    assert state.time_until_reset_ms(now) == 24 * 60 * 60 * 1000
    assert state.time_until_reset_ms(now + timedelta(days=2)) == 0
