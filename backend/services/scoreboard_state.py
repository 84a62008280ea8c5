"""
scoreboard_state.py — In-memory scoreboard document
The state object every operation takes and returns, the canonical default
tasks, and the normalization pass that restores the document invariants.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from services.scoring import (
    ScoringPolicy, Task, TaskType, make_task, player_points, task_from_dict,
)

logger = logging.getLogger(__name__)

# name -> (type, maxValue)
DEFAULT_TASKS = {
    "Water Drank": (TaskType.WATER, 3000),
    "Studied": (TaskType.STUDY, 8),
    "Workout Done": (TaskType.WORKOUT, 2),
}

VALID_PLAYERS = (1, 2)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_default_task(name: str) -> bool:
    return name in DEFAULT_TASKS


def default_tasks() -> list[Task]:
    return [make_task(t, name, max_value) for name, (t, max_value) in DEFAULT_TASKS.items()]


@dataclass
class HistoryEntry:
    date: str
    player1_score: int
    player2_score: int
    winner: str
    tasks_completed: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "player1Score": self.player1_score,
            "player2Score": self.player2_score,
            "winner": self.winner,
            "tasksCompleted": dict(self.tasks_completed),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        return cls(
            date=data.get("date", ""),
            player1_score=int(data.get("player1Score", 0) or 0),
            player2_score=int(data.get("player2Score", 0) or 0),
            winner=data.get("winner", "tie"),
            tasks_completed=dict(data.get("tasksCompleted") or {}),
        )


@dataclass
class ScoreState:
    player1: str
    player2: str
    last_reset: datetime
    next_reset: datetime
    player1_score: int = 0
    player2_score: int = 0
    tasks: list[Task] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)
    last_updated: datetime | None = None
    version: int | None = None
    id: int | None = None

    @classmethod
    def fresh(cls, player1: str, player2: str, now: datetime, reset_period: timedelta) -> "ScoreState":
        return cls(
            player1=player1,
            player2=player2,
            last_reset=now,
            next_reset=now + reset_period,
            tasks=default_tasks(),
            last_updated=now,
        )

    def player_key(self, player: int) -> str:
        """History/winner key for a player, e.g. 'nish'."""
        return (self.player1 if player == 1 else self.player2).lower()

    def score_for(self, player: int) -> int:
        return self.player1_score if player == 1 else self.player2_score

    def set_score(self, player: int, score: int) -> None:
        # scores never go negative
        if player == 1:
            self.player1_score = max(0, score)
        else:
            self.player2_score = max(0, score)

    def adjust_score(self, player: int, delta: int) -> None:
        self.set_score(player, self.score_for(player) + delta)

    def find_task_index(self, name: str) -> int | None:
        for i, task in enumerate(self.tasks):
            if task.name == name:
                return i
        return None

    def first_of_type(self, task_type: TaskType) -> Task | None:
        return next((t for t in self.tasks if t.type == task_type), None)

    def time_until_reset_ms(self, now: datetime) -> int:
        return max(0, int((self.next_reset - now).total_seconds() * 1000))

    def to_dict(self, now: datetime | None = None) -> dict:
        now = now or utcnow()
        return {
            "player1": self.player1,
            "player2": self.player2,
            "player1Score": self.player1_score,
            "player2Score": self.player2_score,
            "dailyTasks": [t.to_dict() for t in self.tasks],
            "dailyHistory": [h.to_dict() for h in self.history],
            "lastReset": self.last_reset.isoformat(),
            "nextReset": self.next_reset.isoformat(),
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "version": self.version,
            "timeUntilReset": self.time_until_reset_ms(now),
        }


def tasks_from_json(items: list) -> list[Task]:
    return [task_from_dict(item) for item in items]


def _dedupe(tasks: list[Task]) -> list[Task]:
    """Keep only the last occurrence of each name, preserving order of the survivors."""
    last_index = {t.name: i for i, t in enumerate(tasks)}
    return [t for i, t in enumerate(tasks) if last_index[t.name] == i]


def _reconcile_default(task: Task, task_type: TaskType, max_value: float) -> Task:
    if task.type == task_type and task.max_value == max_value:
        return task
    fixed = make_task(task_type, task.name, max_value)
    fixed.player1_value = task.player1_value
    fixed.player2_value = task.player2_value
    return fixed


def normalize(state: ScoreState, policy: ScoringPolicy | None = None) -> bool:
    """
    Restore the document invariants in place. Returns True if anything changed.
    - duplicate task names pruned, last occurrence wins
    - missing default tasks re-added, drifted defaults fixed
    - values clamped into [0, maxValue]
    - scores recomputed from task values
    """
    changed = False

    deduped = _dedupe(state.tasks)
    if len(deduped) != len(state.tasks):
        logger.info(f"Removed {len(state.tasks) - len(deduped)} duplicate task(s)")
        changed = True

    tasks = []
    for task in deduped:
        if is_default_task(task.name):
            task_type, max_value = DEFAULT_TASKS[task.name]
            fixed = _reconcile_default(task, task_type, max_value)
            if fixed is not task:
                logger.info(f"Reconciled default task: {task.name}")
                changed = True
            task = fixed
        tasks.append(task)

    present = {t.name for t in tasks}
    for name, (task_type, max_value) in DEFAULT_TASKS.items():
        if name not in present:
            tasks.append(make_task(task_type, name, max_value))
            logger.info(f"Added default task: {name}")
            changed = True

    for task in tasks:
        for player in VALID_PLAYERS:
            value = task.value_for(player)
            clamped = task.clamp(value)
            if clamped != value:
                task.set_value(player, clamped)
                changed = True

    state.tasks = tasks

    for player in VALID_PLAYERS:
        expected = player_points(state.tasks, player, policy)
        if state.score_for(player) != expected:
            state.set_score(player, expected)
            changed = True

    return changed
