"""
score_service.py — Scoreboard mutations
Every operation takes the ScoreState, validates before touching it (a rejected
call leaves the state exactly as it was), applies the change and returns the
state. Score changes are always points(new value) - points(old value), so the
aggregate score stays equal to the sum of the per-task points.
"""

import logging
import math

from services.errors import TaskNotFoundError, ValidationError
from services.scoreboard_state import ScoreState, VALID_PLAYERS, is_default_task
from services.scoring import (
    ScoringPolicy, Task, TaskType, calculate_points, make_task, parse_task_type, task_points,
)

logger = logging.getLogger(__name__)

# scores are stored in Integer columns
MAX_SCORE = 2**31 - 1


class ScoreService:

    @staticmethod
    def check_player(state: ScoreState, player) -> int:
        if isinstance(player, bool) or player not in VALID_PLAYERS:
            raise ValidationError(
                f"Invalid player. Use 1 for {state.player1} or 2 for {state.player2}"
            )
        return player

    @staticmethod
    def get_task(state: ScoreState, index: int) -> Task:
        if index < 0 or index >= len(state.tasks):
            raise TaskNotFoundError("Task not found")
        return state.tasks[index]

    @staticmethod
    def set_player_value(state: ScoreState, task: Task, player: int, new_value: float,
                         policy: ScoringPolicy | None = None) -> int:
        """Store the new raw value and move the player's score by the point delta."""
        try:
            old_points = calculate_points(task, task.value_for(player), policy)
            new_points = calculate_points(task, new_value, policy)
        except (OverflowError, ValueError):
            raise ValidationError("Value is out of range")
        delta = new_points - old_points
        if state.score_for(player) + delta > MAX_SCORE:
            raise ValidationError("Value is out of range")
        task.set_value(player, new_value)
        state.adjust_score(player, delta)
        return delta

    @staticmethod
    def _clean_name(name) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Task name is required")
        return name.strip()

    @staticmethod
    def _check_finite(label: str, value) -> None:
        if value is not None and not math.isfinite(value):
            raise ValidationError(f"{label} must be a finite number")

    # --- Progress ---

    @staticmethod
    def toggle_checkbox(state: ScoreState, index: int, player, policy: ScoringPolicy | None = None) -> ScoreState:
        player = ScoreService.check_player(state, player)
        task = ScoreService.get_task(state, index)
        if task.type != TaskType.CHECKBOX:
            raise ValidationError("This task is not a checkbox type")

        new_value = 0 if task.value_for(player) else 1
        ScoreService.set_player_value(state, task, player, new_value, policy)
        return state

    @staticmethod
    def increment_task(state: ScoreState, index: int, player, change: float,
                       policy: ScoringPolicy | None = None) -> ScoreState:
        """Move a numeric task by `change` clicks. Out-of-range results are ignored."""
        player = ScoreService.check_player(state, player)
        task = ScoreService.get_task(state, index)
        if task.type == TaskType.CHECKBOX:
            raise ValidationError("Use toggle for checkbox tasks")
        ScoreService._check_finite("change", change)

        if not change:
            return state
        new_value = round(task.value_for(player) + task.step_for(change), 9)
        if new_value < 0 or new_value > task.max_value:
            logger.debug(f"Ignoring out-of-range update on '{task.name}' for player {player}: {new_value}")
            return state

        ScoreService.set_player_value(state, task, player, new_value, policy)
        return state

    @staticmethod
    def _add_clamped(state: ScoreState, task_type: TaskType, player, amount: float,
                     policy: ScoringPolicy | None) -> ScoreState:
        player = ScoreService.check_player(state, player)
        ScoreService._check_finite("amount", amount)
        task = state.first_of_type(task_type)
        if task is None:
            raise TaskNotFoundError(f"{task_type.value.capitalize()} task not found")

        new_value = task.clamp(round(task.value_for(player) + amount, 9))
        ScoreService.set_player_value(state, task, player, new_value, policy)
        return state

    @staticmethod
    def add_water(state: ScoreState, player, amount: float, policy: ScoringPolicy | None = None) -> ScoreState:
        """Add (or with a negative amount, remove) mL of water, clamped to the task range."""
        if amount is None:
            raise ValidationError("Amount is required")
        return ScoreService._add_clamped(state, TaskType.WATER, player, amount, policy)

    @staticmethod
    def add_workout(state: ScoreState, player, hours: float | None = None, minutes: float | None = None,
                    policy: ScoringPolicy | None = None) -> ScoreState:
        if hours is None and minutes is None:
            raise ValidationError("Provide hours or minutes")
        ScoreService._check_finite("hours", hours)
        ScoreService._check_finite("minutes", minutes)
        amount = hours if hours is not None else minutes / 60
        return ScoreService._add_clamped(state, TaskType.WORKOUT, player, amount, policy)

    # --- Task definitions ---

    @staticmethod
    def add_task(state: ScoreState, name, task_type=None, max_value=None,
                 points_per_unit=None, units_per_click=None, unit_label=None) -> ScoreState:
        name = ScoreService._clean_name(name)
        if state.find_task_index(name) is not None:
            raise ValidationError("Task already exists")
        try:
            kind = parse_task_type(task_type or TaskType.CHECKBOX.value)
        except ValueError:
            raise ValidationError(f"Unknown task type: {task_type}")
        for label, value in (("maxValue", max_value), ("pointsPerUnit", points_per_unit),
                             ("unitsPerClick", units_per_click)):
            ScoreService._check_finite(label, value)
            if value is not None and value <= 0:
                raise ValidationError(f"{label} must be positive")

        task = make_task(
            kind, name, max_value or 1,
            points_per_unit=points_per_unit,
            units_per_click=units_per_click,
            unit_label=(unit_label or "").strip() or None,
        )
        state.tasks.append(task)
        logger.info(f"Added task '{name}' ({kind.value})")
        return state

    @staticmethod
    def rename_task(state: ScoreState, index: int, new_name) -> ScoreState:
        new_name = ScoreService._clean_name(new_name)
        task = ScoreService.get_task(state, index)
        if is_default_task(task.name):
            raise ValidationError("Cannot rename default tasks")
        existing = state.find_task_index(new_name)
        if existing is not None and existing != index:
            raise ValidationError("Task name already exists")

        logger.info(f"Renamed task '{task.name}' -> '{new_name}'")
        task.name = new_name
        return state

    @staticmethod
    def delete_task(state: ScoreState, index: int, policy: ScoringPolicy | None = None) -> ScoreState:
        task = ScoreService.get_task(state, index)
        if is_default_task(task.name):
            raise ValidationError("Cannot delete default tasks")

        for player in VALID_PLAYERS:
            state.adjust_score(player, -task_points(task, player, policy))
        del state.tasks[index]
        logger.info(f"Deleted task '{task.name}'")
        return state
