"""
scoring.py — Task kinds and the point calculator
Each task kind is its own dataclass; points are always derived from the raw
value, so a player's score can be rebuilt from the stored tasks alone.
"""

import math
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import ClassVar

import config


class TaskType(str, Enum):
    CHECKBOX = "checkbox"
    WATER = "water"
    STUDY = "study"
    WORKOUT = "workout"
    NUMBER = "number"


@dataclass(frozen=True)
class ScoringPolicy:
    water_ml_per_point: float = 750
    reset_period: timedelta = field(default=timedelta(hours=24))
    history_days: int = 7

    @classmethod
    def from_config(cls) -> "ScoringPolicy":
        return cls(
            water_ml_per_point=config.WATER_ML_PER_POINT,
            reset_period=timedelta(hours=config.RESET_PERIOD_HOURS),
            history_days=config.HISTORY_DAYS,
        )


def clean_number(value):
    """750.0 -> 750, 0.5 stays 0.5 (keeps the JSON tidy for the client)."""
    value = float(value)
    return int(value) if value.is_integer() else value


@dataclass
class Task:
    name: str
    max_value: float = 1
    player1_value: float = 0
    player2_value: float = 0

    type: ClassVar[TaskType]

    def value_for(self, player: int) -> float:
        return self.player1_value if player == 1 else self.player2_value

    def set_value(self, player: int, value: float) -> None:
        if player == 1:
            self.player1_value = value
        else:
            self.player2_value = value

    def clamp(self, value: float) -> float:
        return max(0, min(value, self.max_value))

    def step_for(self, change: float) -> float:
        """Raw amount one click of `change` moves the value by."""
        return change

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type.value,
            "maxValue": clean_number(self.max_value),
            "player1Value": clean_number(self.player1_value),
            "player2Value": clean_number(self.player2_value),
        }


@dataclass
class CheckboxTask(Task):
    type: ClassVar[TaskType] = TaskType.CHECKBOX


@dataclass
class WaterTask(Task):
    type: ClassVar[TaskType] = TaskType.WATER


@dataclass
class StudyTask(Task):
    type: ClassVar[TaskType] = TaskType.STUDY


@dataclass
class WorkoutTask(Task):
    type: ClassVar[TaskType] = TaskType.WORKOUT


@dataclass
class NumberTask(Task):
    points_per_unit: float = 1
    units_per_click: float = 1
    unit_label: str = "units"

    type: ClassVar[TaskType] = TaskType.NUMBER

    def step_for(self, change: float) -> float:
        return change * (self.units_per_click or 1)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["config"] = {
            "pointsPerUnit": clean_number(self.points_per_unit),
            "unitsPerClick": clean_number(self.units_per_click),
            "unitLabel": self.unit_label,
        }
        return data


TASK_CLASSES: dict[TaskType, type[Task]] = {
    cls.type: cls for cls in (CheckboxTask, WaterTask, StudyTask, WorkoutTask, NumberTask)
}


def parse_task_type(raw) -> TaskType:
    """Raises ValueError for anything outside the known kinds."""
    return TaskType(raw)


def make_task(task_type: TaskType, name: str, max_value: float = 1, **number_config) -> Task:
    cls = TASK_CLASSES[TaskType(task_type)]
    if cls is NumberTask:
        return NumberTask(
            name=name,
            max_value=max_value,
            points_per_unit=number_config.get("points_per_unit") or 1,
            units_per_click=number_config.get("units_per_click") or 1,
            unit_label=number_config.get("unit_label") or "units",
        )
    if cls is CheckboxTask:
        max_value = 1
    return cls(name=name, max_value=max_value)


def task_from_dict(data: dict) -> Task:
    """Build a task from its stored/JSON form. Unknown types fall back to checkbox."""
    try:
        task_type = TaskType(data.get("type", "checkbox"))
    except ValueError:
        task_type = TaskType.CHECKBOX
    cfg = data.get("config") or {}
    task = make_task(
        task_type,
        data.get("name", ""),
        data.get("maxValue", 1),
        points_per_unit=cfg.get("pointsPerUnit"),
        units_per_click=cfg.get("unitsPerClick"),
        unit_label=cfg.get("unitLabel"),
    )
    task.player1_value = data.get("player1Value", 0) or 0
    task.player2_value = data.get("player2Value", 0) or 0
    return task


def _floor(value: float) -> int:
    # float noise such as 2.9999999999 must not cost a point
    return max(0, math.floor(round(value, 9)))


_CALCULATORS = {
    TaskType.WATER: lambda task, value, policy: _floor(value / policy.water_ml_per_point),
    TaskType.WORKOUT: lambda task, value, policy: _floor(value * 2),  # 30 min per point
    TaskType.STUDY: lambda task, value, policy: _floor(value),
    TaskType.NUMBER: lambda task, value, policy: _floor(value * task.points_per_unit),
    TaskType.CHECKBOX: lambda task, value, policy: _floor(value),
}


def calculate_points(task: Task, value: float, policy: ScoringPolicy | None = None) -> int:
    """Points a raw value is worth for this task's kind."""
    policy = policy or ScoringPolicy.from_config()
    return _CALCULATORS[task.type](task, value, policy)


def task_points(task: Task, player: int, policy: ScoringPolicy | None = None) -> int:
    return calculate_points(task, task.value_for(player), policy)


def player_points(tasks: list[Task], player: int, policy: ScoringPolicy | None = None) -> int:
    return sum(task_points(t, player, policy) for t in tasks)
