# tests/test_scoring.py

from datetime import timedelta

import pytest

from services.scoring import (
    CheckboxTask, NumberTask, ScoringPolicy, StudyTask, TaskType, WaterTask, WorkoutTask,
    calculate_points, make_task, player_points, task_from_dict,
)


def test_water_points_use_policy_factor(policy):
    water = WaterTask(name="Water Drank", max_value=3000)
    assert calculate_points(water, 0, policy) == 0
    assert calculate_points(water, 749, policy) == 0
    assert calculate_points(water, 750, policy) == 1
    assert calculate_points(water, 2999, policy) == 3


def test_water_factor_is_configurable():
    water = WaterTask(name="Water Drank", max_value=3000)
    old_policy = ScoringPolicy(water_ml_per_point=500, reset_period=timedelta(hours=24))
    assert calculate_points(water, 750, old_policy) == 1
    assert calculate_points(water, 1000, old_policy) == 2


def test_workout_is_one_point_per_half_hour(policy):
    workout = WorkoutTask(name="Workout Done", max_value=2)
    assert calculate_points(workout, 0.5, policy) == 1
    assert calculate_points(workout, 0.75, policy) == 1
    assert calculate_points(workout, 2, policy) == 4


def test_study_is_one_point_per_hour(policy):
    study = StudyTask(name="Studied", max_value=8)
    assert calculate_points(study, 0.9, policy) == 0
    assert calculate_points(study, 3.5, policy) == 3


def test_number_task_uses_points_per_unit(policy):
    pushups = NumberTask(name="Pushups", max_value=100, points_per_unit=0.1)
    assert calculate_points(pushups, 30, policy) == 3
    assert calculate_points(pushups, 9, policy) == 0


def test_float_noise_does_not_lose_a_point(policy):
    task = NumberTask(name="Laps", max_value=10, points_per_unit=100)
    # 0.57 * 100 == 56.99999999999999 in binary floating point
    assert calculate_points(task, 0.57, policy) == 57


def test_checkbox_points(policy):
    task = CheckboxTask(name="Read")
    assert calculate_points(task, 0, policy) == 0
    assert calculate_points(task, 1, policy) == 1


def test_make_task_forces_checkbox_max_to_one():
    task = make_task(TaskType.CHECKBOX, "Meditate", 5)
    assert isinstance(task, CheckboxTask)
    assert task.max_value == 1


def test_number_task_defaults_and_json_shape():
    task = make_task(TaskType.NUMBER, "Pages", 50)
    assert task.to_dict() == {
        "name": "Pages",
        "type": "number",
        "maxValue": 50,
        "player1Value": 0,
        "player2Value": 0,
        "config": {"pointsPerUnit": 1, "unitsPerClick": 1, "unitLabel": "units"},
    }


def test_only_number_tasks_carry_config():
    assert "config" not in WaterTask(name="Water Drank", max_value=3000).to_dict()


def test_task_from_dict_unknown_type_falls_back_to_checkbox():
    task = task_from_dict({"name": "Odd", "type": "mystery", "player1Value": 1})
    assert task.type == TaskType.CHECKBOX
    assert task.player1_value == 1


@pytest.mark.parametrize("player,expected", [(1, 4), (2, 0)])
def test_player_points_sums_all_tasks(policy, player, expected):
    tasks = [
        WaterTask(name="Water Drank", max_value=3000, player1_value=1500),
        StudyTask(name="Studied", max_value=8, player1_value=1.2),
        CheckboxTask(name="Read", player1_value=1),
    ]
    # water 1500 -> 2, study 1.2 -> 1, checkbox -> 1
    assert player_points(tasks, player, policy) == expected
