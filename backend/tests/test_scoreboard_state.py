# tests/test_scoreboard_state.py

from services.scoreboard_state import DEFAULT_TASKS, normalize
from services.scoring import CheckboxTask, StudyTask, TaskType, WaterTask


def test_fresh_state_is_already_normal(state, policy):
    assert [t.name for t in state.tasks] == list(DEFAULT_TASKS)
    assert normalize(state, policy) is False


def test_duplicates_keep_the_last_occurrence(state, policy):
    state.tasks.append(CheckboxTask(name="Read", player1_value=0))
    state.tasks.append(CheckboxTask(name="Read", player1_value=1))

    assert normalize(state, policy) is True

    reads = [t for t in state.tasks if t.name == "Read"]
    assert len(reads) == 1
    assert reads[0].player1_value == 1
    assert state.player1_score == 1


def test_missing_defaults_are_re_added(state, policy):
    state.tasks = [t for t in state.tasks if t.name != "Studied"]
    assert normalize(state, policy) is True
    assert state.find_task_index("Studied") is not None


def test_drifted_default_is_reconciled(state, policy):
    index = state.find_task_index("Water Drank")
    state.tasks[index] = StudyTask(name="Water Drank", max_value=10, player1_value=4)

    assert normalize(state, policy) is True

    water = state.tasks[index]
    assert isinstance(water, WaterTask)
    assert water.type == TaskType.WATER
    assert water.max_value == 3000
    assert water.player1_value == 4


def test_values_are_clamped_and_scores_recomputed(state, policy):
    index = state.find_task_index("Studied")
    state.tasks[index].player2_value = 12
    state.player1_score = 40

    assert normalize(state, policy) is True

    assert state.tasks[index].player2_value == 8
    assert state.player2_score == 8
    assert state.player1_score == 0


def test_to_dict_exposes_document_shape(state, now):
    data = state.to_dict(now)
    assert data["player1"] == "Nish"
    assert data["player2"] == "Jess"
    assert data["timeUntilReset"] == 24 * 60 * 60 * 1000
    assert [t["name"] for t in data["dailyTasks"]] == ["Water Drank", "Studied", "Workout Done"]
    assert data["dailyHistory"] == []
