"""Pure reducer transitions of the client view-model."""
from datetime import datetime, timezone

import pytest

from tasktracker.client import state as board
from tasktracker.client.state import BoardState, Draft, update
from tasktracker.errors import NetworkError, NotFoundError
from tasktracker.schemas.task import Task

STAMP = "2026-01-01T00:00:00+00:00"


def _task(task_id: str, completed: bool = False) -> Task:
    return Task(
        id=task_id,
        title=f"task {task_id}",
        completed=completed,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def _loaded(*tasks: Task) -> BoardState:
    return BoardState(tasks=tuple(tasks), is_loading=False)


def test_mount_starts_loading_and_fetches():
    state, commands = update(BoardState(error="old"), board.Mount())

    assert state.is_loading is True
    assert state.error is None
    assert commands == [board.FetchTasks()]


def test_loaded_replaces_tasks():
    state, _ = update(BoardState(), board.TasksLoaded([_task("a"), _task("b")]))

    assert [t.id for t in state.tasks] == ["a", "b"]
    assert state.is_loading is False


def test_non_array_response_loads_as_empty():
    state, _ = update(_loaded(_task("a")), board.TasksLoaded({"unexpected": True}))

    assert state.tasks == ()


def test_load_failure_clears_tasks_and_arms_timer():
    state, commands = update(_loaded(_task("a")), board.TasksFailed(NetworkError("down")))

    assert state.tasks == ()
    assert state.error == board.LOAD_FAILED
    assert commands == [board.ScheduleErrorClear(state.error_generation)]


def test_blank_draft_is_rejected_without_request():
    state = _loaded(_task("a"))
    state, _ = update(state, board.EditDraft("title", "   "))

    state, commands = update(state, board.SubmitDraft(STAMP))

    assert state.error == board.TITLE_REQUIRED
    assert state.is_creating is False
    assert [t.id for t in state.tasks] == ["a"]
    assert not any(isinstance(c, board.CreateTask) for c in commands)


def test_submit_sends_draft_with_timestamp():
    state = BoardState(form=Draft(title="Buy milk", assigned_to="kim"))

    state, commands = update(state, board.SubmitDraft(STAMP))

    assert state.is_creating is True
    assert commands == [
        board.CreateTask(title="Buy milk", description=None, assigned_to="kim", created_at=STAMP)
    ]


def test_created_clears_draft_and_refetches():
    state = BoardState(form=Draft(title="Buy milk"), is_creating=True)

    state, commands = update(state, board.TaskCreated(_task("new")))

    assert state.form == Draft()
    assert state.is_creating is True
    assert commands == [board.FetchTasks()]


def test_refreshed_list_ends_creation():
    state = BoardState(is_creating=True)

    loaded, _ = update(state, board.TasksLoaded([_task("new")]))
    failed, _ = update(state, board.TasksFailed(NetworkError("down")))

    assert loaded.is_creating is False
    assert failed.is_creating is False


def test_create_failure_keeps_draft():
    state = BoardState(form=Draft(title="Buy milk"), is_creating=True)

    state, _ = update(state, board.CreateFailed(NetworkError("boom")))

    assert state.form.title == "Buy milk"
    assert state.is_creating is False
    assert state.error == board.CREATE_FAILED


def test_unknown_draft_field():
    with pytest.raises(ValueError):
        update(BoardState(), board.EditDraft("priority", "high"))


def test_toggle_requests_inverted_flag():
    _, commands = update(_loaded(_task("a", completed=True)), board.ToggleTask("a"))

    assert commands == [board.UpdateTask(task_id="a", completed=False)]


def test_toggle_unknown_task_is_noop():
    state = _loaded(_task("a"))

    assert update(state, board.ToggleTask("zzz")) == (state, [])


def test_updated_patches_only_that_task():
    state = _loaded(_task("a"), _task("b"))

    state, _ = update(state, board.TaskUpdated(_task("a", completed=True)))

    assert [t.completed for t in state.tasks] == [True, False]
    assert state.completed_count == 1
    assert state.progress_percentage == 50.0


def test_update_failure_leaves_tasks():
    state = _loaded(_task("a"))

    new_state, _ = update(state, board.UpdateFailed("a", NetworkError("x")))

    assert new_state.tasks == state.tasks
    assert new_state.error == board.UPDATE_FAILED


def test_update_of_vanished_task_says_so():
    state, _ = update(_loaded(_task("a")), board.UpdateFailed("a", NotFoundError("gone")))

    assert state.error == board.TASK_GONE


def test_delete_needs_confirmation():
    state, commands = update(_loaded(_task("a")), board.RequestDelete("a"))
    assert state.pending_delete == "a"
    assert commands == []

    cancelled, commands = update(state, board.CancelDelete())
    assert cancelled.pending_delete is None
    assert commands == []

    confirmed, commands = update(state, board.ConfirmDelete())
    assert confirmed.pending_delete is None
    assert commands == [board.DeleteTask("a")]


def test_confirm_without_request_is_noop():
    state = _loaded(_task("a"))

    assert update(state, board.ConfirmDelete()) == (state, [])


def test_deleted_removes_task():
    state, _ = update(_loaded(_task("a"), _task("b")), board.TaskDeleted("a"))

    assert [t.id for t in state.tasks] == ["b"]


def test_delete_failure_leaves_tasks():
    state, _ = update(_loaded(_task("a")), board.DeleteFailed("a", NetworkError("x")))

    assert [t.id for t in state.tasks] == ["a"]
    assert state.error == board.DELETE_FAILED


def test_later_error_outlives_earlier_timer():
    state, first = update(BoardState(), board.CreateFailed(NetworkError("1")))
    state, second = update(state, board.UpdateFailed("a", NetworkError("2")))

    state, _ = update(state, board.ErrorExpired(first[0].generation))
    assert state.error == board.UPDATE_FAILED

    state, _ = update(state, board.ErrorExpired(second[0].generation))
    assert state.error is None


def test_dismiss_error():
    state, _ = update(BoardState(error="oops"), board.DismissError())

    assert state.error is None


def test_progress_with_no_tasks():
    assert BoardState().progress_percentage == 0.0
    assert BoardState().total_count == 0


def test_unknown_action():
    with pytest.raises(TypeError):
        update(BoardState(), object())
