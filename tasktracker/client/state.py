"""Client view-model: board state, actions, commands and the reducer.

``update(state, action)`` is pure. It returns the next state together with
the commands (requests, timers) the runtime has to carry out; their results
come back as further actions.
"""
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Tuple, Type

from ..errors import NotFoundError
from ..schemas.task import Task

TITLE_REQUIRED = "Task title is required"
LOAD_FAILED = "Failed to load tasks. Please try again."
CREATE_FAILED = "Failed to create task. Please try again."
UPDATE_FAILED = "Failed to update task status"
DELETE_FAILED = "Failed to delete task"
TASK_GONE = "Task no longer exists"


@dataclass(frozen=True)
class Draft:
    """Form contents for a task that has not been created yet."""
    title: str = ""
    description: str = ""
    assigned_to: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.title.strip()


@dataclass(frozen=True)
class BoardState:
    tasks: Tuple[Task, ...] = ()
    form: Draft = field(default_factory=Draft)
    is_loading: bool = True
    is_creating: bool = False
    error: Optional[str] = None
    error_generation: int = 0
    pending_delete: Optional[str] = None

    @property
    def total_count(self) -> int:
        return len(self.tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.completed)

    @property
    def progress_percentage(self) -> float:
        if not self.tasks:
            return 0.0
        return self.completed_count / self.total_count * 100

    def find(self, task_id: str) -> Optional[Task]:
        return next((task for task in self.tasks if task.id == task_id), None)


# Actions


@dataclass(frozen=True)
class Mount:
    pass


@dataclass(frozen=True)
class TasksLoaded:
    tasks: object


@dataclass(frozen=True)
class TasksFailed:
    error: Exception


@dataclass(frozen=True)
class EditDraft:
    field: str
    value: str


@dataclass(frozen=True)
class SubmitDraft:
    created_at: str


@dataclass(frozen=True)
class TaskCreated:
    task: Task


@dataclass(frozen=True)
class CreateFailed:
    error: Exception


@dataclass(frozen=True)
class ToggleTask:
    task_id: str


@dataclass(frozen=True)
class TaskUpdated:
    task: Task


@dataclass(frozen=True)
class UpdateFailed:
    task_id: str
    error: Exception


@dataclass(frozen=True)
class RequestDelete:
    task_id: str


@dataclass(frozen=True)
class ConfirmDelete:
    pass


@dataclass(frozen=True)
class CancelDelete:
    pass


@dataclass(frozen=True)
class TaskDeleted:
    task_id: str


@dataclass(frozen=True)
class DeleteFailed:
    task_id: str
    error: Exception


@dataclass(frozen=True)
class ErrorExpired:
    generation: int


@dataclass(frozen=True)
class DismissError:
    pass


# Commands


@dataclass(frozen=True)
class FetchTasks:
    pass


@dataclass(frozen=True)
class CreateTask:
    title: str
    description: Optional[str]
    assigned_to: Optional[str]
    created_at: str


@dataclass(frozen=True)
class UpdateTask:
    task_id: str
    completed: bool


@dataclass(frozen=True)
class DeleteTask:
    task_id: str


@dataclass(frozen=True)
class ScheduleErrorClear:
    generation: int


Result = Tuple[BoardState, List[object]]


def _with_error(state: BoardState, message: str, **changes) -> Result:
    generation = state.error_generation + 1
    state = replace(state, error=message, error_generation=generation, **changes)
    return state, [ScheduleErrorClear(generation)]


def _message_for(error: Exception, fallback: str) -> str:
    if isinstance(error, NotFoundError):
        return TASK_GONE
    return fallback


def _on_mount(state: BoardState, action: Mount) -> Result:
    return replace(state, is_loading=True, error=None), [FetchTasks()]


def _on_tasks_loaded(state: BoardState, action: TasksLoaded) -> Result:
    tasks = tuple(action.tasks) if isinstance(action.tasks, (list, tuple)) else ()
    return replace(state, tasks=tasks, is_loading=False, is_creating=False), []


def _on_tasks_failed(state: BoardState, action: TasksFailed) -> Result:
    return _with_error(state, LOAD_FAILED, tasks=(), is_loading=False, is_creating=False)


def _on_edit_draft(state: BoardState, action: EditDraft) -> Result:
    if action.field not in ("title", "description", "assigned_to"):
        raise ValueError(f"Unknown draft field: {action.field}")
    return replace(state, form=replace(state.form, **{action.field: action.value})), []


def _on_submit_draft(state: BoardState, action: SubmitDraft) -> Result:
    if state.form.is_blank:
        return _with_error(state, TITLE_REQUIRED)

    command = CreateTask(
        title=state.form.title,
        description=state.form.description or None,
        assigned_to=state.form.assigned_to or None,
        created_at=action.created_at,
    )
    return replace(state, is_creating=True, error=None), [command]


def _on_task_created(state: BoardState, action: TaskCreated) -> Result:
    # is_creating stays set until the refreshed list arrives
    state = replace(state, form=Draft(), is_loading=True)
    return state, [FetchTasks()]


def _on_create_failed(state: BoardState, action: CreateFailed) -> Result:
    return _with_error(state, CREATE_FAILED, is_creating=False)


def _on_toggle(state: BoardState, action: ToggleTask) -> Result:
    task = state.find(action.task_id)
    if task is None:
        return state, []
    return state, [UpdateTask(task_id=task.id, completed=not task.completed)]


def _on_task_updated(state: BoardState, action: TaskUpdated) -> Result:
    updated = action.task
    tasks = tuple(
        task.model_copy(update={"completed": updated.completed}) if task.id == updated.id else task
        for task in state.tasks
    )
    return replace(state, tasks=tasks), []


def _on_update_failed(state: BoardState, action: UpdateFailed) -> Result:
    return _with_error(state, _message_for(action.error, UPDATE_FAILED))


def _on_request_delete(state: BoardState, action: RequestDelete) -> Result:
    return replace(state, pending_delete=action.task_id), []


def _on_confirm_delete(state: BoardState, action: ConfirmDelete) -> Result:
    if state.pending_delete is None:
        return state, []
    return replace(state, pending_delete=None), [DeleteTask(state.pending_delete)]


def _on_cancel_delete(state: BoardState, action: CancelDelete) -> Result:
    return replace(state, pending_delete=None), []


def _on_task_deleted(state: BoardState, action: TaskDeleted) -> Result:
    tasks = tuple(task for task in state.tasks if task.id != action.task_id)
    return replace(state, tasks=tasks), []


def _on_delete_failed(state: BoardState, action: DeleteFailed) -> Result:
    return _with_error(state, _message_for(action.error, DELETE_FAILED))


def _on_error_expired(state: BoardState, action: ErrorExpired) -> Result:
    # A newer error re-armed the timer
    if action.generation != state.error_generation:
        return state, []
    return replace(state, error=None), []


def _on_dismiss_error(state: BoardState, action: DismissError) -> Result:
    return replace(state, error=None), []


_HANDLERS: Dict[Type, Callable[..., Result]] = {
    Mount: _on_mount,
    TasksLoaded: _on_tasks_loaded,
    TasksFailed: _on_tasks_failed,
    EditDraft: _on_edit_draft,
    SubmitDraft: _on_submit_draft,
    TaskCreated: _on_task_created,
    CreateFailed: _on_create_failed,
    ToggleTask: _on_toggle,
    TaskUpdated: _on_task_updated,
    UpdateFailed: _on_update_failed,
    RequestDelete: _on_request_delete,
    ConfirmDelete: _on_confirm_delete,
    CancelDelete: _on_cancel_delete,
    TaskDeleted: _on_task_deleted,
    DeleteFailed: _on_delete_failed,
    ErrorExpired: _on_error_expired,
    DismissError: _on_dismiss_error,
}


def update(state: BoardState, action: object) -> Result:
    """Apply ``action`` to ``state``; return the new state and commands to run."""
    try:
        handler = _HANDLERS[type(action)]
    except KeyError:
        raise TypeError(f"Unknown action: {action!r}") from None
    return handler(state, action)
