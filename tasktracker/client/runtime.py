import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set

from ..config import ERROR_DISPLAY_SECONDS
from ..errors import TaskTrackerError
from .api import TaskApiClient
from .state import (
    BoardState,
    CancelDelete,
    ConfirmDelete,
    CreateFailed,
    CreateTask,
    DeleteFailed,
    DeleteTask,
    DismissError,
    EditDraft,
    ErrorExpired,
    FetchTasks,
    Mount,
    RequestDelete,
    ScheduleErrorClear,
    SubmitDraft,
    TaskCreated,
    TaskDeleted,
    TasksFailed,
    TasksLoaded,
    ToggleTask,
    TaskUpdated,
    UpdateFailed,
    UpdateTask,
    update,
)

logger = logging.getLogger(__name__)

Listener = Callable[[BoardState], None]


class TaskBoard:
    """Drives a :class:`BoardState` against the task API.

    Actions go through the reducer; every command it emits is executed here
    and its outcome dispatched back as an action. Runs on a single event loop.
    """

    def __init__(
        self,
        api: TaskApiClient,
        *,
        error_display_seconds: float = ERROR_DISPLAY_SECONDS,
        state: Optional[BoardState] = None,
    ):
        self.api = api
        self.error_display_seconds = error_display_seconds
        self.state = state or BoardState()
        self._listeners: List[Listener] = []
        self._error_timer: Optional[asyncio.TimerHandle] = None
        self._expiries: Set[asyncio.Task] = set()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def dispatch(self, action: object) -> BoardState:
        self.state, commands = update(self.state, action)
        for listener in list(self._listeners):
            listener(self.state)
        for command in commands:
            await self._run(command)
        return self.state

    async def _run(self, command: object) -> None:
        if isinstance(command, ScheduleErrorClear):
            self._arm_error_timer(command.generation)
        elif isinstance(command, FetchTasks):
            try:
                tasks = await self.api.list_tasks()
            except TaskTrackerError as exc:
                await self.dispatch(TasksFailed(exc))
            else:
                await self.dispatch(TasksLoaded(tasks))
        elif isinstance(command, CreateTask):
            try:
                task = await self.api.create_task(
                    command.title,
                    command.description,
                    command.assigned_to,
                    created_at=command.created_at,
                )
            except TaskTrackerError as exc:
                await self.dispatch(CreateFailed(exc))
            else:
                await self.dispatch(TaskCreated(task))
        elif isinstance(command, UpdateTask):
            try:
                task = await self.api.update_task(command.task_id, completed=command.completed)
            except TaskTrackerError as exc:
                await self.dispatch(UpdateFailed(command.task_id, exc))
            else:
                await self.dispatch(TaskUpdated(task))
        elif isinstance(command, DeleteTask):
            try:
                await self.api.delete_task(command.task_id)
            except TaskTrackerError as exc:
                await self.dispatch(DeleteFailed(command.task_id, exc))
            else:
                await self.dispatch(TaskDeleted(command.task_id))
        else:
            raise TypeError(f"Unknown command: {command!r}")

    def _arm_error_timer(self, generation: int) -> None:
        if self._error_timer is not None:
            self._error_timer.cancel()
        loop = asyncio.get_running_loop()
        self._error_timer = loop.call_later(
            self.error_display_seconds,
            self._expire_error,
            generation,
        )

    def _expire_error(self, generation: int) -> None:
        task = asyncio.ensure_future(self.dispatch(ErrorExpired(generation)))
        self._expiries.add(task)
        task.add_done_callback(self._expiry_done)

    def _expiry_done(self, task: asyncio.Task) -> None:
        self._expiries.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Clearing the error banner failed", exc_info=task.exception())

    def close(self) -> None:
        if self._error_timer is not None:
            self._error_timer.cancel()
            self._error_timer = None
        for task in list(self._expiries):
            task.cancel()

    # Convenience wrappers for the user-facing actions

    async def mount(self) -> BoardState:
        return await self.dispatch(Mount())

    async def edit(self, field: str, value: str) -> BoardState:
        return await self.dispatch(EditDraft(field, value))

    async def submit(self) -> BoardState:
        stamp = datetime.now(timezone.utc).isoformat()
        return await self.dispatch(SubmitDraft(created_at=stamp))

    async def toggle(self, task_id: str) -> BoardState:
        return await self.dispatch(ToggleTask(task_id))

    async def request_delete(self, task_id: str) -> BoardState:
        return await self.dispatch(RequestDelete(task_id))

    async def confirm_delete(self) -> BoardState:
        return await self.dispatch(ConfirmDelete())

    async def cancel_delete(self) -> BoardState:
        return await self.dispatch(CancelDelete())

    async def dismiss_error(self) -> BoardState:
        return await self.dispatch(DismissError())
