"""Task store operations.

Each function runs one independent operation against the session it is
given and translates store failures into :class:`PersistenceError`.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import NotFoundError, PersistenceError, ValidationError
from ..models import Task
from ..schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


@contextmanager
def _store_operation(db: Session, failure_message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s", failure_message)
        raise PersistenceError(failure_message) from exc


def _get_update_data(task_update: TaskUpdate) -> dict:
    if hasattr(task_update, "model_dump"):
        return task_update.model_dump(exclude_unset=True, exclude={"id"})
    return task_update.dict(exclude_unset=True, exclude={"id"})


def _require_title(title) -> None:
    if title is None or not title.strip():
        raise ValidationError("Task title is required")


def _find(db: Session, task_id: str) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found", task_id=task_id)
    return task


def create_task(db: Session, payload: TaskCreate) -> Task:
    """Insert a new, not yet completed task."""
    _require_title(payload.title)

    with _store_operation(db, "Failed to create task"):
        task = Task(
            title=payload.title,
            description=payload.description,
            assigned_to=payload.assigned_to,
            completed=False,
        )
        db.add(task)
        db.commit()
        db.refresh(task)

    logger.info("Created task %s", task.id)
    return task


def list_tasks(db: Session) -> List[Task]:
    """Return every task in insertion order."""
    with _store_operation(db, "Failed to fetch tasks"):
        return db.query(Task).order_by(Task.seq.asc()).all()


def update_task(db: Session, payload: TaskUpdate) -> Task:
    """Apply the fields present in ``payload`` to the task it names."""
    changes = _get_update_data(payload)
    if "title" in changes:
        _require_title(changes["title"])
    if "completed" in changes and changes["completed"] is None:
        raise ValidationError("Task completion flag cannot be null")

    with _store_operation(db, "Failed to update task"):
        task = _find(db, payload.id)
        for field, value in changes.items():
            setattr(task, field, value)
        db.commit()
        db.refresh(task)

    logger.info("Updated task %s fields=%s", task.id, sorted(changes))
    return task


def delete_task(db: Session, task_id: str) -> None:
    """Remove the task matching ``task_id``."""
    with _store_operation(db, "Failed to delete task"):
        task = _find(db, task_id)
        db.delete(task)
        db.commit()

    logger.info("Deleted task %s", task_id)
