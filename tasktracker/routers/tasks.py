from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.task import (
    DeleteResponse,
    ErrorResponse,
    Task as TaskSchema,
    TaskCreate,
    TaskDelete,
    TaskUpdate,
)
from ..services import tasks as task_service

router = APIRouter()

_ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Task not found"},
    422: {"model": ErrorResponse, "description": "Invalid task data"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}


@router.post("/create", response_model=TaskSchema, responses=_ERROR_RESPONSES)
def create_task(task: TaskCreate, db: Session = Depends(get_db)):
    """Create a new task. ``completed`` always starts out false."""
    return task_service.create_task(db, task)


@router.get("/get", response_model=List[TaskSchema], responses=_ERROR_RESPONSES)
def get_tasks(db: Session = Depends(get_db)):
    """Get all tasks in the order they were created."""
    return task_service.list_tasks(db)


@router.put("/update", response_model=TaskSchema, responses=_ERROR_RESPONSES)
def update_task(task_update: TaskUpdate, db: Session = Depends(get_db)):
    """Update any subset of title, description, assignedTo and completed."""
    return task_service.update_task(db, task_update)


@router.delete("/delete", response_model=DeleteResponse, responses=_ERROR_RESPONSES)
def delete_task(payload: TaskDelete, db: Session = Depends(get_db)):
    task_service.delete_task(db, payload.id)
    return DeleteResponse(id=payload.id)
