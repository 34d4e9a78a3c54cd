from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Optional


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (``assignedTo``) as well as snake_case."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TaskBase(CamelModel):
    """Base task schema with common fields."""
    title: str
    description: Optional[str] = None
    assigned_to: Optional[str] = None


class TaskCreate(TaskBase):
    """Schema for creating new tasks.

    Extra keys such as a client-stamped ``createdAt`` are ignored; the
    server always assigns the creation time.
    """
    pass


class TaskUpdate(CamelModel):
    """Partial update addressed by id; only the keys present are applied."""
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    completed: Optional[bool] = None


class TaskDelete(CamelModel):
    """Schema for deleting a task."""
    id: str


class Task(TaskBase):
    """Complete task schema with all fields."""
    id: str
    completed: bool = False
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DeleteResponse(BaseModel):
    detail: str = "Task deleted"
    id: str


class ErrorResponse(BaseModel):
    error: str
    code: str
