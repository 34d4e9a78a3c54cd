from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(SQLModel, table=True):
    """Task model for tracked items.

    ``seq`` is an internal insertion counter used to keep list order stable;
    it never leaves the service layer.
    """
    __tablename__ = "tasks"

    seq: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(default_factory=lambda: str(uuid4()), unique=True, index=True)
    title: str
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=_utcnow)
