"""Error kinds shared by the task service and the client.

The server maps each kind to a status code and an error ``code`` string;
the client maps them back when a request fails.
"""
from typing import Optional


class TaskTrackerError(Exception):
    """Base class for every error raised by tasktracker."""

    code = "error"
    status_code = 500

    def __init__(self, message: str, *, task_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.task_id = task_id


class ValidationError(TaskTrackerError):
    """A task would be persisted with a blank title, or the body is malformed."""

    code = "validation_error"
    status_code = 422


class NotFoundError(TaskTrackerError):
    """No task matches the given id."""

    code = "not_found"
    status_code = 404


class PersistenceError(TaskTrackerError):
    """The store raised while executing an operation."""

    code = "persistence_error"
    status_code = 500


class NetworkError(TaskTrackerError):
    """Client-side: the request failed in transit or got an unexpected status."""

    code = "network_error"
    status_code = 502


ERRORS_BY_CODE = {
    cls.code: cls for cls in (ValidationError, NotFoundError, PersistenceError)
}
