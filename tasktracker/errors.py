# tasktracker/errors.py
from typing import Optional


class TaskTrackerError(Exception):
    """Base error; `status_code` is what the HTTP layer answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskTrackerError):
    """Missing/blank required field or a value outside an allowed set."""

    status_code = 400


class NotFoundError(TaskTrackerError):
    status_code = 404


class StoreError(TaskTrackerError):
    """The database failed underneath an operation."""

    status_code = 500


class ApiError(TaskTrackerError):
    """A request from the client package failed (HTTP error or transport)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TaskBusyError(TaskTrackerError):
    """Another mutation for the same task id is still in flight."""

    status_code = 409

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} already has a change in progress")
        self.task_id = task_id
