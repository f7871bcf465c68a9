# tasktracker/validation.py
"""
Task field rules shared by the server and the client package.

Nothing here touches the database, so the client can check input locally
without pulling in an engine or a driver.
"""
import enum
from typing import Optional

from .errors import ValidationError


# The only three values a task status may take
class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


STATUS_VALUES = [s.value for s in TaskStatus]


def clean_description(description: Optional[str]) -> str:
    if description is None or not description.strip():
        raise ValidationError("Description is required")
    return description.strip()


def parse_status(status: Optional[str]) -> TaskStatus:
    if not status:
        raise ValidationError("Status is required")
    try:
        return TaskStatus(status)
    except ValueError:
        raise ValidationError(
            f"Invalid status {status!r}; expected one of {', '.join(STATUS_VALUES)}"
        )
