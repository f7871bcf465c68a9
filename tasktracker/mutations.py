# tasktracker/mutations.py
"""
Write side of the task store: create, edit description, change status, delete.

Each operation touches exactly one row and commits on its own. Database
failures are rolled back and re-raised as `StoreError`.
"""
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .errors import StoreError
from .validation import clean_description, parse_status
from .logging import logger
from .queries import get_task


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error {what}: {e}")
        raise StoreError(f"Failed {what}") from e


def create_task(db: Session, description: Optional[str]) -> models.Task:
    task = models.Task(
        description=clean_description(description),
        status=models.TaskStatus.PENDING,
    )
    db.add(task)
    _commit(db, "creating task")
    db.refresh(task)
    logger.info(f"Created task {task.id}")
    return task


def update_description(db: Session, task_id: int, description: Optional[str]) -> models.Task:
    value = clean_description(description)
    task = get_task(db, task_id)
    task.description = value
    task.updated_at = models.utcnow()
    _commit(db, f"updating task {task_id}")
    db.refresh(task)
    logger.info(f"Updated description of task {task_id}")
    return task


def update_status(db: Session, task_id: int, status: Optional[str]) -> models.Task:
    value = parse_status(status)
    task = get_task(db, task_id)
    task.status = value
    task.updated_at = models.utcnow()
    _commit(db, f"updating task {task_id}")
    db.refresh(task)
    logger.info(f"Task {task_id} is now {value.value}")
    return task


def delete_task(db: Session, task_id: int) -> bool:
    """Hard-delete a task. Deleting an id that is not there succeeds as a no-op."""
    try:
        result = db.execute(delete(models.Task).where(models.Task.id == task_id))
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error deleting task {task_id}: {e}")
        raise StoreError("Failed to delete task") from e
    _commit(db, f"deleting task {task_id}")

    if result.rowcount == 0:
        logger.info(f"Delete of task {task_id}: no such task, nothing to do")
        return False
    logger.info(f"Deleted task {task_id}")
    return True
