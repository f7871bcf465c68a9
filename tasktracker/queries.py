# tasktracker/queries.py
"""
Read side of the task store.

`list_tasks` turns the (status, sortBy, sortOrder, page, limit) tuple coming
off the query string into one filtered, ordered, windowed SELECT plus a COUNT
over the same filter. Unknown filter/sort values fall back to the defaults
instead of erroring; a bad page window is a `ValidationError`.
"""
from typing import Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .config import get_settings
from .errors import NotFoundError, StoreError, ValidationError
from .logging import logger

STATUS_ALL = "all"
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"

# OFFSET is a signed 64-bit integer in both Postgres and SQLite
MAX_OFFSET = 2**63 - 1

# Sort columns helper (prevents arbitrary column injection)
SORT_COLUMNS = {
    "id": models.Task.id,
    "description": models.Task.description,
    "createdAt": models.Task.created_at,
}


def normalize_status(status: Optional[str]) -> Optional[models.TaskStatus]:
    """None means "no filter": covers "all", missing and unknown values."""
    if not status or status == STATUS_ALL:
        return None
    try:
        return models.TaskStatus(status)
    except ValueError:
        logger.debug(f"Unknown status filter {status!r}, listing all tasks")
        return None


def normalize_sort(sort_by: Optional[str], sort_order: Optional[str]) -> tuple[str, str]:
    if sort_by not in SORT_COLUMNS:
        sort_by = DEFAULT_SORT_BY
    if sort_order not in ("asc", "desc"):
        sort_order = DEFAULT_SORT_ORDER
    return sort_by, sort_order


def check_window(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("page must be >= 1")
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    max_limit = get_settings().MAX_PAGE_SIZE
    if limit > max_limit:
        raise ValidationError(f"limit must be <= {max_limit}")
    if (page - 1) * limit > MAX_OFFSET:
        raise ValidationError("page is too large")


def list_tasks(
    db: Session,
    *,
    status: Optional[str] = STATUS_ALL,
    sort_by: Optional[str] = DEFAULT_SORT_BY,
    sort_order: Optional[str] = DEFAULT_SORT_ORDER,
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[models.Task], int]:
    """Return one page of tasks and the count of all tasks matching the filter."""
    check_window(page, limit)
    status_value = normalize_status(status)
    sort_by, sort_order = normalize_sort(sort_by, sort_order)

    stmt = select(models.Task)
    if status_value is not None:
        stmt = stmt.where(models.Task.status == status_value)

    col = SORT_COLUMNS[sort_by]
    if sort_order == "asc":
        order = (col.asc(), models.Task.id.asc())
    else:
        order = (col.desc(), models.Task.id.desc())

    try:
        # Count BEFORE pagination for total/total_pages
        total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        items = db.execute(
            stmt.order_by(*order)
                .offset((page - 1) * limit)
                .limit(limit)
        ).scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Error fetching tasks: {e}")
        raise StoreError("Failed to fetch tasks") from e

    return items, total


def build_pagination(total: int, page: int, limit: int) -> schemas.PaginationMeta:
    total_pages = (total + limit - 1) // limit  # ceil(total/limit)
    return schemas.PaginationMeta(
        current_page=page,
        total_pages=total_pages,
        total_count=total,
        limit=limit,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def get_task(db: Session, task_id: int) -> models.Task:
    try:
        task = db.get(models.Task, task_id)
    except SQLAlchemyError as e:
        logger.exception(f"Error fetching task {task_id}: {e}")
        raise StoreError("Failed to fetch task") from e
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    return task
