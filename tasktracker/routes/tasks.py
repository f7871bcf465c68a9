# tasktracker/routes/tasks.py
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from .. import mutations, queries, schemas

router = APIRouter(prefix="/tasks", tags=["tasks"])


# 1) List tasks (filter + sort + pagination)
@router.get(
    "",
    response_model=schemas.TaskPage,
    summary="List tasks",
    description=(
        "Return one page of tasks plus pagination metadata.\n\n"
        "• **Filter**: `status` ∈ {all, pending, in-progress, completed} (unknown → all)\n"
        "• **Sort**: `sortBy` ∈ {id, description, createdAt} (unknown → createdAt), "
        "`sortOrder` ∈ {asc, desc}\n"
        "• **Pagination**: `page` (≥1), `limit` (≥1)"
    ),
)
def list_tasks(
    db: Session = Depends(get_db),
    status_filter: Optional[str] = Query(default=queries.STATUS_ALL, alias="status"),
    sort_by: Optional[str] = Query(default=queries.DEFAULT_SORT_BY, alias="sortBy"),
    sort_order: Optional[str] = Query(default=queries.DEFAULT_SORT_ORDER, alias="sortOrder"),
    page: int = 1,
    limit: Optional[int] = None,
):
    if limit is None:
        limit = get_settings().DEFAULT_PAGE_SIZE

    items, total = queries.list_tasks(
        db,
        status=status_filter,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return schemas.TaskPage(
        tasks=[schemas.TaskOut.model_validate(t) for t in items],
        pagination=queries.build_pagination(total, page, limit),
    )


# 2) Get a specific task
@router.get("/{task_id}", response_model=schemas.TaskOut, summary="Get a task by ID")
def get_task(task_id: int, db: Session = Depends(get_db)):
    return queries.get_task(db, task_id)


# 3) Create a new task
@router.post(
    "",
    response_model=list[schemas.TaskOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    description="Create a new `pending` task. The created task comes back wrapped in a list.",
)
def create_task(payload: schemas.TaskCreate, db: Session = Depends(get_db)):
    return [mutations.create_task(db, payload.description)]


# 4) Replace a task's description
@router.put(
    "/{task_id}",
    response_model=list[schemas.TaskOut],
    summary="Edit a task's description",
    description="Only `description` is read from the body; other echoed fields are ignored.",
)
def update_description(
    task_id: int,
    payload: schemas.TaskDescriptionUpdate,
    db: Session = Depends(get_db),
):
    return [mutations.update_description(db, task_id, payload.description)]


# 5) Change a task's status
@router.patch("/{task_id}", response_model=list[schemas.TaskOut], summary="Change a task's status")
def update_status(
    task_id: int,
    payload: schemas.TaskStatusUpdate,
    db: Session = Depends(get_db),
):
    return [mutations.update_status(db, task_id, payload.status)]


# 6) Delete a task (deleting a missing id is still a success)
@router.delete(
    "/{task_id}",
    response_model=schemas.DeleteResult,
    summary="Delete a task",
    description="Delete a task permanently. Deleting an id that does not exist is a no-op.",
)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    mutations.delete_task(db, task_id)
    return schemas.DeleteResult()
