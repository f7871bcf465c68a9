# tasktracker/schemas.py
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from .validation import TaskStatus  # shared with the client, no DB import

StatusFilter = Literal["all", "pending", "in-progress", "completed"]
SortField = Literal["id", "description", "createdAt"]
SortOrder = Literal["asc", "desc"]

# camelCase on the wire, snake_case in Python; either is accepted on input
_wire = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request bodies keep every field optional so a missing value reaches the
# handler and comes back as a 400, not a schema-level 422.
class TaskCreate(BaseModel):
    description: Optional[str] = None

class TaskDescriptionUpdate(BaseModel):
    # PUT bodies may echo the whole task; anything but description is ignored
    description: Optional[str] = None

class TaskStatusUpdate(BaseModel):
    status: Optional[str] = None

class TaskOut(BaseModel):
    id: int
    description: str
    # Accept Enum from the ORM, but serialize to its string value automatically
    status: TaskStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_count: int   # tasks matching the filter, ignoring paging
    limit: int
    has_next_page: bool
    has_previous_page: bool

    model_config = _wire

class TaskPage(BaseModel):
    tasks: list[TaskOut]  # the actual tasks on this page
    pagination: PaginationMeta

class DeleteResult(BaseModel):
    message: str = "success"
    error: Optional[str] = None
