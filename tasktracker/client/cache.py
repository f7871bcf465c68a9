# tasktracker/client/cache.py
"""
Client-side copy of the visible page of tasks.

Mutations are applied locally first and confirmed or undone once the server
answers. Each one is tracked by a `Mutation`:

    IDLE -> PENDING(snapshot) -> COMMITTED | ROLLED_BACK(snapshot)

A rollback only ever touches the task the mutation was about; other rows and
the pagination state are left alone. At most one mutation per task id is in
flight at a time, a second one raises `TaskBusyError`.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..errors import ApiError, NotFoundError, TaskBusyError
from ..logging import logger
from ..validation import clean_description, parse_status
from ..schemas import TaskOut
from .api import TaskApiClient
from .pagination import PaginationController


class MutationState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled-back"


@dataclass(slots=True)
class RowState:
    loading: bool = False
    error: Optional[str] = None


@dataclass(slots=True)
class Mutation:
    kind: str  # "create", "description", "status" or "delete"
    task_id: int
    state: MutationState = MutationState.IDLE
    snapshot: Optional[TaskOut] = None
    index: Optional[int] = None
    error: Optional[str] = None

    def begin(self, snapshot: Optional[TaskOut], index: Optional[int]) -> None:
        self.snapshot = snapshot
        self.index = index
        self.state = MutationState.PENDING

    def commit(self) -> None:
        self.snapshot = None
        self.state = MutationState.COMMITTED

    def roll_back(self, error: str) -> None:
        self.error = error
        self.state = MutationState.ROLLED_BACK


class TaskCache:
    def __init__(
        self,
        api: TaskApiClient,
        controller: Optional[PaginationController] = None,
    ) -> None:
        self.api = api
        self.controller = controller or PaginationController()
        self.tasks: list[TaskOut] = []
        self.rows: dict[int, RowState] = {}
        self.loading = False
        self.error: Optional[str] = None  # last read / create failure, non-blocking

        self._in_flight: set[int] = set()
        self._next_temp_id = -1
        self._read_seq = 0
        self._applied_seq = 0

    # ---------- lookups ----------

    def get(self, task_id: int) -> Optional[TaskOut]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def _find(self, task_id: int) -> tuple[int, TaskOut]:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index, task
        raise NotFoundError(f"Task {task_id} is not on the current page")

    def row(self, task_id: int) -> RowState:
        return self.rows.get(task_id) or RowState()

    def clear_error(self, task_id: int) -> None:
        if task_id in self.rows:
            self.rows[task_id].error = None

    def is_busy(self, task_id: int) -> bool:
        return task_id in self._in_flight

    # ---------- reads ----------

    async def refresh(self) -> bool:
        """
        Reload the current page from the server.

        Responses that come back after a newer one has already been applied
        are dropped. On failure the current tasks stay and `error` is set.
        """
        self._read_seq += 1
        seq = self._read_seq
        self.loading = True
        try:
            page = await self.api.list_tasks(self.controller.query_params())
        except ApiError as e:
            if seq > self._applied_seq:
                logger.warning(f"Failed to fetch tasks: {e.message}")
                self.error = e.message
            return False
        finally:
            if seq == self._read_seq:
                self.loading = False

        if seq < self._applied_seq:
            logger.debug(f"Dropping stale task list response #{seq}")
            return False

        self._applied_seq = seq
        self.tasks = list(page.tasks)
        # Keep row state only for rows that are still visible
        self.rows = {t.id: self.rows.get(t.id) or RowState() for t in self.tasks}
        self.error = None
        self.controller.apply(page.pagination)
        return True

    # ---------- mutation bookkeeping ----------

    def _begin(self, task_id: int) -> None:
        if task_id in self._in_flight:
            raise TaskBusyError(task_id)
        self._in_flight.add(task_id)
        self.rows[task_id] = RowState(loading=True)

    def _finish(self, task_id: int) -> None:
        self._in_flight.discard(task_id)
        if task_id in self.rows:
            self.rows[task_id].loading = False

    def _put(self, task_id: int, task: TaskOut) -> None:
        for index, current in enumerate(self.tasks):
            if current.id == task_id:
                self.tasks[index] = task
                return

    def _fail(self, mutation: Mutation, error: ApiError) -> None:
        mutation.roll_back(error.message)
        row = self.rows.setdefault(mutation.task_id, RowState())
        row.error = error.message
        logger.warning(
            f"Rolled back {mutation.kind} of task {mutation.task_id}: {error.message}"
        )

    # ---------- mutations ----------

    async def create(self, description: str) -> Mutation:
        """Show a provisional task at the head of the list, then swap in the server's."""
        value = clean_description(description)

        temp_id = self._next_temp_id
        self._next_temp_id -= 1
        now = datetime.now(timezone.utc)
        provisional = TaskOut(
            id=temp_id, description=value, status="pending", created_at=now, updated_at=now
        )
        # A new task is pending, so it only belongs on a view that shows pending tasks
        shown = self.controller.state.status in ("all", "pending")

        mutation = Mutation("create", temp_id)
        self._begin(temp_id)
        mutation.begin(None, 0)
        if shown:
            self.tasks.insert(0, provisional)
        try:
            created = await self.api.create_task(value)
        except ApiError as e:
            self.tasks = [t for t in self.tasks if t.id != temp_id]
            self.rows.pop(temp_id, None)
            mutation.roll_back(e.message)
            self.error = e.message
            logger.warning(f"Failed to create task: {e.message}")
            return mutation
        finally:
            self._finish(temp_id)

        self._put(temp_id, created)
        self.rows.pop(temp_id, None)
        if shown:
            self.rows[created.id] = RowState()
        mutation.task_id = created.id
        mutation.commit()
        return mutation

    async def edit_description(self, task_id: int, description: str) -> Optional[Mutation]:
        """Returns None when the description is unchanged and nothing was sent."""
        value = clean_description(description)
        index, task = self._find(task_id)
        if value == task.description:
            return None

        mutation = Mutation("description", task_id)
        self._begin(task_id)
        mutation.begin(task, index)
        self._put(task_id, task.model_copy(update={"description": value}))
        try:
            updated = await self.api.update_description(task_id, value)
        except ApiError as e:
            self._put(task_id, mutation.snapshot)
            self._fail(mutation, e)
            return mutation
        finally:
            self._finish(task_id)

        self._put(task_id, updated)
        mutation.commit()
        return mutation

    async def set_status(self, task_id: int, status: str) -> Mutation:
        value = parse_status(status).value
        index, task = self._find(task_id)

        mutation = Mutation("status", task_id)
        self._begin(task_id)
        mutation.begin(task, index)
        self._put(task_id, task.model_copy(update={"status": value}))
        try:
            updated = await self.api.update_status(task_id, value)
        except ApiError as e:
            self._put(task_id, mutation.snapshot)
            self._fail(mutation, e)
            return mutation
        finally:
            self._finish(task_id)

        self._put(task_id, updated)
        mutation.commit()
        return mutation

    async def delete(self, task_id: int) -> Mutation:
        index, task = self._find(task_id)

        mutation = Mutation("delete", task_id)
        self._begin(task_id)
        mutation.begin(task, index)
        self.tasks.pop(index)
        try:
            await self.api.delete_task(task_id)
        except ApiError as e:
            # A refresh may have brought the row back in the meantime
            if self.get(task_id) is None:
                self.tasks.insert(min(mutation.index, len(self.tasks)), mutation.snapshot)
            self._fail(mutation, e)
            return mutation
        finally:
            self._finish(task_id)

        self.rows.pop(task_id, None)
        mutation.commit()
        return mutation
