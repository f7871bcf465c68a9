# tests/test_client.py
import subprocess
import sys
from pathlib import Path

import httpx
import pytest

from tasktracker.client.cache import MutationState, TaskCache
from tasktracker.client.pagination import PaginationController, ViewState
from tasktracker.client.api import TaskApiClient
from tasktracker.errors import ApiError


@pytest.mark.asyncio
async def test_api_client_round_trip(api_client):
    created = await api_client.create_task("buy milk")
    assert created.id > 0
    assert created.status == "pending"

    fetched = await api_client.get_task(created.id)
    assert fetched.description == "buy milk"

    updated = await api_client.update_status(created.id, "completed")
    assert updated.status == "completed"

    result = await api_client.delete_task(created.id)
    assert result.message == "success"
    assert result.error is None


@pytest.mark.asyncio
async def test_api_client_surfaces_server_errors(api_client):
    created = await api_client.create_task("x")
    with pytest.raises(ApiError) as exc:
        await api_client.update_status(created.id, "archived")
    assert exc.value.status_code == 400
    assert "archived" in exc.value.message

    with pytest.raises(ApiError) as exc:
        await api_client.get_task(12345)
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_cache_against_real_app(api_client):
    for i in range(12):
        await api_client.create_task(f"task {i}")

    controller = PaginationController(ViewState(limit=5, sort_by="id", sort_order="asc"))
    cache = TaskCache(api_client, controller)
    assert await cache.refresh() is True
    assert [t.description for t in cache.tasks] == [f"task {i}" for i in range(5)]
    assert controller.total_pages == 3

    assert controller.last() is True
    await cache.refresh()
    assert len(cache.tasks) == 2
    assert controller.meta.has_next_page is False

    target = cache.tasks[0].id
    mutation = await cache.set_status(target, "in-progress")
    assert mutation.state == MutationState.COMMITTED
    assert cache.get(target).updated_at is not None

    # the server refuses an edit of a task someone else already deleted
    await api_client.delete_task(target)
    mutation = await cache.edit_description(target, "too late")
    assert mutation.state == MutationState.ROLLED_BACK
    assert cache.get(target).description != "too late"
    assert cache.row(target).error

    controller.set_status_filter("in-progress")
    await cache.refresh()
    assert cache.tasks == []
    assert controller.meta.total_count == 0


def _served(mutation_body):
    """Client whose list call works and whose every other call gets a 200 with `mutation_body`."""
    task = {
        "id": 1,
        "description": "task 1",
        "status": "pending",
        "createdAt": "2026-01-01T00:00:00",
        "updatedAt": "2026-01-01T00:00:00",
    }
    page = {
        "tasks": [task],
        "pagination": {
            "currentPage": 1,
            "totalPages": 1,
            "totalCount": 1,
            "limit": 10,
            "hasNextPage": False,
            "hasPreviousPage": False,
        },
    }

    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json=page)
        return httpx.Response(200, **mutation_body)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://testserver")
    return TaskApiClient(client=http)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"text": "<html>proxy error</html>"},
    {"json": []},
    {"json": {"id": 1}},
    {"json": [{"id": "not a number"}]},
])
async def test_malformed_success_rolls_back(body):
    cache = TaskCache(_served(body), PaginationController(ViewState()))
    assert await cache.refresh() is True

    mutation = await cache.set_status(1, "completed")
    assert mutation.state == MutationState.ROLLED_BACK
    assert cache.get(1).status == "pending"
    assert cache.row(1).error
    assert cache.row(1).loading is False

    mutation = await cache.edit_description(1, "renamed")
    assert mutation.state == MutationState.ROLLED_BACK
    assert cache.get(1).description == "task 1"

    mutation = await cache.create("buy milk")
    assert mutation.state == MutationState.ROLLED_BACK
    assert [t.id for t in cache.tasks] == [1]


@pytest.mark.asyncio
async def test_malformed_list_keeps_current_page():
    cache = TaskCache(_served({"json": []}), PaginationController(ViewState()))
    await cache.refresh()
    cache.api = TaskApiClient(client=httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="oops")),
        base_url="http://testserver",
    ))
    assert await cache.refresh() is False
    assert [t.id for t in cache.tasks] == [1]
    assert cache.error


def test_client_package_does_not_load_the_database_layer():
    code = (
        "import sys, tasktracker.client.cache; "
        "print('tasktracker.database' in sys.modules, 'tasktracker.models' in sys.modules)"
    )
    out = subprocess.run(
        [sys.executable, "-c", code],
        cwd=Path(__file__).resolve().parents[1],
        capture_output=True,
        text=True,
        check=True,
    )
    assert out.stdout.split() == ["False", "False"]
