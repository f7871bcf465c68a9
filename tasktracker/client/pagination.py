# tasktracker/client/pagination.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..config import get_settings
from ..errors import ValidationError
from ..schemas import PaginationMeta


@dataclass(slots=True)
class ViewState:
    """What the list view is currently asking the server for."""

    page: int = 1
    limit: int = 10
    status: str = "all"
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    def query_params(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "status": self.status,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }


class PaginationController:
    """
    Owns the `ViewState` and the last pagination metadata the server sent.

    Changing the filter, the sort or the page size always goes back to page 1.
    Page jumps outside ``[1, total_pages]`` are ignored rather than raised.
    """

    def __init__(self, state: Optional[ViewState] = None) -> None:
        self.state = state or ViewState(limit=get_settings().DEFAULT_PAGE_SIZE)
        self.meta: Optional[PaginationMeta] = None

    @property
    def total_pages(self) -> int:
        return self.meta.total_pages if self.meta else 0

    def query_params(self) -> dict[str, Any]:
        return self.state.query_params()

    def apply(self, meta: PaginationMeta) -> None:
        self.meta = meta
        self.state.page = meta.current_page

    def set_status_filter(self, status: str) -> None:
        self.state.status = status
        self.state.page = 1

    def set_page_size(self, limit: int) -> None:
        if limit < 1:
            raise ValidationError("page size must be >= 1")
        self.state.limit = limit
        self.state.page = 1

    def sort(self, key: str) -> None:
        # Second click on the ascending column flips it; anything else starts ascending
        if self.state.sort_by == key and self.state.sort_order == "asc":
            self.state.sort_order = "desc"
        else:
            self.state.sort_by = key
            self.state.sort_order = "asc"
        self.state.page = 1

    def go_to(self, page: int) -> bool:
        if page < 1 or page > self.total_pages or page == self.state.page:
            return False
        self.state.page = page
        return True

    def first(self) -> bool:
        return self.go_to(1)

    def previous(self) -> bool:
        return self.go_to(self.state.page - 1)

    def next(self) -> bool:
        return self.go_to(self.state.page + 1)

    def last(self) -> bool:
        return self.go_to(self.total_pages)

    @property
    def has_next(self) -> bool:
        return self.state.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.state.page > 1

    def page_numbers(self, window: int = 5) -> list[int]:
        """Up to `window` page numbers around the current page, clipped to the ends."""
        total = self.total_pages
        if total == 0:
            return []
        window = min(window, total)
        start = max(1, self.state.page - window // 2)
        start = min(start, total - window + 1)
        return list(range(start, start + window))
