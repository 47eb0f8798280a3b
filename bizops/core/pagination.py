"""Pagination and table-query helpers for list endpoints."""


from fastapi import Query
from pydantic import BaseModel


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=50&sort=created_at&order=desc`."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=50, ge=1, le=500, description="Items per page"),
        sort: str | None = Query(default=None, description="Sort field (defaults per entity)"),
        order: str | None = Query(default=None, pattern="^(asc|desc)$", description="Sort order"),
    ):
        self.page = page
        self.limit = limit
        self.sort = sort
        self.order = order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class TableQueryParams(PaginationParams):
    """Pagination plus `?q=` search and repeated `?filter=key:operator:value`."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=50, ge=1, le=500, description="Items per page"),
        sort: str | None = Query(default=None, description="Sort field (defaults per entity)"),
        order: str | None = Query(default=None, pattern="^(asc|desc)$", description="Sort order"),
        q: str = Query(default="", description="Case-insensitive search over the entity's search fields"),
        filter: list[str] | None = Query(
            default=None,
            description="Filter as key:operator:value, e.g. status:equals:draft or group_type:in:Base,License",
        ),
    ):
        super().__init__(page=page, limit=limit, sort=sort, order=order)
        self.q = q
        self.filters = filter or []


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    model_config = {"populate_by_name": True}
