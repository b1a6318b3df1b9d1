"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides a generic paginate function and a Page result model
for consistent pagination across repositories and list endpoints.
"""

import math
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.exceptions import BadRequestError

T = TypeVar("T")
R = TypeVar("R")


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Pagination result model for typed responses.
    Contains the paginated items and metadata for client-side pagination controls.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total number of pages)
    """

    # ORM 엔티티도 항목으로 담을 수 있도록 허용 (Allow ORM entities as items)
    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[T]  # 현재 페이지 항목 목록 (Paginated items)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 번호 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)
    pages: int  # 전체 페이지 수 (Total pages, computed: ceil(total/per_page))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next

    def map(self, fn: Callable[[T], R]) -> "Page[R]":
        """항목을 변환한 새 페이지를 반환합니다.

        Return a new page whose items are ``fn`` applied to each item,
        keeping the paging metadata.
        """
        return Page(
            items=[fn(item) for item in self.items],
            total=self.total,
            page=self.page,
            per_page=self.per_page,
            pages=self.pages,
        )


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
    count_query: Select[Any] | None = None,
) -> Page[Any]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and paging metadata.
    Runs two queries: one for the total count and one for the actual page of
    results with OFFSET/LIMIT. When ``count_query`` is given it is used as-is,
    which lets callers avoid counting over joins; otherwise the base query is
    wrapped in a subquery and counted.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed, default: 1)
        per_page: 페이지당 항목 수 (Items per page, default: 20)
        count_query: 별도 카운트 쿼리 (Optional separate count query)

    Returns:
        Page[Any]: 페이지 결과 (Page of items with metadata)

    Raises:
        BadRequestError: page 또는 per_page가 1 미만일 때 (page/per_page below 1)
    """
    if page < 1:
        raise BadRequestError("page must be >= 1")
    if per_page < 1:
        raise BadRequestError("per_page must be >= 1")

    # 전체 개수 조회 (Count total)
    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    items: list[Any] = []
    if total > 0:
        # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
        offset: int = (page - 1) * per_page
        result = await db.execute(query.offset(offset).limit(per_page))
        items = list(result.scalars().unique().all())

    return Page(
        items=items,
        total=total,
        page=page,
        per_page=per_page,
        pages=math.ceil(total / per_page) if total else 0,
    )
