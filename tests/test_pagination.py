"""페이지네이션 유틸리티 테스트."""

import pytest
from sqlalchemy import func, select

from app.models import Member
from app.utils.exceptions import BadRequestError
from app.utils.pagination import Page, paginate


class TestPageModel:

    def test_metadata(self):
        page = Page(items=[1, 2], total=5, page=2, per_page=2, pages=3)
        assert page.has_next and page.has_previous
        assert not page.is_first and not page.is_last

    def test_map_keeps_metadata(self):
        page = Page(items=[1, 2], total=2, page=1, per_page=2, pages=1)
        mapped = page.map(lambda x: x * 10)
        assert mapped.items == [10, 20]
        assert (mapped.total, mapped.page, mapped.per_page, mapped.pages) == (2, 1, 2, 1)
        assert mapped.is_first and mapped.is_last

    def test_serializes_navigation_flags(self):
        data = Page(items=[], total=0, page=1, per_page=5, pages=0).model_dump()
        assert data["has_next"] is False
        assert data["has_previous"] is False


class TestPaginate:

    async def test_default_count_over_subquery(self, db, members):
        page = await paginate(db, select(Member).order_by(Member.id), page=2, per_page=2)
        assert page.total == 5
        assert page.pages == 3
        assert [m.username for m in page.items] == ["AAA", "AAA"]

    async def test_explicit_count_query(self, db, members):
        query = select(Member).where(Member.age == 10).order_by(Member.id)
        count_query = select(func.count(Member.id)).where(Member.age == 10)
        page = await paginate(db, query, page=1, per_page=10, count_query=count_query)
        assert page.total == 2
        assert len(page.items) == 2

    async def test_page_past_end(self, db, members):
        page = await paginate(db, select(Member), page=9, per_page=2)
        assert page.items == []
        assert page.total == 5

    @pytest.mark.parametrize("page_no, per_page", [(0, 5), (1, 0)])
    async def test_invalid_arguments(self, db, page_no, per_page):
        with pytest.raises(BadRequestError):
            await paginate(db, select(Member), page=page_no, per_page=per_page)
