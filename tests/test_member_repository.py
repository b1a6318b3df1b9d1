"""멤버 레포지토리 테스트.

Member repository tests — filtered lookups, return-shape contracts, paging
with a separate count query, bulk update and session clearing, team fetch
variants, read-only and locking lookups.
"""

import pytest
from sqlalchemy import event, inspect
from sqlalchemy.dialects import postgresql

from app.models import Member, Team
from app.repositories.member_repository import member_repository
from app.repositories.team_repository import team_repository
from app.schemas.member import MemberDto
from app.seed import seed_members
from app.utils.exceptions import IncorrectResultSizeError


class TestFilteredLookups:
    """조건 조회 테스트."""

    async def test_username_and_age_greater_than(self, db, members):
        """나이 조건은 초과(>)로 비교."""
        result = await member_repository.find_by_username_and_age_greater_than(db, "AAA", 15)
        assert [(m.username, m.age) for m in result] == [("AAA", 20)]

        none = await member_repository.find_by_username_and_age_greater_than(db, "AAA", 20)
        assert none == []

    async def test_find_by_username_named_query(self, db, members):
        result = await member_repository.find_by_username(db, "AAA")
        assert len(result) == 2
        assert {m.age for m in result} == {10, 20}

    async def test_find_user(self, db, members):
        result = await member_repository.find_user(db, "AAA", 10)
        assert len(result) == 1
        assert result[0].age == 10

    async def test_find_member_dto_excludes_members_without_team(self, db, members):
        """DTO 프로젝션 — 팀 없는 멤버는 내부 조인으로 제외."""
        result = await member_repository.find_member_dto(db)
        assert all(isinstance(dto, MemberDto) for dto in result)
        assert [(d.username, d.team_name) for d in result] == [
            ("member1", "teamA"),
            ("member2", "teamA"),
            ("AAA", "teamB"),
            ("AAA", "teamB"),
        ]

    async def test_find_by_names(self, db, members):
        result = await member_repository.find_by_names(db, {"AAA", "member1"})
        assert sorted(m.username for m in result) == ["AAA", "AAA", "member1"]

    async def test_find_by_names_empty_collection(self, db, members):
        assert await member_repository.find_by_names(db, []) == []


class TestReturnShapes:
    """반환 형태별 조회 테스트."""

    async def test_list_result_is_empty_not_none(self, db, members):
        result = await member_repository.find_list_by_username(db, "nobody")
        assert result == []

    async def test_single_result_none_when_absent(self, db, members):
        assert await member_repository.find_member_by_username(db, "nobody") is None

    async def test_single_result_found(self, db, members):
        member = await member_repository.find_member_by_username(db, "member1")
        assert member is not None
        assert member.age == 10

    async def test_optional_result(self, db, members):
        assert await member_repository.find_optional_by_username(db, "nobody") is None
        found = await member_repository.find_optional_by_username(db, "loner")
        assert found is not None and found.age == 30

    async def test_single_result_with_duplicates_raises(self, db, members):
        """동명이인 단건 조회 시 예외."""
        with pytest.raises(IncorrectResultSizeError) as exc_info:
            await member_repository.find_member_by_username(db, "AAA")
        assert exc_info.value.actual == 2

        with pytest.raises(IncorrectResultSizeError):
            await member_repository.find_optional_by_username(db, "AAA")


class TestPaging:
    """페이징 테스트."""

    @pytest.fixture
    async def same_age_members(self, db, teams):
        for i in range(1, 6):
            db.add(Member(username=f"m{i}", age=10, team=teams["teamA"]))
        db.add(Member(username="older", age=11))
        await db.flush()

    async def test_first_page(self, db, same_age_members):
        page = await member_repository.find_by_age(
            db, 10, page=1, per_page=3, order_by=[Member.username.desc()]
        )
        assert [m.username for m in page.items] == ["m5", "m4", "m3"]
        assert page.total == 5
        assert page.pages == 2
        assert page.is_first
        assert page.has_next

    async def test_last_page(self, db, same_age_members):
        page = await member_repository.find_by_age(
            db, 10, page=2, per_page=3, order_by=[Member.username.desc()]
        )
        assert [m.username for m in page.items] == ["m2", "m1"]
        assert page.is_last
        assert not page.has_next

    async def test_no_match(self, db, same_age_members):
        page = await member_repository.find_by_age(db, 99, page=1, per_page=3)
        assert page.items == []
        assert page.total == 0
        assert page.pages == 0

    async def test_total_counts_only_matching_age(self, db, same_age_members):
        """카운트는 나이 조건을 그대로 적용 (older 멤버 제외)."""
        assert await member_repository.count(db) == 6
        page = await member_repository.find_by_age(db, 10, page=1, per_page=10)
        assert page.total == 5
        assert len(page.items) == 5

    async def test_page_loads_team_from_join(self, db, same_age_members):
        """외부 조인 결과로 팀까지 함께 로딩."""
        db.expunge_all()
        page = await member_repository.find_by_age(db, 10, page=1, per_page=3)
        assert all("team" not in inspect(m).unloaded for m in page.items)
        assert {m.team.name for m in page.items} == {"teamA"}

    async def test_count_query_has_no_join(self, db, engine, same_age_members):
        """카운트 쿼리는 조인 없이 별도로 실행."""
        statements: list[str] = []

        def _capture(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement.upper())

        event.listen(engine.sync_engine, "before_cursor_execute", _capture)
        try:
            await member_repository.find_by_age(db, 10, page=1, per_page=3)
        finally:
            event.remove(engine.sync_engine, "before_cursor_execute", _capture)

        counts = [s for s in statements if "COUNT(" in s]
        contents = [s for s in statements if "COUNT(" not in s and "SELECT" in s]
        assert len(counts) == 1
        assert "JOIN" not in counts[0]
        assert "LEFT OUTER JOIN" in contents[0]


class TestBulkUpdate:
    """벌크 업데이트 테스트."""

    async def test_bulk_age_plus_counts_rows(self, db, members):
        """20살 이상 3명(20, 20, 30) 변경."""
        updated = await member_repository.bulk_age_plus(db, 20)
        assert updated == 3

    async def test_reads_after_bulk_update_are_fresh(self, db, members):
        loner = members[4]
        await member_repository.bulk_age_plus(db, 20)

        # 세션이 비워져 기존 인스턴스는 분리됨 (Held instances are detached)
        assert inspect(loner).detached

        reloaded = await member_repository.find_member_by_username(db, "loner")
        assert reloaded is not loner
        assert reloaded.age == 31

    async def test_without_clear_reads_are_stale(self, db, members):
        """세션을 비우지 않으면 식별자 맵의 이전 값이 그대로 보임."""
        loner = members[4]
        await member_repository.bulk_age_plus(db, 20, clear_automatically=False)

        reloaded = await member_repository.find_member_by_username(db, "loner")
        assert reloaded is loner
        assert reloaded.age == 30

    async def test_pending_changes_flushed_before_update(self, db, members):
        db.add(Member(username="newcomer", age=50))
        updated = await member_repository.bulk_age_plus(db, 20)
        assert updated == 4
        newcomer = await member_repository.find_member_by_username(db, "newcomer")
        assert newcomer.age == 51


class TestFetchStrategies:
    """지연 로딩 / 페치 조인 테스트."""

    async def test_team_is_lazy_by_default(self, db, members):
        db.expunge_all()
        result = await member_repository.find_list_by_username(db, "member1")
        member = result[0]
        assert "team" in inspect(member).unloaded

        team = await member.awaitable_attrs.team
        assert team.name == "teamA"

    async def test_find_all_fetches_team(self, db, members):
        db.expunge_all()
        result = await member_repository.find_all(db)
        assert [m.username for m in result] == ["member1", "member2", "AAA", "AAA", "loner"]
        assert all("team" not in inspect(m).unloaded for m in result)
        assert result[-1].team is None
        assert result[0].team.name == "teamA"

    async def test_entity_graph_query_fetches_team(self, db, members):
        db.expunge_all()
        result = await member_repository.find_member_entity_graph(db)
        assert len(result) == 5
        assert all("team" not in inspect(m).unloaded for m in result)

    async def test_entity_graph_by_username(self, db, members):
        db.expunge_all()
        result = await member_repository.find_entity_graph_by_username(db, "AAA")
        assert len(result) == 2
        assert {m.team.name for m in result} == {"teamB"}


class TestReadOnlyAndLock:
    """읽기 전용 / 잠금 조회 테스트."""

    async def test_read_only_changes_are_not_flushed(self, db, members):
        db.expunge_all()
        member = await member_repository.find_read_only_by_username(db, "member1")
        assert member is not None
        assert member not in db

        member.username = "member2-renamed"
        await db.flush()

        db.expunge_all()
        assert await member_repository.find_member_by_username(db, "member2-renamed") is None
        assert await member_repository.find_member_by_username(db, "member1") is not None

    async def test_read_only_keeps_managed_instance(self, db, members):
        """세션이 관리 중인 멤버는 분리되지 않고 이후 변경도 반영."""
        held = members[0]
        member = await member_repository.find_read_only_by_username(db, "member1")
        assert member is held
        assert held in db

        held.age = 77
        await db.flush()

        db.expunge_all()
        reloaded = await member_repository.find_member_by_username(db, "member1")
        assert reloaded.age == 77

    async def test_read_only_with_duplicates_raises(self, db, members):
        with pytest.raises(IncorrectResultSizeError):
            await member_repository.find_read_only_by_username(db, "AAA")

    async def test_read_only_absent(self, db, members):
        assert await member_repository.find_read_only_by_username(db, "nobody") is None

    async def test_lock_query_renders_for_update(self):
        query = member_repository.lock_by_username_query("member1")
        sql = str(query.compile(dialect=postgresql.dialect()))
        assert sql.rstrip().endswith("FOR UPDATE")

    async def test_find_lock_by_username(self, db, members):
        result = await member_repository.find_lock_by_username(db, "AAA")
        assert len(result) == 2


class TestCustomAndCrud:
    """커스텀 쿼리 및 기본 CRUD 테스트."""

    async def test_find_member_custom(self, db, members):
        result = await member_repository.find_member_custom(db)
        assert [m.id for m in result] == sorted(m.id for m in members)

    async def test_crud(self, db, teams):
        member = await member_repository.create(db, {"username": "crud", "age": 5})
        assert member.id is not None
        assert await member_repository.count(db) == 1
        assert await member_repository.exists(db, {"username": "crud"})

        updated = await member_repository.update(db, member.id, {"age": 6})
        assert updated.age == 6

        assert await member_repository.delete(db, member.id)
        assert await member_repository.get_by_id(db, member.id) is None
        assert not await member_repository.delete(db, member.id)

    async def test_create_with_team_id(self, db, teams):
        """매핑 컬럼(team_id)으로 생성."""
        member = await member_repository.create(
            db, {"username": "fk", "age": 1, "team_id": teams["teamA"].id}
        )
        assert member.team_id == teams["teamA"].id

        db.expunge_all()
        loaded = await member_repository.find_entity_graph_by_username(db, "fk")
        assert loaded[0].team.name == "teamA"

    async def test_save_with_team(self, db, teams):
        member = await member_repository.save(db, Member(username="joined", age=1, team=teams["teamB"]))
        assert member.team_id == teams["teamB"].id

    async def test_team_find_by_name(self, db, teams):
        result = await team_repository.find_by_name(db, "teamA")
        assert [t.name for t in result] == ["teamA"]
        assert await team_repository.find_by_name(db, "teamZ") == []

    async def test_change_team_updates_back_reference(self, db, teams):
        team_c = Team(name="teamC")
        member = Member(username="mover", age=3)
        member.change_team(team_c)
        assert member in team_c.members


class TestSeed:
    """시드 데이터 테스트."""

    async def test_seed_is_idempotent(self, db):
        assert await seed_members(db, count=10) is True
        assert await member_repository.count(db) == 10
        assert await seed_members(db, count=10) is False
        assert await member_repository.count(db) == 10

        dtos = await member_repository.find_member_dto(db)
        assert {d.team_name for d in dtos} == {"teamA", "teamB"}
