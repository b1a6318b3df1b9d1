"""멤버 레포지토리 — 멤버 조회 쿼리 모음.

Member Repository — Query surface for members.
Extends BaseRepository with member lookups by username/age, a team
projection, paging with a separate count query, a bulk age update,
team fetch-join variants, a read-only lookup and a locking lookup.

Return shapes follow one rule:
    - list-returning queries never return None (empty list when nothing matches)
    - single-result queries return None when absent and raise
      IncorrectResultSizeError when several rows match
"""

import logging
from collections.abc import Collection
from typing import Any, Optional, Sequence

from sqlalchemy import Select, bindparam, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload
from sqlalchemy.orm.util import identity_key

from app.models.member import Member
from app.models.team import Team
from app.repositories.base import BaseRepository
from app.repositories.member_custom_repository import MemberCustomRepository
from app.repositories.named_queries import get_named_query, register_named_query
from app.schemas.member import MemberDto
from app.utils.exceptions import IncorrectResultSizeError
from app.utils.pagination import Page, paginate

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# 네임드 쿼리 — 애플리케이션 시작 시 컴파일 검증
# Named queries, compiled and checked during application startup
# ---------------------------------------------------------------------------
register_named_query(
    "Member.findByUsername",
    select(Member).where(Member.username == bindparam("username")),
)
register_named_query(
    "Member.findUser",
    select(Member).where(
        Member.username == bindparam("username"),
        Member.age == bindparam("age"),
    ),
)
register_named_query(
    "Member.findMemberDto",
    select(Member.id, Member.username, Team.name.label("team_name"))
    .join(Member.team)
    .order_by(Member.id),
    projection=MemberDto,
)
register_named_query(
    "Member.findByNames",
    select(Member).where(Member.username.in_(bindparam("names", expanding=True))),
)
register_named_query(
    "Member.findMemberEntityGraph",
    select(Member).options(joinedload(Member.team)).order_by(Member.id),
)


class MemberRepository(BaseRepository[Member], MemberCustomRepository):
    """멤버 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the members table.
    The ``team`` relationship is lazy; only the fetch-join variants
    (``find_all``, ``find_member_entity_graph``,
    ``find_entity_graph_by_username``) load it in the same round trip.
    """

    def __init__(self) -> None:
        super().__init__(Member)

    async def _list(
        self,
        db: AsyncSession,
        query: Select,
        params: dict[str, Any] | None = None,
    ) -> list[Member]:
        result = await db.execute(query, params or {})
        return list(result.scalars().unique().all())

    async def _single_or_none(
        self,
        db: AsyncSession,
        query: Select,
    ) -> Member | None:
        """단건 조회 — 없으면 None, 두 건 이상이면 예외."""
        members: list[Member] = await self._list(db, query)
        if len(members) > 1:
            raise IncorrectResultSizeError(expected=1, actual=len(members))
        return members[0] if members else None

    # ------------------------------------------------------------------
    # 조건 조회 — Filtered lookups
    # ------------------------------------------------------------------
    async def find_by_username_and_age_greater_than(
        self,
        db: AsyncSession,
        username: str,
        age: int,
    ) -> list[Member]:
        """사용자 이름이 같고 나이가 age보다 큰 멤버를 조회합니다.

        Retrieve members with the given username and ``age`` strictly greater
        than the given value.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 사용자 이름 (Username to match exactly)
            age: 나이 하한, 미포함 (Exclusive lower bound on age)

        Returns:
            list[Member]: 멤버 목록 (Matching members, possibly empty)
        """
        query: Select = select(Member).where(
            Member.username == username,
            Member.age > age,
        )
        return await self._list(db, query)

    async def find_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> list[Member]:
        """네임드 쿼리 ``Member.findByUsername`` 실행."""
        named = get_named_query("Member.findByUsername")
        return await self._list(db, named.statement, {"username": username})

    async def find_user(
        self,
        db: AsyncSession,
        username: str,
        age: int,
    ) -> list[Member]:
        """사용자 이름과 나이가 모두 일치하는 멤버를 조회합니다.

        Retrieve members matching both ``username`` and ``age`` exactly.
        """
        named = get_named_query("Member.findUser")
        return await self._list(db, named.statement, {"username": username, "age": age})

    async def find_member_dto(self, db: AsyncSession) -> list[MemberDto]:
        """멤버와 팀을 조인해 DTO 목록으로 반환합니다.

        Project members joined with their team into ``MemberDto`` rows.
        Inner join: members without a team are not returned.

        Returns:
            list[MemberDto]: (id, username, team_name) DTO 목록
        """
        named = get_named_query("Member.findMemberDto")
        result = await db.execute(named.statement)
        return [MemberDto(**row._asdict()) for row in result.all()]

    async def find_by_names(
        self,
        db: AsyncSession,
        names: Collection[str],
    ) -> list[Member]:
        """사용자 이름이 names에 포함된 멤버를 조회합니다.

        Retrieve members whose username is in ``names``.
        An empty collection yields an empty list without querying.
        """
        if not names:
            return []
        named = get_named_query("Member.findByNames")
        return await self._list(db, named.statement, {"names": list(names)})

    # ------------------------------------------------------------------
    # 반환 형태별 조회 — Lookups differing only in return shape
    # ------------------------------------------------------------------
    async def find_list_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> list[Member]:
        """목록 반환 — 결과가 없으면 빈 리스트 (Never None)."""
        return await self._list(db, select(Member).where(Member.username == username))

    async def find_member_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> Member | None:
        """단건 반환 — 결과가 없으면 None.

        Retrieve the single member with ``username``.

        Raises:
            IncorrectResultSizeError: 두 명 이상 일치할 때 (More than one match)
        """
        return await self._single_or_none(db, select(Member).where(Member.username == username))

    async def find_optional_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> Optional[Member]:
        """Optional 반환 — 부재는 None으로 표현됩니다.

        Raises:
            IncorrectResultSizeError: 두 명 이상 일치할 때 (More than one match)
        """
        return await self._single_or_none(db, select(Member).where(Member.username == username))

    # ------------------------------------------------------------------
    # 페이징 — Paging
    # ------------------------------------------------------------------
    async def find_by_age(
        self,
        db: AsyncSession,
        age: int,
        page: int = 1,
        per_page: int = 20,
        order_by: Sequence[Any] | None = None,
    ) -> Page[Member]:
        """나이가 일치하는 멤버를 페이지 단위로 조회합니다.

        Retrieve a page of members with the given age. The content query
        left-joins the team and loads it from the joined columns. The count
        query is a separate COUNT over members only, so the join never runs
        for the total. It applies the same age filter as the content query,
        so ``total`` counts matching members rather than every member.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            age: 나이 (Age to match)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)
            order_by: 정렬 기준, 기본은 id 오름차순 (Sort expressions, default id asc)

        Returns:
            Page[Member]: 멤버 페이지 (Page of members with total count)
        """
        query: Select = (
            select(Member)
            .outerjoin(Member.team)
            .options(contains_eager(Member.team))
            .where(Member.age == age)
            .order_by(*(order_by or (Member.id,)))
        )
        count_query: Select = select(func.count(Member.id)).where(Member.age == age)
        return await paginate(db, query, page=page, per_page=per_page, count_query=count_query)

    # ------------------------------------------------------------------
    # 벌크 업데이트 — Bulk update
    # ------------------------------------------------------------------
    async def bulk_age_plus(
        self,
        db: AsyncSession,
        age: int,
        clear_automatically: bool = True,
    ) -> int:
        """age 이상인 모든 멤버의 나이를 1 증가시킵니다.

        Increment ``age`` by one for every member at or above the threshold
        in a single UPDATE statement. Pending changes are flushed first. The
        statement bypasses the identity map, so with ``clear_automatically``
        the session is cleared afterwards and later reads load fresh rows;
        instances held by the caller become detached.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            age: 나이 기준, 포함 (Inclusive age threshold)
            clear_automatically: 실행 후 세션 비우기 여부 (Clear session afterwards)

        Returns:
            int: 변경된 행 수 (Number of rows updated)
        """
        await db.flush()
        stmt = (
            update(Member)
            .where(Member.age >= age)
            .values(age=Member.age + 1)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        if clear_automatically:
            db.expunge_all()

        updated: int = result.rowcount
        logger.info("Bulk age update: threshold=%d, updated=%d", age, updated)
        return updated

    # ------------------------------------------------------------------
    # 페치 조인 — Team fetched in the same round trip
    # ------------------------------------------------------------------
    async def find_all(self, db: AsyncSession) -> list[Member]:
        """모든 멤버를 팀과 함께 조회합니다."""
        query: Select = select(Member).options(joinedload(Member.team)).order_by(Member.id)
        return await self._list(db, query)

    async def find_member_entity_graph(self, db: AsyncSession) -> list[Member]:
        """네임드 쿼리 ``Member.findMemberEntityGraph`` — 팀 페치 조인."""
        named = get_named_query("Member.findMemberEntityGraph")
        return await self._list(db, named.statement)

    async def find_entity_graph_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> list[Member]:
        """사용자 이름으로 멤버를 팀과 함께 조회합니다."""
        query: Select = (
            select(Member)
            .options(joinedload(Member.team))
            .where(Member.username == username)
        )
        return await self._list(db, query)

    # ------------------------------------------------------------------
    # 읽기 전용 / 잠금 — Read-only and locking lookups
    # ------------------------------------------------------------------
    async def find_read_only_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> Member | None:
        """변경 추적 없이 멤버를 조회합니다.

        Retrieve a member without change tracking: a freshly loaded instance
        is detached from the session, so modifications made to it are never
        flushed and its lazy ``team`` cannot be loaded. A member the session
        already manages is returned as-is and stays managed.

        Raises:
            IncorrectResultSizeError: 두 명 이상 일치할 때 (More than one match)
        """
        result = await db.execute(select(Member.id).where(Member.username == username))
        ids: list[int] = list(result.scalars().all())
        if len(ids) > 1:
            raise IncorrectResultSizeError(expected=1, actual=len(ids))
        if not ids:
            return None

        # 세션이 이미 관리 중인 엔티티는 분리하지 않음 (Leave managed entities alone)
        managed = db.identity_map.get(identity_key(Member, ids[0]))
        if managed is not None:
            return managed

        member: Member | None = await self.get_by_id(db, ids[0])
        if member is not None:
            db.expunge(member)
        return member

    def lock_by_username_query(self, username: str) -> Select:
        """비관적 쓰기 잠금(SELECT ... FOR UPDATE) 쿼리를 생성합니다."""
        return select(Member).where(Member.username == username).with_for_update()

    async def find_lock_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> list[Member]:
        """행 잠금을 걸고 멤버를 조회합니다.

        Retrieve members with an exclusive row lock held until the enclosing
        transaction ends. Dialects without row locks (SQLite) ignore it.
        """
        return await self._list(db, self.lock_by_username_query(username))


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
