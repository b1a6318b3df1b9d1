"""멤버 서비스 — 멤버 조회 및 벌크 업데이트 비즈니스 로직.

Member Service — Business logic for member listing, lookup and the
bulk age update. Converts entities to response schemas; entities whose
team is needed are always loaded with the team fetched.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.config import settings
from app.models.member import Member
from app.repositories.member_repository import member_repository
from app.schemas.member import MemberDto, MemberResponse, TeamResponse
from app.utils.exceptions import BadRequestError, NotFoundError
from app.utils.pagination import Page, paginate


class MemberService:
    """멤버 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, member: Member) -> MemberResponse:
        """멤버 모델을 응답 스키마로 변환합니다.

        Convert a Member whose team is already loaded to a MemberResponse.
        """
        return MemberResponse(
            id=member.id,
            username=member.username,
            age=member.age,
            team=TeamResponse.model_validate(member.team) if member.team is not None else None,
            created_at=member.created_at,
        )

    def _to_dto(self, member: Member) -> MemberDto:
        return MemberDto(
            id=member.id,
            username=member.username,
            team_name=member.team.name if member.team is not None else None,
        )

    def _check_page_size(self, per_page: int) -> None:
        if per_page > settings.MAX_PAGE_SIZE:
            raise BadRequestError(f"per_page must be <= {settings.MAX_PAGE_SIZE}")

    async def list_members(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int | None = None,
    ) -> Page[MemberDto]:
        """멤버 목록을 페이지 단위 DTO로 조회합니다.

        List members ordered by id, team fetched eagerly, mapped to MemberDto.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수, None이면 기본값 (Items per page, default from settings)

        Returns:
            Page[MemberDto]: DTO 페이지 (Page of member DTOs)
        """
        per_page = per_page or settings.DEFAULT_PAGE_SIZE
        self._check_page_size(per_page)
        query: Select = select(Member).options(joinedload(Member.team)).order_by(Member.id)
        members: Page[Member] = await paginate(db, query, page=page, per_page=per_page)
        return members.map(self._to_dto)

    async def get_member(self, db: AsyncSession, member_id: int) -> MemberResponse:
        """ID로 멤버를 조회합니다.

        Raises:
            NotFoundError: 멤버를 찾을 수 없을 때 (Member not found)
        """
        result = await db.execute(
            select(Member).options(joinedload(Member.team)).where(Member.id == member_id)
        )
        member: Member | None = result.scalar_one_or_none()
        if member is None:
            raise NotFoundError("Member not found")
        return self._to_response(member)

    async def get_member_by_username(self, db: AsyncSession, username: str) -> MemberResponse:
        """사용자 이름으로 멤버를 조회합니다. 동명이인이면 첫 번째(가장 작은 id).

        Retrieve a member by username with the team fetched. When several
        members share the username the one with the lowest id is returned.

        Raises:
            NotFoundError: 멤버를 찾을 수 없을 때 (Member not found)
        """
        members: list[Member] = await member_repository.find_entity_graph_by_username(db, username)
        if not members:
            raise NotFoundError("Member not found")
        return self._to_response(min(members, key=lambda m: m.id))

    async def members_by_age(
        self,
        db: AsyncSession,
        age: int,
        page: int = 1,
        per_page: int | None = None,
    ) -> Page[MemberResponse]:
        """나이가 일치하는 멤버를 페이지 단위로 조회합니다.

        The paged repository query loads each member's team from its join,
        so responses are built without further queries.
        """
        per_page = per_page or settings.DEFAULT_PAGE_SIZE
        self._check_page_size(per_page)
        members: Page[Member] = await member_repository.find_by_age(
            db, age, page=page, per_page=per_page
        )
        return members.map(self._to_response)

    async def bulk_age_plus(self, db: AsyncSession, age: int) -> int:
        """age 이상인 멤버의 나이를 1씩 올립니다. 커밋은 호출자가 담당합니다."""
        return await member_repository.bulk_age_plus(db, age)


# 싱글턴 인스턴스 — Singleton instance
member_service: MemberService = MemberService()
