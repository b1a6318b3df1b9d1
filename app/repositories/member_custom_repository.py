"""멤버 커스텀 쿼리 — 직접 작성한 SQL을 사용하는 레포지토리 조각.

Hand-written member queries, mixed into MemberRepository.
Queries here bypass the statement builder and run literal SQL mapped back
onto the Member entity.
"""

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member


class MemberCustomRepository:
    """직접 작성한 SQL로 멤버를 조회하는 믹스인."""

    async def find_member_custom(self, db: AsyncSession) -> list[Member]:
        """모든 멤버를 직접 작성한 SQL로 조회합니다.

        Retrieve all members with a literal SQL statement, ordered by id.
        """
        query = select(Member).from_statement(
            text("SELECT members.* FROM members ORDER BY members.id")
        )
        result = await db.execute(query)
        return list(result.scalars().all())
