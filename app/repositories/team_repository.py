"""팀 레포지토리 — 팀 CRUD 및 이름 조회.

Team Repository — CRUD and lookup queries for teams.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.team import Team
from app.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """팀 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Team)

    async def find_by_name(
        self,
        db: AsyncSession,
        name: str,
    ) -> list[Team]:
        """이름이 일치하는 팀 목록을 조회합니다.

        Retrieve teams whose name equals ``name``.
        """
        query: Select = select(Team).where(Team.name == name).order_by(Team.id)
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
team_repository: TeamRepository = TeamRepository()
