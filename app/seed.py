"""초기 데이터 시드 스크립트 — 팀과 멤버 생성.

Seed script — Creates sample teams and members for local development.

Usage:
    python -m app.seed

Creates:
    - 2개 팀: teamA, teamB (2 teams)
    - 100명 멤버: member0 ~ member99, 나이 = 번호, 팀 번갈아 배정
      (100 members, age equal to their index, alternating teams)
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base, async_session, engine
from app.models import Member, Team

logger = logging.getLogger(__name__)

MEMBER_COUNT: int = 100


async def seed_members(db: AsyncSession, count: int = MEMBER_COUNT) -> bool:
    """팀과 멤버를 생성합니다. 이미 팀이 있으면 건너뜁니다.

    Insert teamA/teamB and ``count`` members into the given session and
    commit. Idempotent: returns False without changes when any team exists.
    """
    result = await db.execute(select(Team).limit(1))
    if result.scalar_one_or_none() is not None:
        return False

    teams: list[Team] = [Team(name="teamA"), Team(name="teamB")]
    db.add_all(teams)
    for i in range(count):
        db.add(Member(username=f"member{i}", age=i, team=teams[i % 2]))

    await db.commit()
    return True


async def seed() -> None:
    """테이블을 만들고 초기 데이터를 시드합니다."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        if await seed_members(db):
            logger.info("Seeded 2 teams and %d members", MEMBER_COUNT)
        else:
            logger.info("Already seeded. Skipping.")

    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
