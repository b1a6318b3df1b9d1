"""멤버 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.
Members hold a lazy many-to-one reference to their team; queries that
need the team in the same round trip request it explicitly.

Tables:
    - members: 멤버 (Members with username, age and optional team)
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.team import Team


class Member(Base):
    """멤버 모델.

    Member model.

    Attributes:
        id: 고유 식별자 (Auto-increment identifier)
        username: 사용자 이름 (Username, not unique)
        age: 나이 (Age in years)
        team_id: 소속 팀 FK (Team foreign key, nullable)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        team: 소속 팀 — 지연 로딩 (Owning team, lazily loaded)
    """

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    team_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # lazy="select": 명시적으로 fetch하지 않으면 접근 시점에 별도 쿼리
    team: Mapped[Team | None] = relationship("Team", back_populates="members", lazy="select")

    def __init__(self, username: str, age: int = 0, team: Team | None = None, **kwargs: Any) -> None:
        # 나머지 매핑 컬럼(team_id 등)은 기본 생성자로 전달 (Other mapped columns go to the declarative constructor)
        super().__init__(username=username, age=age, **kwargs)
        if team is not None:
            self.change_team(team)

    def change_team(self, team: Team) -> None:
        """멤버의 팀을 변경하고 양방향 관계를 맞춥니다.

        Move the member to ``team``, keeping ``team.members`` in sync.
        """
        self.team = team

    def __repr__(self) -> str:
        return f"Member(id={self.id}, username={self.username!r}, age={self.age})"
