"""팀 SQLAlchemy ORM 모델 정의.

Team SQLAlchemy ORM model definition.
A team groups members; members reference their team through a nullable FK.

Tables:
    - teams: 팀 (Teams that members belong to)
"""

from datetime import datetime, timezone
from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Team(Base):
    """팀 모델 — 멤버가 소속되는 단위.

    Team model — Unit that members belong to.

    Attributes:
        id: 고유 식별자 (Auto-increment identifier)
        name: 팀 이름 (Team name)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        members: 소속 멤버 목록 (Members of this team)
    """

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 팀 이름 — Team display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 팀 삭제 시 멤버는 남고 FK만 끊긴다 (Members survive team deletion)
    members = relationship("Member", back_populates="team")

    def __repr__(self) -> str:
        return f"Team(id={self.id}, name={self.name!r})"
