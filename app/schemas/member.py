"""멤버 및 팀 관련 Pydantic 요청/응답 스키마 정의.

Member and Team Pydantic schema definitions.
MemberDto is the projection target of the member/team join query; its field
names are the constructor signature that query is validated against.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict


# === 팀 (Team) 스키마 ===

class TeamResponse(BaseModel):
    """팀 응답 스키마.

    Team response schema.

    Attributes:
        id: 팀 ID (Team identifier)
        name: 팀 이름 (Team name)
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


# === 멤버 (Member) 스키마 ===

class MemberDto(BaseModel):
    """멤버 + 팀 이름 프로젝션 DTO.

    Lightweight transfer object combining member fields with the team name.

    Attributes:
        id: 멤버 ID (Member identifier)
        username: 사용자 이름 (Username)
        team_name: 소속 팀 이름 (Name of the member's team)
    """

    id: int
    username: str
    team_name: str | None = None


class MemberResponse(BaseModel):
    """멤버 응답 스키마.

    Member response schema returned from API.

    Attributes:
        id: 멤버 ID (Member identifier)
        username: 사용자 이름 (Username)
        age: 나이 (Age)
        team: 소속 팀, 없으면 None (Owning team, None when unassigned)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: int
    username: str
    age: int
    team: TeamResponse | None = None
    created_at: datetime


class BulkUpdateResponse(BaseModel):
    """벌크 업데이트 결과 스키마.

    Bulk update result schema.
    """

    updated: int  # 변경된 행 수 (Number of rows affected)
