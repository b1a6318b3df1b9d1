"""멤버 라우터 — 멤버 조회 및 벌크 업데이트 엔드포인트.

Member Router — Endpoints for listing and looking up members and for the
bulk age update.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.member import BulkUpdateResponse, MemberDto, MemberResponse
from app.services.member_service import member_service
from app.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page[MemberDto])
async def list_members(
    db: Annotated[AsyncSession, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int | None, Query(ge=1)] = None,
) -> Page[MemberDto]:
    """멤버 목록을 페이지 단위로 조회합니다 (팀 이름 포함).

    List members page by page as MemberDto rows.
    """
    return await member_service.list_members(db, page=page, per_page=per_page)


@router.get("/by-username/{username}", response_model=MemberResponse)
async def get_member_by_username(
    username: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberResponse:
    """사용자 이름으로 멤버를 조회합니다."""
    return await member_service.get_member_by_username(db, username)


@router.get("/by-age/{age}", response_model=Page[MemberResponse])
async def list_members_by_age(
    age: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int | None, Query(ge=1)] = None,
) -> Page[MemberResponse]:
    """나이가 일치하는 멤버를 페이지 단위로 조회합니다."""
    return await member_service.members_by_age(db, age, page=page, per_page=per_page)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberResponse:
    """ID로 멤버를 조회합니다.

    Retrieve a single member with its team.
    """
    return await member_service.get_member(db, member_id)


@router.post("/bulk-age-plus", response_model=BulkUpdateResponse)
async def bulk_age_plus(
    db: Annotated[AsyncSession, Depends(get_db)],
    age: Annotated[int, Query()],
) -> BulkUpdateResponse:
    """age 이상인 모든 멤버의 나이를 1 증가시킵니다.

    Increment the age of every member at or above ``age``.
    """
    updated: int = await member_service.bulk_age_plus(db, age)
    await db.commit()
    return BulkUpdateResponse(updated=updated)
