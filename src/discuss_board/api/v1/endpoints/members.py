# src/discuss_board/api/v1/endpoints/members.py
"""Member profile endpoints, including privilege grants on a member."""

from fastapi import APIRouter, Response, status

from discuss_board.api.v1.dependencies import (
    ActorDep,
    AdministratorDep,
    MemberDep,
    SessionDep,
)
from discuss_board.schemas.common import Page
from discuss_board.schemas.member import (
    AdministratorResponse,
    MemberResponse,
    MemberSearchRequest,
    MemberUpdate,
    ModeratorResponse,
)
from discuss_board.services import member_service, staff_service

router = APIRouter(prefix="/members", tags=["members"])


@router.patch("", response_model=Page[MemberResponse])
async def search_members(
    request: MemberSearchRequest, db: SessionDep, administrator: AdministratorDep
) -> dict:
    """Search members by nickname, email, status and creation date.

    Args:
        request: Filters, sort and paging
        db: Database session
        administrator: Authorized administrator

    Returns:
        One page of members
    """
    return member_service.search_members(db, request)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(member_id: str, db: SessionDep) -> MemberResponse:
    member = member_service.get_member(db, member_id)
    return MemberResponse.model_validate(member)


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: str, update_data: MemberUpdate, db: SessionDep, member: MemberDep
) -> MemberResponse:
    """Update the caller's own profile."""
    updated = member_service.update_member(db, member, member_id, update_data)
    return MemberResponse.model_validate(updated)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(member_id: str, db: SessionDep, actor: ActorDep) -> None:
    """Soft-delete a member; allowed for the member itself and administrators."""
    member_service.delete_member(db, actor, member_id)


@router.put("/{member_id}/moderator", response_model=ModeratorResponse)
async def assign_moderator(
    member_id: str, response: Response, db: SessionDep, administrator: AdministratorDep
) -> ModeratorResponse:
    """Grant moderator privileges.

    Returns 201 when a new moderator record is created and 200 when an
    existing record is returned or reactivated.
    """
    moderator, created = staff_service.assign_moderator(
        db, member_id, administrator_id=administrator.id
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
    return ModeratorResponse.model_validate(moderator)


@router.delete("/{member_id}/moderator", response_model=ModeratorResponse)
async def revoke_moderator(
    member_id: str, db: SessionDep, administrator: AdministratorDep
) -> ModeratorResponse:
    moderator = staff_service.revoke_moderator(db, member_id, administrator_id=administrator.id)
    return ModeratorResponse.model_validate(moderator)


@router.post(
    "/{member_id}/administrator",
    response_model=AdministratorResponse,
    status_code=status.HTTP_201_CREATED,
)
async def escalate_administrator(
    member_id: str, db: SessionDep, administrator: AdministratorDep
) -> AdministratorResponse:
    escalated = staff_service.escalate_administrator(
        db, member_id, administrator_id=administrator.id
    )
    return AdministratorResponse.model_validate(escalated)
