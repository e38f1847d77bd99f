# src/discuss_board/api/v1/endpoints/staff.py
"""Administrator endpoints for moderators, administrators and login accounts."""

from fastapi import APIRouter

from discuss_board.api.v1.dependencies import AdministratorDep, SessionDep
from discuss_board.schemas.common import Page
from discuss_board.schemas.member import (
    AccountResponse,
    AccountUpdate,
    AdministratorResponse,
    AdministratorSearchRequest,
    ModeratorResponse,
    ModeratorSearchRequest,
)
from discuss_board.services import member_service, staff_service

router = APIRouter(tags=["staff"])


@router.patch("/moderators", response_model=Page[ModeratorResponse])
async def search_moderators(
    request: ModeratorSearchRequest, db: SessionDep, administrator: AdministratorDep
) -> dict:
    return staff_service.search_moderators(db, request)


@router.get("/moderators/{moderator_id}", response_model=ModeratorResponse)
async def get_moderator(
    moderator_id: str, db: SessionDep, administrator: AdministratorDep
) -> ModeratorResponse:
    return ModeratorResponse.model_validate(staff_service.get_moderator(db, moderator_id))


@router.patch("/administrators", response_model=Page[AdministratorResponse])
async def search_administrators(
    request: AdministratorSearchRequest, db: SessionDep, administrator: AdministratorDep
) -> dict:
    return staff_service.search_administrators(db, request)


@router.get("/administrators/{administrator_id}", response_model=AdministratorResponse)
async def get_administrator(
    administrator_id: str, db: SessionDep, administrator: AdministratorDep
) -> AdministratorResponse:
    return AdministratorResponse.model_validate(
        staff_service.get_administrator(db, administrator_id)
    )


@router.delete("/administrators/{administrator_id}", response_model=AdministratorResponse)
async def revoke_administrator(
    administrator_id: str, db: SessionDep, administrator: AdministratorDep
) -> AdministratorResponse:
    """Revoke another administrator.

    Args:
        administrator_id: Administrator to revoke
        db: Database session
        administrator: Authorized administrator performing the revocation

    Returns:
        The revoked administrator record

    Raises:
        InvalidRequestError: On self-revocation or revoking the last administrator
    """
    revoked = staff_service.revoke_administrator(
        db, administrator_id, administrator_id=administrator.id
    )
    return AdministratorResponse.model_validate(revoked)


@router.put("/administrator/accounts/{user_account_id}", response_model=AccountResponse)
async def update_account(
    user_account_id: str,
    update_data: AccountUpdate,
    db: SessionDep,
    administrator: AdministratorDep,
) -> AccountResponse:
    """Change an account's status or email verification flag."""
    account = member_service.update_account(
        db, user_account_id, update_data, administrator_id=administrator.id
    )
    return AccountResponse.model_validate(account)
