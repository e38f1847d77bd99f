# src/discuss_board/api/v1/endpoints/auth.py
"""Authentication endpoints for every role."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import ClientInfoDep, GuestDep, SessionDep, TokenClaimsDep
from discuss_board.models import Administrator, Guest, Member, Moderator
from discuss_board.models.account import (
    ROLE_ADMINISTRATOR,
    ROLE_GUEST,
    ROLE_MEMBER,
    ROLE_MODERATOR,
)
from discuss_board.schemas.auth import (
    AdministratorJoinRequest,
    GuestAuthorized,
    GuestResponse,
    LoginRequest,
    MemberJoinRequest,
    RefreshRequest,
    TokenResponse,
)
from discuss_board.schemas.member import (
    AdministratorAuthorized,
    AdministratorResponse,
    MemberAuthorized,
    MemberResponse,
    ModeratorAuthorized,
    ModeratorResponse,
)
from discuss_board.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _member_authorized(member: Member, token: TokenResponse) -> MemberAuthorized:
    return MemberAuthorized(
        **MemberResponse.model_validate(member).model_dump(),
        email=member.email,
        token=token,
    )


def _moderator_authorized(moderator: Moderator, token: TokenResponse) -> ModeratorAuthorized:
    return ModeratorAuthorized(
        **ModeratorResponse.model_validate(moderator).model_dump(), token=token
    )


def _administrator_authorized(
    administrator: Administrator, token: TokenResponse
) -> AdministratorAuthorized:
    return AdministratorAuthorized(
        **AdministratorResponse.model_validate(administrator).model_dump(), token=token
    )


def _guest_authorized(guest: Guest, token: TokenResponse) -> GuestAuthorized:
    return GuestAuthorized(id=guest.id, created_at=guest.created_at, token=token)


@router.post(
    "/member/join", response_model=MemberAuthorized, status_code=status.HTTP_201_CREATED
)
async def join_member(
    payload: MemberJoinRequest, db: SessionDep, client: ClientInfoDep
) -> MemberAuthorized:
    """Register a new member account.

    Args:
        payload: Email, password, nickname and policy consents
        db: Database session
        client: Caller metadata stored on the session

    Returns:
        The member profile with a fresh token pair

    Raises:
        InvalidRequestError: On password policy or missing consent
        ConflictError: If the email or nickname is taken
    """
    member, token = auth_service.join_member(db, payload, client)
    return _member_authorized(member, token)


@router.post("/member/login", response_model=MemberAuthorized)
async def login_member(
    payload: LoginRequest, db: SessionDep, client: ClientInfoDep
) -> MemberAuthorized:
    """Log a member in with email and password."""
    member, token = auth_service.login_member(db, payload, client)
    return _member_authorized(member, token)


@router.post("/member/refresh", response_model=MemberAuthorized)
async def refresh_member(payload: RefreshRequest, db: SessionDep) -> MemberAuthorized:
    member, token = auth_service.refresh(db, ROLE_MEMBER, payload.refresh_token)
    return _member_authorized(member, token)


@router.post("/moderator/login", response_model=ModeratorAuthorized)
async def login_moderator(
    payload: LoginRequest, db: SessionDep, client: ClientInfoDep
) -> ModeratorAuthorized:
    """Log a moderator in; the member behind the account must hold an active moderator record."""
    moderator, token = auth_service.login_moderator(db, payload, client)
    return _moderator_authorized(moderator, token)


@router.post("/moderator/refresh", response_model=ModeratorAuthorized)
async def refresh_moderator(payload: RefreshRequest, db: SessionDep) -> ModeratorAuthorized:
    moderator, token = auth_service.refresh(db, ROLE_MODERATOR, payload.refresh_token)
    return _moderator_authorized(moderator, token)


@router.post(
    "/administrator/join",
    response_model=AdministratorAuthorized,
    status_code=status.HTTP_201_CREATED,
)
async def join_administrator(
    payload: AdministratorJoinRequest, db: SessionDep, client: ClientInfoDep
) -> AdministratorAuthorized:
    """Register an administrator when self-registration is enabled."""
    administrator, token = auth_service.join_administrator(db, payload, client)
    return _administrator_authorized(administrator, token)


@router.post("/administrator/login", response_model=AdministratorAuthorized)
async def login_administrator(
    payload: LoginRequest, db: SessionDep, client: ClientInfoDep
) -> AdministratorAuthorized:
    administrator, token = auth_service.login_administrator(db, payload, client)
    return _administrator_authorized(administrator, token)


@router.post("/administrator/refresh", response_model=AdministratorAuthorized)
async def refresh_administrator(
    payload: RefreshRequest, db: SessionDep
) -> AdministratorAuthorized:
    administrator, token = auth_service.refresh(db, ROLE_ADMINISTRATOR, payload.refresh_token)
    return _administrator_authorized(administrator, token)


@router.post(
    "/guest/join", response_model=GuestAuthorized, status_code=status.HTTP_201_CREATED
)
async def join_guest(db: SessionDep, client: ClientInfoDep) -> GuestAuthorized:
    """Create an anonymous guest identity."""
    guest, token = auth_service.join_guest(db, client)
    return _guest_authorized(guest, token)


@router.post("/guest/refresh", response_model=GuestAuthorized)
async def refresh_guest(payload: RefreshRequest, db: SessionDep) -> GuestAuthorized:
    guest, token = auth_service.refresh(db, ROLE_GUEST, payload.refresh_token)
    return _guest_authorized(guest, token)


@router.get("/guest/me", response_model=GuestResponse)
async def read_guest(guest: GuestDep) -> GuestResponse:
    """Return the guest identity behind the caller's token."""
    return GuestResponse.model_validate(guest)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(claims: TokenClaimsDep, db: SessionDep) -> None:
    """Revoke the session behind the presented access token."""
    auth_service.logout(db, claims.jwt_id)
