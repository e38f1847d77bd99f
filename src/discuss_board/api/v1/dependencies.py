"""Shared API dependencies for authentication and role authorization."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from discuss_board.core import security
from discuss_board.db.session import get_db
from discuss_board.models import Administrator, Guest, Member, Moderator
from discuss_board.models.account import (
    ROLE_ADMINISTRATOR,
    ROLE_GUEST,
    ROLE_MEMBER,
    ROLE_MODERATOR,
)
from discuss_board.services import authorization, session_service
from discuss_board.services.authorization import Actor
from discuss_board.services.session_service import ClientInfo

# HTTP Bearer scheme; missing credentials are reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of an access token."""

    subject: str
    role: str
    role_id: str
    jwt_id: str


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> TokenClaims:
    """Decode the bearer token and check that its session is still live.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        The verified token claims

    Raises:
        HTTPException: 401 if the token is missing, invalid, not an access
            token, or its session was revoked or has expired
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = security.decode_token(credentials.credentials)
    except JWTError as err:
        raise _unauthorized() from err

    if payload.get("token_type") != security.ACCESS_TOKEN:
        raise _unauthorized()
    subject, role, role_id, jwt_id = (
        payload.get("sub"), payload.get("type"), payload.get("id"), payload.get("jti")
    )
    if not (subject and role and role_id and jwt_id):
        raise _unauthorized()
    if session_service.find_live_session(db, jwt_id) is None:
        raise _unauthorized("Session is no longer valid")
    return TokenClaims(subject=subject, role=role, role_id=role_id, jwt_id=jwt_id)


TokenClaimsDep = Annotated[TokenClaims, Depends(get_token_claims)]


def _require_role(claims: TokenClaims, *roles: str) -> None:
    if claims.role not in roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You're not {' or '.join(roles)}",
        )


def member_authorize(claims: TokenClaimsDep, db: SessionDep) -> Member:
    """Authorize a member token against a live, active, unbanned member."""
    _require_role(claims, ROLE_MEMBER)
    return authorization.authorize_member(db, claims.role_id)


def moderator_authorize(claims: TokenClaimsDep, db: SessionDep) -> Moderator:
    _require_role(claims, ROLE_MODERATOR)
    return authorization.authorize_moderator(db, claims.role_id)


def administrator_authorize(claims: TokenClaimsDep, db: SessionDep) -> Administrator:
    _require_role(claims, ROLE_ADMINISTRATOR)
    return authorization.authorize_administrator(db, claims.role_id)


# "admin" and "administrator" name the same role
admin_authorize = administrator_authorize


def guest_authorize(claims: TokenClaimsDep, db: SessionDep) -> Guest:
    _require_role(claims, ROLE_GUEST)
    return authorization.authorize_guest(db, claims.role_id)


def actor_authorize(claims: TokenClaimsDep, db: SessionDep) -> Actor:
    """Authorize any member, moderator or administrator token.

    Returns:
        The caller as an ``Actor`` carrying both its role record id and the
        member it acts as
    """
    _require_role(claims, ROLE_MEMBER, ROLE_MODERATOR, ROLE_ADMINISTRATOR)
    if claims.role == ROLE_MEMBER:
        member = authorization.authorize_member(db, claims.role_id)
        return Actor(ROLE_MEMBER, member.id, member.id, member.user_account_id)
    if claims.role == ROLE_MODERATOR:
        moderator = authorization.authorize_moderator(db, claims.role_id)
        return Actor(
            ROLE_MODERATOR,
            moderator.id,
            moderator.member_id,
            moderator.member.user_account_id,
        )
    administrator = authorization.authorize_administrator(db, claims.role_id)
    return Actor(
        ROLE_ADMINISTRATOR,
        administrator.id,
        administrator.member_id,
        administrator.member.user_account_id,
    )


def staff_authorize(actor: Annotated[Actor, Depends(actor_authorize)]) -> Actor:
    if not actor.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You're not moderator or administrator",
        )
    return actor


def get_client_info(request: Request) -> ClientInfo:
    """Collect the user agent and address stored on new sessions."""
    return ClientInfo(
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )


# Type aliases for role dependencies
MemberDep = Annotated[Member, Depends(member_authorize)]
ModeratorDep = Annotated[Moderator, Depends(moderator_authorize)]
AdministratorDep = Annotated[Administrator, Depends(administrator_authorize)]
AdminDep = Annotated[Administrator, Depends(admin_authorize)]
GuestDep = Annotated[Guest, Depends(guest_authorize)]
ActorDep = Annotated[Actor, Depends(actor_authorize)]
StaffDep = Annotated[Actor, Depends(staff_authorize)]
ClientInfoDep = Annotated[ClientInfo, Depends(get_client_info)]
