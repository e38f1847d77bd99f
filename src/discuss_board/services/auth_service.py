"""Registration, login and token refresh for every role."""
from __future__ import annotations

import hmac
import logging
from typing import Any

from jose import JWTError
from sqlalchemy.orm import Session

from discuss_board.core import security
from discuss_board.core.errors import (
    AuthenticationError,
    ConflictError,
    DiscussBoardError,
    ForbiddenError,
    InvalidRequestError,
)
from discuss_board.core.settings import settings
from discuss_board.db.time import utcnow
from discuss_board.models import (
    Administrator,
    ConsentRecord,
    Guest,
    Member,
    Moderator,
    UserAccount,
)
from discuss_board.models.account import (
    ROLE_ADMINISTRATOR,
    ROLE_GUEST,
    ROLE_MEMBER,
    ROLE_MODERATOR,
    STATUS_ACTIVE,
)
from discuss_board.schemas.auth import (
    AdministratorJoinRequest,
    LoginRequest,
    MemberJoinRequest,
    TokenResponse,
)
from discuss_board.services import audit_service, authorization, content_policy, session_service
from discuss_board.services.session_service import ClientInfo

logger = logging.getLogger(__name__)

__all__ = [
    "join_member",
    "login_member",
    "login_moderator",
    "join_administrator",
    "login_administrator",
    "join_guest",
    "refresh",
    "logout",
]

_INVALID_CREDENTIALS = "Invalid email or password"
_INVALID_REFRESH = "Invalid or expired refresh token"

_ROLE_CHECKS = {
    ROLE_MEMBER: authorization.authorize_member,
    ROLE_MODERATOR: authorization.authorize_moderator,
    ROLE_ADMINISTRATOR: authorization.authorize_administrator,
    ROLE_GUEST: authorization.authorize_guest,
}


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _normalize_nickname(nickname: str) -> str:
    return content_policy.normalize_text(nickname, field="Nickname", min_length=1, max_length=32)


def _ensure_password_policy(password: str) -> None:
    violation = security.password_policy_violation(password)
    if violation is not None:
        raise InvalidRequestError(violation)


def _ensure_unique_identity(db: Session, email: str, nickname: str) -> None:
    if db.query(UserAccount).filter(UserAccount.email == email).first() is not None:
        raise ConflictError("Email already registered")
    if db.query(Member).filter(Member.nickname == nickname).first() is not None:
        raise ConflictError("Nickname already taken")


def _create_account_and_member(db: Session, email: str, password: str, nickname: str) -> Member:
    account = UserAccount(
        email=email,
        password_hash=security.hash_password(password),
        email_verified=False,
        status=STATUS_ACTIVE,
    )
    db.add(account)
    db.flush()
    member = Member(user_account_id=account.id, nickname=nickname, status=STATUS_ACTIVE)
    db.add(member)
    db.flush()
    return member


def _authenticate(db: Session, payload: LoginRequest) -> UserAccount:
    """Resolve the account for a login, checking the password before any status."""
    account = (
        db.query(UserAccount)
        .filter(
            UserAccount.email == _normalize_email(payload.email),
            UserAccount.deleted_at.is_(None),
        )
        .first()
    )
    if account is None or not security.verify_password(payload.password, account.password_hash):
        raise AuthenticationError(_INVALID_CREDENTIALS)
    if settings.require_email_verification and not account.email_verified:
        raise ForbiddenError("Email address is not verified")
    if account.status != STATUS_ACTIVE:
        raise ForbiddenError("Account is not active")
    return account


def _member_of(db: Session, account: UserAccount) -> Member:
    return authorization.ensure_member_standing(db, account.member)


def join_member(
    db: Session, payload: MemberJoinRequest, client: ClientInfo | None = None
) -> tuple[Member, TokenResponse]:
    """Register a member and sign them in.

    Args:
        db: Database session
        payload: Email, password, nickname and policy consents
        client: Request metadata stored on the session

    Returns:
        The new member and its token pair.

    Raises:
        InvalidRequestError: If the password is weak or a required consent is missing
        ConflictError: If the email or nickname is taken
    """
    email = _normalize_email(payload.email)
    nickname = _normalize_nickname(payload.nickname)
    _ensure_password_policy(payload.password)
    for policy in settings.required_consent_policies:
        if not any(
            consent.policy_type == policy and consent.consent_action == "granted"
            for consent in payload.consent
        ):
            raise InvalidRequestError(f"Missing consent for {policy}")
    _ensure_unique_identity(db, email, nickname)

    member = _create_account_and_member(db, email, payload.password, nickname)
    for consent in payload.consent:
        db.add(
            ConsentRecord(
                user_account_id=member.user_account_id,
                policy_type=consent.policy_type,
                policy_version=consent.policy_version,
                consent_action=consent.consent_action,
            )
        )
    _, token = session_service.issue_session(
        db,
        role=ROLE_MEMBER,
        subject=member.user_account_id,
        role_id=member.id,
        user_account_id=member.user_account_id,
        client=client,
    )
    audit_service.record(
        db,
        actor_id=member.id,
        actor_role=ROLE_MEMBER,
        action_type="member_join",
        target_table="member",
        target_id=member.id,
    )
    db.commit()
    db.refresh(member)
    logger.info("Member %s joined", member.id)
    return member, token


def login_member(
    db: Session, payload: LoginRequest, client: ClientInfo | None = None
) -> tuple[Member, TokenResponse]:
    """Sign a member in with email and password."""
    account = _authenticate(db, payload)
    member = _member_of(db, account)
    _, token = session_service.issue_session(
        db,
        role=ROLE_MEMBER,
        subject=account.id,
        role_id=member.id,
        user_account_id=account.id,
        client=client,
    )
    account.last_login_at = utcnow()
    db.commit()
    db.refresh(member)
    logger.info("Member %s logged in", member.id)
    return member, token


def login_moderator(
    db: Session, payload: LoginRequest, client: ClientInfo | None = None
) -> tuple[Moderator, TokenResponse]:
    """Sign in a member holding active moderator privileges."""
    account = _authenticate(db, payload)
    member = _member_of(db, account)
    moderator = authorization.moderator_for_member(db, member.id)
    if not authorization.moderator_is_active(moderator):
        logger.warning("Moderator login refused for member %s", member.id)
        raise ForbiddenError("Moderator privileges not present")
    _, token = session_service.issue_session(
        db,
        role=ROLE_MODERATOR,
        subject=account.id,
        role_id=moderator.id,
        user_account_id=account.id,
        client=client,
    )
    account.last_login_at = utcnow()
    db.commit()
    db.refresh(moderator)
    logger.info("Moderator %s logged in", moderator.id)
    return moderator, token


def join_administrator(
    db: Session, payload: AdministratorJoinRequest, client: ClientInfo | None = None
) -> tuple[Administrator, TokenResponse]:
    """Register a self-escalated administrator when open registration is enabled."""
    if not settings.administrator_join_enabled:
        raise ForbiddenError("Administrator registration is disabled")
    email = _normalize_email(payload.email)
    nickname = _normalize_nickname(payload.nickname)
    _ensure_password_policy(payload.password)
    _ensure_unique_identity(db, email, nickname)

    member = _create_account_and_member(db, email, payload.password, nickname)
    administrator = Administrator(member_id=member.id, status=STATUS_ACTIVE)
    db.add(administrator)
    db.flush()
    administrator.escalated_by_administrator_id = administrator.id
    _, token = session_service.issue_session(
        db,
        role=ROLE_ADMINISTRATOR,
        subject=member.user_account_id,
        role_id=administrator.id,
        user_account_id=member.user_account_id,
        client=client,
    )
    audit_service.record(
        db,
        actor_id=administrator.id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="administrator_join",
        target_table="administrator",
        target_id=administrator.id,
    )
    db.commit()
    db.refresh(administrator)
    logger.info("Administrator %s joined", administrator.id)
    return administrator, token


def login_administrator(
    db: Session, payload: LoginRequest, client: ClientInfo | None = None
) -> tuple[Administrator, TokenResponse]:
    """Sign in an administrator; every attempt is written to the audit log."""
    try:
        account = _authenticate(db, payload)
        administrator = authorization.administrator_for_member(
            db, account.member.id if account.member else ""
        )
        if not authorization.administrator_is_active(administrator):
            raise ForbiddenError("Administrator privileges not present")
    except DiscussBoardError as err:
        audit_service.record(
            db,
            actor_id=None,
            actor_role=ROLE_ADMINISTRATOR,
            action_type="administrator_login",
            target_table="user_account",
            description=f"Failed login for {_normalize_email(payload.email)}: {err.detail}",
        )
        db.commit()
        logger.warning("Administrator login failed: %s", err.detail)
        raise

    _, token = session_service.issue_session(
        db,
        role=ROLE_ADMINISTRATOR,
        subject=account.id,
        role_id=administrator.id,
        user_account_id=account.id,
        client=client,
    )
    account.last_login_at = utcnow()
    audit_service.record(
        db,
        actor_id=administrator.id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="administrator_login",
        target_table="administrator",
        target_id=administrator.id,
        description="Successful login",
    )
    db.commit()
    db.refresh(administrator)
    logger.info("Administrator %s logged in", administrator.id)
    return administrator, token


def join_guest(db: Session, client: ClientInfo | None = None) -> tuple[Guest, TokenResponse]:
    """Create a guest identity and its token pair."""
    client = client or ClientInfo()
    guest = Guest(user_agent=client.user_agent, ip_address=client.ip_address)
    db.add(guest)
    db.flush()
    _, token = session_service.issue_session(
        db,
        role=ROLE_GUEST,
        subject=guest.id,
        role_id=guest.id,
        user_account_id=None,
        client=client,
    )
    db.commit()
    db.refresh(guest)
    return guest, token


def refresh(db: Session, role: str, refresh_token: str) -> tuple[Any, TokenResponse]:
    """Rotate the session behind ``refresh_token`` and return a new pair.

    Args:
        db: Database session
        role: Role the refresh endpoint serves
        refresh_token: Previously issued refresh token

    Returns:
        The role record and the new token pair.

    Raises:
        AuthenticationError: If the token or its session is invalid
        ForbiddenError: If the role record may no longer act
    """
    try:
        payload = security.decode_token(refresh_token)
    except JWTError as err:
        raise AuthenticationError(_INVALID_REFRESH) from err
    if payload.get("token_type") != security.REFRESH_TOKEN or payload.get("type") != role:
        raise AuthenticationError(_INVALID_REFRESH)

    session_row = session_service.find_live_session(db, str(payload.get("jti")))
    if session_row is None or session_row.role != role:
        raise AuthenticationError(_INVALID_REFRESH)
    if not hmac.compare_digest(session_row.refresh_token_hash, security.hash_token(refresh_token)):
        raise AuthenticationError(_INVALID_REFRESH)

    record = _ROLE_CHECKS[role](db, session_row.subject_id)
    token = session_service.rotate_session(db, session_row, subject=str(payload.get("sub")))
    db.commit()
    logger.info("Refreshed %s session %s", role, session_row.id)
    return record, token


def logout(db: Session, jwt_id: str) -> None:
    session_service.revoke_session(db, jwt_id)
    db.commit()
