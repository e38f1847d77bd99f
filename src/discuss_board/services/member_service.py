"""CRUD-style helpers for managing members and their accounts."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, ForbiddenError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Member, UserAccount
from discuss_board.models.account import ROLE_ADMINISTRATOR, STATUS_SUSPENDED
from discuss_board.schemas.member import AccountUpdate, MemberSearchRequest, MemberUpdate
from discuss_board.services import audit_service, content_policy, session_service
from discuss_board.services.authorization import Actor
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)

__all__ = [
    "search_members",
    "get_member",
    "update_member",
    "delete_member",
    "update_account",
]


def search_members(db: Session, request: MemberSearchRequest) -> dict[str, Any]:
    """Return one page of live members matching the filters."""
    query = db.query(Member).join(UserAccount).filter(Member.deleted_at.is_(None))
    if request.nickname:
        query = query.filter(Member.nickname.icontains(request.nickname))
    if request.email:
        query = query.filter(UserAccount.email == request.email.strip().lower())
    if request.status:
        query = query.filter(Member.status == request.status)
    query = apply_created_range(query, Member.created_at, request)
    sort_column = Member.nickname if request.sort_by == "nickname" else Member.created_at
    query = apply_sort(query, sort_column, request, Member.id)
    return paginate(query, request)


def get_member(db: Session, member_id: str) -> Member:
    """Return a live member by primary key."""
    member = db.get(Member, member_id)
    if member is None or member.deleted_at is not None:
        raise NotFoundError("Member not found")
    return member


def update_member(db: Session, actor: Member, member_id: str, update_data: MemberUpdate) -> Member:
    """Apply partial profile updates; members may only edit themselves."""
    member = get_member(db, member_id)
    if member.id != actor.id:
        raise ForbiddenError("Members can only update their own profile")

    update_dict = update_data.model_dump(exclude_unset=True)
    nickname = update_dict.get("nickname")
    if nickname is not None:
        nickname = content_policy.normalize_text(
            nickname, field="Nickname", min_length=1, max_length=32
        )
        taken = (
            db.query(Member)
            .filter(Member.nickname == nickname, Member.id != member.id)
            .first()
        )
        if taken is not None:
            raise ConflictError("Nickname already taken")
        update_dict["nickname"] = nickname

    for key, value in update_dict.items():
        setattr(member, key, value)
    db.commit()
    db.refresh(member)
    return member


def delete_member(db: Session, actor: Actor, member_id: str) -> None:
    """Soft-delete a member and its account and end its sessions.

    Members may delete themselves; administrators may delete anyone.
    """
    member = get_member(db, member_id)
    if actor.role != ROLE_ADMINISTRATOR and actor.member_id != member.id:
        raise ForbiddenError("Members can only delete their own account")
    now = utcnow()
    member.deleted_at = now
    member.account.deleted_at = now
    session_service.revoke_account_sessions(db, member.user_account_id)
    audit_service.record(
        db,
        actor_id=actor.role_id,
        actor_role=actor.role,
        action_type="member_delete",
        target_table="member",
        target_id=member.id,
    )
    db.commit()
    logger.info("%s %s deleted member %s", actor.role, actor.role_id, member.id)


def update_account(
    db: Session, user_account_id: str, update_data: AccountUpdate, *, administrator_id: str
) -> UserAccount:
    """Change an account's status or verification flag.

    Suspending an account revokes its sessions immediately.
    """
    account = db.get(UserAccount, user_account_id)
    if account is None or account.deleted_at is not None:
        raise NotFoundError("Account not found")

    update_dict = update_data.model_dump(exclude_unset=True)
    for key, value in update_dict.items():
        setattr(account, key, value)
    if update_dict.get("status") == STATUS_SUSPENDED:
        session_service.revoke_account_sessions(db, account.id)
    audit_service.record(
        db,
        actor_id=administrator_id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="account_update",
        target_table="user_account",
        target_id=account.id,
        description=", ".join(f"{key}={value}" for key, value in update_dict.items()) or None,
    )
    db.commit()
    db.refresh(account)
    return account
