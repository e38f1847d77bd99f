"""Rules applied to all member-written text."""
from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session

from discuss_board.core.errors import ForbiddenError, InvalidRequestError
from discuss_board.db.time import utcnow
from discuss_board.models import ForbiddenWord, ModerationAction
from discuss_board.models.moderation import ACTION_MUTE, ACTION_STATUS_ACTIVE


def normalize_text(value: str, *, field: str, min_length: int, max_length: int) -> str:
    """Strip ``value`` and enforce its length bounds.

    Raises:
        InvalidRequestError: If the stripped text is too short or too long.
    """
    text = value.strip()
    if len(text) < min_length:
        raise InvalidRequestError(f"{field} must be at least {min_length} characters")
    if len(text) > max_length:
        raise InvalidRequestError(f"{field} must be at most {max_length} characters")
    return text


def find_forbidden_expression(db: Session, *texts: str | None) -> str | None:
    """Return the first active forbidden expression contained in any of ``texts``."""
    haystacks = [text.lower() for text in texts if text]
    if not haystacks:
        return None
    expressions = (
        db.query(ForbiddenWord.expression)
        .filter(ForbiddenWord.deleted_at.is_(None))
        .all()
    )
    for (expression,) in expressions:
        needle = expression.lower()
        if any(needle in haystack for haystack in haystacks):
            return expression
    return None


def ensure_allowed(db: Session, *texts: str | None) -> None:
    """Reject text containing a forbidden expression."""
    if find_forbidden_expression(db, *texts) is not None:
        raise InvalidRequestError("Content contains forbidden expression")


def active_mute(db: Session, member_id: str) -> ModerationAction | None:
    """Return the mute currently in effect for ``member_id``, if any."""
    now = utcnow()
    return (
        db.query(ModerationAction)
        .filter(
            ModerationAction.target_member_id == member_id,
            ModerationAction.action_type == ACTION_MUTE,
            ModerationAction.status == ACTION_STATUS_ACTIVE,
            ModerationAction.effective_from <= now,
            or_(
                ModerationAction.effective_until.is_(None),
                ModerationAction.effective_until > now,
            ),
        )
        .first()
    )


def ensure_not_muted(db: Session, member_id: str) -> None:
    if active_mute(db, member_id) is not None:
        raise ForbiddenError("Member is muted")
