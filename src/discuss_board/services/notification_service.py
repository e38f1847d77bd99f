"""Creating, listing and updating notifications."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from discuss_board.core.errors import NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Notification, NotificationPreference
from discuss_board.models.notification import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    DELIVERY_DELIVERED,
    DELIVERY_PENDING,
    DELIVERY_READ,
)
from discuss_board.schemas.notification import (
    AdminNotificationSearchRequest,
    NotificationPreferenceUpdate,
    NotificationSearchRequest,
)
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)

__all__ = [
    "notify",
    "search_own_notifications",
    "search_all_notifications",
    "get_own_notification",
    "mark_read",
    "delete_notification",
    "get_preferences",
    "update_preferences",
]


def _preference_for(db: Session, user_account_id: str) -> NotificationPreference | None:
    return (
        db.query(NotificationPreference)
        .filter(NotificationPreference.user_account_id == user_account_id)
        .first()
    )


def notify(
    db: Session,
    *,
    user_account_id: str,
    event_type: str,
    subject: str,
    body: str,
    post_id: str | None = None,
    comment_id: str | None = None,
) -> Notification | None:
    """Stage a notification honouring the recipient's preferences.

    In-app notifications count as delivered immediately; email ones stay
    pending for an outbound mailer. Nothing is created while the recipient
    has muted notifications or disabled every channel.

    Returns:
        The staged notification, or None when preferences suppress it.
    """
    preference = _preference_for(db, user_account_id)
    now = utcnow()
    channel = CHANNEL_IN_APP
    if preference is not None:
        if preference.mute_until is not None and preference.mute_until > now:
            logger.debug("Notification %s suppressed for muted account %s", event_type, user_account_id)
            return None
        if preference.in_app_enabled:
            channel = CHANNEL_IN_APP
        elif preference.email_enabled:
            channel = CHANNEL_EMAIL
        else:
            return None

    delivered = channel == CHANNEL_IN_APP
    notification = Notification(
        user_account_id=user_account_id,
        event_type=event_type,
        delivery_channel=channel,
        subject=subject[:200],
        body=body,
        delivery_status=DELIVERY_DELIVERED if delivered else DELIVERY_PENDING,
        delivered_at=now if delivered else None,
        post_id=post_id,
        comment_id=comment_id,
    )
    db.add(notification)
    return notification


def _apply_common_filters(query, request: NotificationSearchRequest):
    if request.event_type:
        query = query.filter(Notification.event_type == request.event_type)
    if request.delivery_status:
        query = query.filter(Notification.delivery_status == request.delivery_status)
    if request.q:
        query = query.filter(
            or_(Notification.subject.icontains(request.q), Notification.body.icontains(request.q))
        )
    query = apply_created_range(query, Notification.created_at, request)
    sort_column = (
        Notification.event_type if request.sort_by == "event_type" else Notification.created_at
    )
    return apply_sort(query, sort_column, request, Notification.id)


def search_own_notifications(
    db: Session, user_account_id: str, request: NotificationSearchRequest
) -> dict[str, Any]:
    """Return one page of the account's live notifications."""
    query = db.query(Notification).filter(
        Notification.user_account_id == user_account_id,
        Notification.deleted_at.is_(None),
    )
    return paginate(_apply_common_filters(query, request), request)


def search_all_notifications(db: Session, request: AdminNotificationSearchRequest) -> dict[str, Any]:
    """Return one page across every account, for administrators."""
    query = db.query(Notification).filter(Notification.deleted_at.is_(None))
    if request.user_account_id:
        query = query.filter(Notification.user_account_id == request.user_account_id)
    if request.delivery_channel:
        query = query.filter(Notification.delivery_channel == request.delivery_channel)
    return paginate(_apply_common_filters(query, request), request)


def get_own_notification(db: Session, user_account_id: str, notification_id: str) -> Notification:
    """Fetch a notification owned by the account.

    Notifications of other accounts are reported as missing so ids do not leak.
    """
    notification = (
        db.query(Notification)
        .filter(
            Notification.id == notification_id,
            Notification.user_account_id == user_account_id,
            Notification.deleted_at.is_(None),
        )
        .first()
    )
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


def mark_read(db: Session, user_account_id: str, notification_id: str) -> Notification:
    notification = get_own_notification(db, user_account_id, notification_id)
    if notification.read_at is None:
        notification.read_at = utcnow()
        notification.delivery_status = DELIVERY_READ
        db.commit()
        db.refresh(notification)
    return notification


def delete_notification(db: Session, user_account_id: str, notification_id: str) -> None:
    notification = get_own_notification(db, user_account_id, notification_id)
    notification.deleted_at = utcnow()
    db.commit()


def get_preferences(db: Session, user_account_id: str) -> NotificationPreference:
    """Return the account's preferences, creating the defaults on first access."""
    preference = _preference_for(db, user_account_id)
    if preference is None:
        preference = NotificationPreference(
            user_account_id=user_account_id,
            in_app_enabled=True,
            email_enabled=False,
        )
        db.add(preference)
        db.commit()
        db.refresh(preference)
    return preference


def update_preferences(
    db: Session, user_account_id: str, update_data: NotificationPreferenceUpdate
) -> NotificationPreference:
    """Apply partial updates to the account's preferences."""
    preference = get_preferences(db, user_account_id)
    for key, value in update_data.model_dump(exclude_unset=True).items():
        setattr(preference, key, value)
    db.commit()
    db.refresh(preference)
    return preference
