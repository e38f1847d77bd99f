# src/discuss_board/api/v1/endpoints/notifications.py
"""Member notification inbox, delivery preferences and the administrator view."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import AdministratorDep, MemberDep, SessionDep
from discuss_board.schemas.common import Page
from discuss_board.schemas.notification import (
    AdminNotificationSearchRequest,
    NotificationPreferenceResponse,
    NotificationPreferenceUpdate,
    NotificationResponse,
    NotificationSearchRequest,
)
from discuss_board.services import notification_service

router = APIRouter(tags=["notifications"])


@router.patch("/notifications", response_model=Page[NotificationResponse])
async def search_notifications(
    request: NotificationSearchRequest, db: SessionDep, member: MemberDep
) -> dict:
    """List the caller's own notifications.

    Args:
        request: Event type, delivery status, text and date filters plus paging
        db: Database session
        member: Authorized member

    Returns:
        One page of notifications
    """
    return notification_service.search_own_notifications(db, member.user_account_id, request)


@router.get("/notifications/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: str, db: SessionDep, member: MemberDep
) -> NotificationResponse:
    notification = notification_service.get_own_notification(
        db, member.user_account_id, notification_id
    )
    return NotificationResponse.model_validate(notification)


@router.put("/notifications/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str, db: SessionDep, member: MemberDep
) -> NotificationResponse:
    notification = notification_service.mark_read(db, member.user_account_id, notification_id)
    return NotificationResponse.model_validate(notification)


@router.delete("/notifications/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: str, db: SessionDep, member: MemberDep) -> None:
    notification_service.delete_notification(db, member.user_account_id, notification_id)


@router.patch("/administrator/notifications", response_model=Page[NotificationResponse])
async def search_all_notifications(
    request: AdminNotificationSearchRequest, db: SessionDep, administrator: AdministratorDep
) -> dict:
    return notification_service.search_all_notifications(db, request)


@router.get("/notification-preferences/me", response_model=NotificationPreferenceResponse)
async def get_notification_preferences(
    db: SessionDep, member: MemberDep
) -> NotificationPreferenceResponse:
    """Return the caller's delivery preferences, creating defaults on first read."""
    preference = notification_service.get_preferences(db, member.user_account_id)
    return NotificationPreferenceResponse.model_validate(preference)


@router.put("/notification-preferences/me", response_model=NotificationPreferenceResponse)
async def update_notification_preferences(
    update_data: NotificationPreferenceUpdate, db: SessionDep, member: MemberDep
) -> NotificationPreferenceResponse:
    preference = notification_service.update_preferences(db, member.user_account_id, update_data)
    return NotificationPreferenceResponse.model_validate(preference)
