# src/discuss_board/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    attachments_router,
    audit_logs_router,
    auth_router,
    comments_router,
    forbidden_words_router,
    members_router,
    moderation_router,
    notifications_router,
    polls_router,
    posts_router,
    reactions_router,
    staff_router,
)

__all__ = [
    "auth_router",
    "members_router",
    "staff_router",
    "posts_router",
    "comments_router",
    "reactions_router",
    "attachments_router",
    "polls_router",
    "moderation_router",
    "forbidden_words_router",
    "notifications_router",
    "audit_logs_router",
]
