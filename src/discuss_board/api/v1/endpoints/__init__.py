# src/discuss_board/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .attachments import router as attachments_router
from .audit_logs import router as audit_logs_router
from .auth import router as auth_router
from .comments import router as comments_router
from .forbidden_words import router as forbidden_words_router
from .members import router as members_router
from .moderation import router as moderation_router
from .notifications import router as notifications_router
from .polls import router as polls_router
from .posts import router as posts_router
from .reactions import router as reactions_router
from .staff import router as staff_router

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
