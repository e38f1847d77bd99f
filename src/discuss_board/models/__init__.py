# src/discuss_board/models/__init__.py
"""SQLAlchemy models for the discussion board."""

from .account import Administrator, ConsentRecord, Guest, JwtSession, Member, Moderator, UserAccount
from .attachment import Attachment
from .audit import AuditLog
from .comment import Comment, CommentEditHistory, CommentReaction
from .moderation import Appeal, Ban, ContentReport, ForbiddenWord, ModerationAction
from .notification import Notification, NotificationPreference
from .poll import Poll, PollOption, PollVote
from .post import Post, PostEditHistory, PostReaction, Tag

__all__ = [
    "Administrator", "ConsentRecord", "Guest", "JwtSession", "Member", "Moderator", "UserAccount",
    "Attachment",
    "AuditLog",
    "Comment", "CommentEditHistory", "CommentReaction",
    "Appeal", "Ban", "ContentReport", "ForbiddenWord", "ModerationAction",
    "Notification", "NotificationPreference",
    "Poll", "PollOption", "PollVote",
    "Post", "PostEditHistory", "PostReaction", "Tag",
]
