"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(length=36), nullable=False)


def _fk(name: str, target: str, *, nullable: bool = False, ondelete: str | None = None) -> sa.Column:
    return sa.Column(
        name,
        sa.String(length=36),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def _created() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(), nullable=False)


def _updated() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(), nullable=False)


def _deleted() -> sa.Column:
    return sa.Column("deleted_at", sa.DateTime(), nullable=True)


def upgrade() -> None:
    """Create the discussion board schema."""
    op.create_table(
        "user_account",
        _id(),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=128), nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "member",
        _id(),
        _fk("user_account_id", "user_account.id"),
        sa.Column("nickname", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_account_id"),
        sa.UniqueConstraint("nickname"),
    )
    op.create_table(
        "moderator",
        _id(),
        _fk("member_id", "member.id"),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("assigned_at", sa.DateTime(), nullable=False),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("suspended_until", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id"),
    )
    op.create_table(
        "administrator",
        _id(),
        _fk("member_id", "member.id"),
        _fk("escalated_by_administrator_id", "administrator.id", nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("escalated_at", sa.DateTime(), nullable=False),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id"),
    )
    op.create_table(
        "guest",
        _id(),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        _created(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "consent_record",
        _id(),
        _fk("user_account_id", "user_account.id"),
        sa.Column("policy_type", sa.String(length=64), nullable=False),
        sa.Column("policy_version", sa.String(length=32), nullable=False),
        sa.Column("consent_action", sa.String(length=32), nullable=False),
        _created(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "jwt_session",
        _id(),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        _fk("user_account_id", "user_account.id", nullable=True),
        sa.Column("jwt_id", sa.String(length=36), nullable=False),
        sa.Column("refresh_token_hash", sa.String(length=64), nullable=False),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("issued_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("jwt_id"),
    )
    op.create_index("ix_jwt_session_subject_id", "jwt_session", ["subject_id"])
    op.create_index("ix_jwt_session_user_account_id", "jwt_session", ["user_account_id"])

    op.create_table(
        "tag",
        _id(),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "post",
        _id(),
        _fk("author_member_id", "member.id"),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("business_status", sa.String(length=32), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_author_member_id", "post", ["author_member_id"])
    op.create_table(
        "post_tag",
        _fk("post_id", "post.id", ondelete="CASCADE"),
        _fk("tag_id", "tag.id", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
    )
    op.create_table(
        "post_edit_history",
        _id(),
        _fk("post_id", "post.id", ondelete="CASCADE"),
        _fk("editor_member_id", "member.id"),
        sa.Column("title_before", sa.String(length=200), nullable=False),
        sa.Column("title_after", sa.String(length=200), nullable=False),
        sa.Column("body_before", sa.Text(), nullable=False),
        sa.Column("body_after", sa.Text(), nullable=False),
        _created(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_edit_history_post_id", "post_edit_history", ["post_id"])
    op.create_table(
        "post_reaction",
        _id(),
        _fk("post_id", "post.id", ondelete="CASCADE"),
        _fk("member_id", "member.id"),
        sa.Column("reaction_type", sa.String(length=16), nullable=False),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "member_id"),
    )

    op.create_table(
        "comment",
        _id(),
        _fk("post_id", "post.id", ondelete="CASCADE"),
        _fk("parent_id", "comment.id", nullable=True),
        _fk("author_member_id", "member.id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comment_post_id", "comment", ["post_id"])
    op.create_index("ix_comment_author_member_id", "comment", ["author_member_id"])
    op.create_table(
        "comment_edit_history",
        _id(),
        _fk("comment_id", "comment.id", ondelete="CASCADE"),
        _fk("editor_member_id", "member.id"),
        sa.Column("content_before", sa.Text(), nullable=False),
        sa.Column("content_after", sa.Text(), nullable=False),
        sa.Column("edit_reason", sa.String(length=500), nullable=True),
        _created(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comment_edit_history_comment_id", "comment_edit_history", ["comment_id"])
    op.create_table(
        "comment_reaction",
        _id(),
        _fk("comment_id", "comment.id", ondelete="CASCADE"),
        _fk("member_id", "member.id"),
        sa.Column("reaction_type", sa.String(length=16), nullable=False),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("comment_id", "member_id"),
    )

    op.create_table(
        "attachment",
        _id(),
        _fk("post_id", "post.id", nullable=True),
        _fk("comment_id", "comment.id", nullable=True),
        _fk("uploaded_by_member_id", "member.id"),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_url", sa.String(length=2048), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=False),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False),
        _created(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_attachment_post_id", "attachment", ["post_id"])
    op.create_index("ix_attachment_comment_id", "attachment", ["comment_id"])

    op.create_table(
        "poll",
        _id(),
        _fk("post_id", "post.id", ondelete="CASCADE"),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("multi_choice", sa.Boolean(), nullable=False),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_poll_post_id", "poll", ["post_id"])
    op.create_table(
        "poll_option",
        _id(),
        _fk("poll_id", "poll.id", ondelete="CASCADE"),
        sa.Column("label", sa.String(length=200), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "poll_vote",
        _id(),
        _fk("poll_id", "poll.id", ondelete="CASCADE"),
        _fk("option_id", "poll_option.id", ondelete="CASCADE"),
        _fk("member_id", "member.id"),
        _created(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("option_id", "member_id"),
    )

    op.create_table(
        "content_report",
        _id(),
        _fk("reporter_member_id", "member.id"),
        sa.Column("content_type", sa.String(length=16), nullable=False),
        _fk("post_id", "post.id", nullable=True),
        _fk("comment_id", "comment.id", nullable=True),
        sa.Column("reason", sa.String(length=500), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_report_reporter_member_id", "content_report", ["reporter_member_id"])
    op.create_table(
        "moderation_action",
        _id(),
        _fk("moderator_id", "moderator.id"),
        _fk("target_member_id", "member.id", nullable=True),
        _fk("target_post_id", "post.id", nullable=True),
        _fk("target_comment_id", "comment.id", nullable=True),
        _fk("content_report_id", "content_report.id", nullable=True),
        sa.Column("action_type", sa.String(length=32), nullable=False),
        sa.Column("action_reason", sa.String(length=500), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("effective_from", sa.DateTime(), nullable=False),
        sa.Column("effective_until", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_moderation_action_moderator_id", "moderation_action", ["moderator_id"])
    op.create_index(
        "ix_moderation_action_target_member_id", "moderation_action", ["target_member_id"]
    )
    op.create_table(
        "ban",
        _id(),
        _fk("member_id", "member.id"),
        _fk("moderator_id", "moderator.id"),
        sa.Column("ban_reason", sa.String(length=500), nullable=False),
        sa.Column("permanent", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("lifted_at", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ban_member_id", "ban", ["member_id"])
    op.create_table(
        "appeal",
        _id(),
        _fk("moderation_action_id", "moderation_action.id", ondelete="CASCADE"),
        _fk("appellant_member_id", "member.id"),
        sa.Column("appeal_reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("resolution_comment", sa.Text(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_appeal_appellant_member_id", "appeal", ["appellant_member_id"])
    op.create_table(
        "forbidden_word",
        _id(),
        sa.Column("expression", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        _created(),
        _updated(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("expression"),
    )

    op.create_table(
        "notification",
        _id(),
        _fk("user_account_id", "user_account.id"),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("delivery_channel", sa.String(length=16), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("delivery_status", sa.String(length=16), nullable=False),
        _fk("post_id", "post.id", nullable=True),
        _fk("comment_id", "comment.id", nullable=True),
        sa.Column("delivered_at", sa.DateTime(), nullable=True),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        _created(),
        _deleted(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notification_user_account_id", "notification", ["user_account_id"])
    op.create_table(
        "notification_preference",
        _id(),
        _fk("user_account_id", "user_account.id"),
        sa.Column("in_app_enabled", sa.Boolean(), nullable=False),
        sa.Column("email_enabled", sa.Boolean(), nullable=False),
        sa.Column("mute_until", sa.DateTime(), nullable=True),
        _created(),
        _updated(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_account_id"),
    )

    op.create_table(
        "audit_log",
        _id(),
        sa.Column("actor_id", sa.String(length=36), nullable=True),
        sa.Column("actor_role", sa.String(length=32), nullable=False),
        sa.Column("action_type", sa.String(length=64), nullable=False),
        sa.Column("target_table", sa.String(length=64), nullable=False),
        sa.Column("target_id", sa.String(length=36), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        _created(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_actor_id", "audit_log", ["actor_id"])
    op.create_index("ix_audit_log_action_type", "audit_log", ["action_type"])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        "audit_log",
        "notification_preference",
        "notification",
        "forbidden_word",
        "appeal",
        "ban",
        "moderation_action",
        "content_report",
        "poll_vote",
        "poll_option",
        "poll",
        "attachment",
        "comment_reaction",
        "comment_edit_history",
        "comment",
        "post_reaction",
        "post_edit_history",
        "post_tag",
        "post",
        "tag",
        "jwt_session",
        "consent_record",
        "guest",
        "administrator",
        "moderator",
        "member",
        "user_account",
    ):
        op.drop_table(table)
