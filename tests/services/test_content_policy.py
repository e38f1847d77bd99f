# mypy: ignore-errors
# tests/services/test_content_policy.py
"""Unit tests for the text rules applied to member content."""

from datetime import timedelta

import pytest

from discuss_board.core.errors import ForbiddenError, InvalidRequestError
from discuss_board.db.time import utcnow
from discuss_board.models import ForbiddenWord, ModerationAction
from discuss_board.services import content_policy


class TestNormalizeText:
    def test_strips_whitespace(self):
        assert content_policy.normalize_text("  hi there ", field="Content", min_length=2, max_length=20) == "hi there"

    def test_too_short_after_strip(self):
        with pytest.raises(InvalidRequestError, match="at least 2"):
            content_policy.normalize_text("  a  ", field="Content", min_length=2, max_length=20)

    def test_too_long(self):
        with pytest.raises(InvalidRequestError, match="at most 3"):
            content_policy.normalize_text("abcd", field="Title", min_length=1, max_length=3)


class TestForbiddenExpressions:
    def test_case_insensitive_substring(self, db_session):
        db_session.add(ForbiddenWord(expression="darn"))
        db_session.flush()
        assert content_policy.find_forbidden_expression(db_session, "Well DARNIT") == "darn"
        with pytest.raises(InvalidRequestError):
            content_policy.ensure_allowed(db_session, "title", "well darn")

    def test_deleted_expressions_are_ignored(self, db_session):
        db_session.add(ForbiddenWord(expression="darn", deleted_at=utcnow()))
        db_session.flush()
        assert content_policy.find_forbidden_expression(db_session, "darn") is None

    def test_empty_texts(self, db_session):
        assert content_policy.find_forbidden_expression(db_session, None, "") is None


class TestMute:
    def _mute(self, db_session, moderator, member, **overrides):
        fields = {
            "moderator_id": moderator.id,
            "target_member_id": member.id,
            "action_type": "mute",
            "action_reason": "flood",
        }
        fields.update(overrides)
        action = ModerationAction(**fields)
        db_session.add(action)
        db_session.flush()
        return action

    def test_active_mute_blocks(self, db_session, moderator, member):
        self._mute(db_session, moderator, member)
        with pytest.raises(ForbiddenError):
            content_policy.ensure_not_muted(db_session, member.id)

    def test_expired_mute_is_ignored(self, db_session, moderator, member):
        now = utcnow()
        self._mute(
            db_session,
            moderator,
            member,
            effective_from=now - timedelta(days=2),
            effective_until=now - timedelta(days=1),
        )
        assert content_policy.active_mute(db_session, member.id) is None

    def test_reversed_mute_is_ignored(self, db_session, moderator, member):
        self._mute(db_session, moderator, member, status="reversed")
        content_policy.ensure_not_muted(db_session, member.id)

    def test_future_mute_not_yet_active(self, db_session, moderator, member):
        self._mute(db_session, moderator, member, effective_from=utcnow() + timedelta(hours=1))
        assert content_policy.active_mute(db_session, member.id) is None
