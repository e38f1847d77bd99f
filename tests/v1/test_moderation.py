# mypy: ignore-errors
# tests/v1/test_moderation.py
"""Tests for content reports, moderation actions, bans and appeals."""

from datetime import timedelta

import pytest
from fastapi import status

from discuss_board.db.time import utcnow
from discuss_board.models import Appeal, AuditLog, Notification
from tests.conftest import TEST_PASSWORD


def _events(db_session, member) -> list[str]:
    return [
        n.event_type
        for n in db_session.query(Notification)
        .filter(Notification.user_account_id == member.user_account_id)
        .order_by(Notification.created_at.asc())
        .all()
    ]


class TestContentReports:
    def test_report_post(self, client, post, other_member, other_member_headers):
        r = client.post(
            "/api/v1/content-reports",
            json={"content_type": "post", "post_id": post.id, "reason": "spam"},
            headers=other_member_headers,
        )
        assert r.status_code == status.HTTP_201_CREATED
        assert r.json()["status"] == "pending"
        assert r.json()["reporter_member_id"] == other_member.id

    @pytest.mark.parametrize(
        "targets",
        [
            {},
            {"post_id": "p", "comment_id": "c"},
        ],
    )
    def test_report_needs_exactly_one_target(self, client, other_member_headers, targets):
        r = client.post(
            "/api/v1/content-reports",
            json={"content_type": "post", "reason": "spam", **targets},
            headers=other_member_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_report_type_must_match_target(self, client, post, other_member_headers):
        r = client.post(
            "/api/v1/content-reports",
            json={"content_type": "comment", "post_id": post.id, "reason": "spam"},
            headers=other_member_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_report_missing_comment(self, client, other_member_headers):
        r = client.post(
            "/api/v1/content-reports",
            json={"content_type": "comment", "comment_id": "missing", "reason": "spam"},
            headers=other_member_headers,
        )
        assert r.status_code == status.HTTP_404_NOT_FOUND

    def test_duplicate_report_conflicts(self, client, comment, other_member_headers):
        payload = {"content_type": "comment", "comment_id": comment.id, "reason": "rude"}
        client.post("/api/v1/content-reports", json=payload, headers=other_member_headers)
        r = client.post("/api/v1/content-reports", json=payload, headers=other_member_headers)
        assert r.status_code == status.HTTP_409_CONFLICT

    def test_report_visibility(self, client, post, other_member_headers, member_headers, moderator_headers):
        report = client.post(
            "/api/v1/content-reports",
            json={"content_type": "post", "post_id": post.id, "reason": "spam"},
            headers=other_member_headers,
        ).json()
        url = f"/api/v1/content-reports/{report['id']}"
        assert client.get(url, headers=other_member_headers).status_code == status.HTTP_200_OK
        assert client.get(url, headers=moderator_headers).status_code == status.HTTP_200_OK
        assert client.get(url, headers=member_headers).status_code == status.HTTP_403_FORBIDDEN

    def test_search_reports_is_staff_only(self, client, post, other_member_headers, moderator_headers):
        client.post(
            "/api/v1/content-reports",
            json={"content_type": "post", "post_id": post.id, "reason": "spam"},
            headers=other_member_headers,
        )
        r = client.patch(
            "/api/v1/content-reports", json={"status": "pending"}, headers=moderator_headers
        )
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["pagination"]["records"] == 1

    def test_resolve_report_notifies_reporter(
        self, client, db_session, post, other_member, other_member_headers, moderator_headers
    ):
        report = client.post(
            "/api/v1/content-reports",
            json={"content_type": "post", "post_id": post.id, "reason": "spam"},
            headers=other_member_headers,
        ).json()
        url = f"/api/v1/content-reports/{report['id']}"

        r = client.put(url, json={"status": "under_review"}, headers=moderator_headers)
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["resolved_at"] is None

        r = client.put(url, json={"status": "dismissed"}, headers=moderator_headers)
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["resolved_at"] is not None
        assert _events(db_session, other_member) == ["report_dismissed"]
        assert db_session.query(AuditLog).filter(AuditLog.action_type == "report_update").count() == 2


class TestModerationActions:
    def test_remove_post_resolves_report(
        self, client, db_session, post, member, other_member_headers, moderator, moderator_headers
    ):
        report = client.post(
            "/api/v1/content-reports",
            json={"content_type": "post", "post_id": post.id, "reason": "spam"},
            headers=other_member_headers,
        ).json()

        r = client.post(
            "/api/v1/moderation-actions",
            json={
                "action_type": "remove",
                "action_reason": "Spam",
                "target_post_id": post.id,
                "content_report_id": report["id"],
            },
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_201_CREATED
        assert r.json()["moderator_id"] == moderator.id
        assert r.json()["status"] == "active"

        assert client.get(f"/api/v1/posts/{post.id}").status_code == status.HTTP_404_NOT_FOUND
        report_now = client.get(
            f"/api/v1/content-reports/{report['id']}", headers=moderator_headers
        ).json()
        assert report_now["status"] == "resolved"
        # The author hears about the action because no member target was named.
        assert _events(db_session, member) == ["moderation_action"]
        assert (
            db_session.query(AuditLog).filter(AuditLog.action_type == "moderation_remove").count()
            == 1
        )

    def test_report_on_other_content_is_rejected(
        self, client, post, comment, other_member_headers, moderator_headers
    ):
        """A report can only be resolved by an action on the content it names."""
        report = client.post(
            "/api/v1/content-reports",
            json={"content_type": "comment", "comment_id": comment.id, "reason": "rude"},
            headers=other_member_headers,
        ).json()

        r = client.post(
            "/api/v1/moderation-actions",
            json={
                "action_type": "remove",
                "action_reason": "Spam",
                "target_post_id": post.id,
                "content_report_id": report["id"],
            },
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert r.json()["detail"] == "Linked report does not concern the targeted content"
        assert client.get(f"/api/v1/posts/{post.id}").status_code == status.HTTP_200_OK
        report_now = client.get(
            f"/api/v1/content-reports/{report['id']}", headers=moderator_headers
        ).json()
        assert report_now["status"] == "pending"

    def test_restrict_locks_comment(self, client, post, comment, moderator_headers, member_headers):
        r = client.post(
            "/api/v1/moderation-actions",
            json={"action_type": "restrict", "action_reason": "Heated", "target_comment_id": comment.id},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_201_CREATED
        r = client.get(f"/api/v1/posts/{post.id}/comments/{comment.id}")
        assert r.json()["is_locked"] is True

    def test_restore_brings_content_back(self, client, db_session, post, moderator_headers):
        post.deleted_at = utcnow()
        db_session.flush()
        r = client.post(
            "/api/v1/moderation-actions",
            json={"action_type": "restore", "action_reason": "Mistake", "target_post_id": post.id},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_201_CREATED
        assert client.get(f"/api/v1/posts/{post.id}").status_code == status.HTTP_200_OK

    def test_action_requires_target(self, client, moderator_headers):
        r = client.post(
            "/api/v1/moderation-actions",
            json={"action_type": "warn", "action_reason": "No target"},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_moderator_id_must_match_caller(self, client, member, moderator_headers):
        r = client.post(
            "/api/v1/moderation-actions",
            json={
                "moderator_id": "someone-else",
                "action_type": "warn",
                "action_reason": "Be nice",
                "target_member_id": member.id,
            },
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_403_FORBIDDEN

    def test_inverted_effective_range(self, client, member, moderator_headers):
        now = utcnow()
        r = client.post(
            "/api/v1/moderation-actions",
            json={
                "action_type": "mute",
                "action_reason": "Cool off",
                "target_member_id": member.id,
                "effective_from": now.isoformat(),
                "effective_until": (now - timedelta(hours=1)).isoformat(),
            },
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_members_cannot_moderate(self, client, member, other_member_headers):
        r = client.post(
            "/api/v1/moderation-actions",
            json={"action_type": "warn", "action_reason": "x", "target_member_id": member.id},
            headers=other_member_headers,
        )
        assert r.status_code == status.HTTP_403_FORBIDDEN

    def test_search_and_get_actions(self, client, member, moderator_headers, administrator_headers):
        created = client.post(
            "/api/v1/moderation-actions",
            json={"action_type": "warn", "action_reason": "Be nice", "target_member_id": member.id},
            headers=moderator_headers,
        ).json()
        r = client.patch(
            "/api/v1/moderation-actions", json={"action_type": "warn"}, headers=administrator_headers
        )
        assert [a["id"] for a in r.json()["data"]] == [created["id"]]

        r = client.get(f"/api/v1/moderation-actions/{created['id']}", headers=moderator_headers)
        assert r.status_code == status.HTTP_200_OK

    def test_administrator_erases_action_with_appeals(
        self, client, db_session, member, member_headers, moderator_headers, administrator_headers
    ):
        action = client.post(
            "/api/v1/moderation-actions",
            json={"action_type": "warn", "action_reason": "Be nice", "target_member_id": member.id},
            headers=moderator_headers,
        ).json()
        client.post(
            "/api/v1/appeals",
            json={"moderation_action_id": action["id"], "appeal_reason": "Unfair"},
            headers=member_headers,
        )

        r = client.delete(f"/api/v1/moderation-actions/{action['id']}", headers=moderator_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN

        r = client.delete(
            f"/api/v1/moderation-actions/{action['id']}", headers=administrator_headers
        )
        assert r.status_code == status.HTTP_204_NO_CONTENT
        assert db_session.query(Appeal).count() == 0


class TestBans:
    def test_ban_ends_sessions_and_login(self, client, member, member_headers, moderator_headers):
        r = client.post(
            "/api/v1/bans",
            json={"member_id": member.id, "ban_reason": "Abuse", "permanent": True},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_201_CREATED

        r = client.get("/api/v1/notification-preferences/me", headers=member_headers)
        assert r.status_code == status.HTTP_401_UNAUTHORIZED

        r = client.post(
            "/api/v1/auth/member/login",
            json={"email": "alice@example.com", "password": TEST_PASSWORD},
        )
        assert r.status_code == status.HTTP_403_FORBIDDEN

    def test_temporary_ban_needs_future_expiry(self, client, member, moderator_headers):
        r = client.post(
            "/api/v1/bans",
            json={"member_id": member.id, "ban_reason": "Abuse"},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

        past = (utcnow() - timedelta(days=1)).isoformat()
        r = client.post(
            "/api/v1/bans",
            json={"member_id": member.id, "ban_reason": "Abuse", "expires_at": past},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_second_active_ban_conflicts(self, client, member, moderator_headers):
        payload = {"member_id": member.id, "ban_reason": "Abuse", "permanent": True}
        client.post("/api/v1/bans", json=payload, headers=moderator_headers)
        r = client.post("/api/v1/bans", json=payload, headers=moderator_headers)
        assert r.status_code == status.HTTP_409_CONFLICT

    def test_moderator_cannot_ban_self(self, client, moderator, moderator_headers):
        r = client.post(
            "/api/v1/bans",
            json={"member_id": moderator.member_id, "ban_reason": "Oops", "permanent": True},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_lift_ban(self, client, member, moderator_headers, administrator_headers):
        expires = (utcnow() + timedelta(days=3)).isoformat()
        ban = client.post(
            "/api/v1/bans",
            json={"member_id": member.id, "ban_reason": "Abuse", "expires_at": expires},
            headers=moderator_headers,
        ).json()

        r = client.patch("/api/v1/bans", json={"active": True}, headers=administrator_headers)
        assert [b["id"] for b in r.json()["data"]] == [ban["id"]]

        r = client.delete(f"/api/v1/bans/{ban['id']}", headers=administrator_headers)
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["lifted_at"] is not None

        r = client.delete(f"/api/v1/bans/{ban['id']}", headers=administrator_headers)
        assert r.status_code == status.HTTP_409_CONFLICT

        r = client.patch("/api/v1/bans", json={"active": False}, headers=administrator_headers)
        assert r.json()["pagination"]["records"] == 1


class TestAppeals:
    @pytest.fixture()
    def removal(self, client, post, moderator_headers) -> dict:
        r = client.post(
            "/api/v1/moderation-actions",
            json={"action_type": "remove", "action_reason": "Off topic", "target_post_id": post.id},
            headers=moderator_headers,
        )
        return r.json()

    def test_accepted_appeal_reverses_removal(
        self, client, db_session, post, member, member_headers, removal, moderator_headers
    ):
        r = client.post(
            "/api/v1/appeals",
            json={"moderation_action_id": removal["id"], "appeal_reason": "It was on topic"},
            headers=member_headers,
        )
        assert r.status_code == status.HTTP_201_CREATED
        appeal = r.json()
        assert appeal["status"] == "pending"

        r = client.put(
            f"/api/v1/appeals/{appeal['id']}/resolution",
            json={"status": "accepted", "resolution_comment": "Agreed"},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["status"] == "accepted"
        assert r.json()["resolved_at"] is not None

        assert client.get(f"/api/v1/posts/{post.id}").status_code == status.HTTP_200_OK
        action = client.get(
            f"/api/v1/moderation-actions/{removal['id']}", headers=moderator_headers
        ).json()
        assert action["status"] == "reversed"
        assert _events(db_session, member)[-1] == "appeal_resolved"

        r = client.put(
            f"/api/v1/appeals/{appeal['id']}/resolution",
            json={"status": "rejected"},
            headers=moderator_headers,
        )
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_rejected_appeal_keeps_action(self, client, post, member_headers, removal, moderator_headers):
        appeal = client.post(
            "/api/v1/appeals",
            json={"moderation_action_id": removal["id"], "appeal_reason": "Please"},
            headers=member_headers,
        ).json()
        r = client.put(
            f"/api/v1/appeals/{appeal['id']}/resolution",
            json={"status": "rejected"},
            headers=moderator_headers,
        )
        assert r.json()["status"] == "rejected"
        assert client.get(f"/api/v1/posts/{post.id}").status_code == status.HTTP_404_NOT_FOUND

    def test_only_affected_member_appeals(self, client, removal, other_member_headers):
        r = client.post(
            "/api/v1/appeals",
            json={"moderation_action_id": removal["id"], "appeal_reason": "Not mine"},
            headers=other_member_headers,
        )
        assert r.status_code == status.HTTP_403_FORBIDDEN

    def test_one_pending_appeal_per_action(self, client, member_headers, removal):
        payload = {"moderation_action_id": removal["id"], "appeal_reason": "Unfair"}
        client.post("/api/v1/appeals", json=payload, headers=member_headers)
        r = client.post("/api/v1/appeals", json=payload, headers=member_headers)
        assert r.status_code == status.HTTP_409_CONFLICT

    def test_edit_and_list_own_appeals(
        self, client, member_headers, other_member_headers, removal, moderator_headers
    ):
        appeal = client.post(
            "/api/v1/appeals",
            json={"moderation_action_id": removal["id"], "appeal_reason": "Unfair"},
            headers=member_headers,
        ).json()

        r = client.put(
            f"/api/v1/appeals/{appeal['id']}",
            json={"appeal_reason": "Unfair, see thread"},
            headers=member_headers,
        )
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["appeal_reason"] == "Unfair, see thread"

        assert client.patch("/api/v1/appeals", json={}, headers=member_headers).json()["pagination"]["records"] == 1
        assert client.patch("/api/v1/appeals", json={}, headers=other_member_headers).json()["pagination"]["records"] == 0
        assert client.patch("/api/v1/appeals", json={}, headers=moderator_headers).json()["pagination"]["records"] == 1

        r = client.get(f"/api/v1/appeals/{appeal['id']}", headers=other_member_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN
