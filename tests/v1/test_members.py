# mypy: ignore-errors
# tests/v1/test_members.py
"""Tests for member profile and privilege endpoints."""

from fastapi import status

from discuss_board.models import AuditLog, JwtSession


def test_get_member_is_public(client, member) -> None:
    r = client.get(f"/api/v1/members/{member.id}")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["nickname"] == "alice"
    assert "password_hash" not in r.json()


def test_get_unknown_member(client) -> None:
    r = client.get("/api/v1/members/does-not-exist")
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_member_updates_own_nickname(client, member, member_headers) -> None:
    r = client.put(
        f"/api/v1/members/{member.id}", json={"nickname": "  alicia "}, headers=member_headers
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["nickname"] == "alicia"


def test_null_nickname_is_rejected(client, member, member_headers) -> None:
    """An explicit null is a validation error rather than a database failure."""
    r = client.put(
        f"/api/v1/members/{member.id}", json={"nickname": None}, headers=member_headers
    )
    assert r.status_code == 422
    assert client.get(f"/api/v1/members/{member.id}").json()["nickname"] == "alice"


def test_blank_nickname_is_rejected(client, member, member_headers) -> None:
    r = client.put(
        f"/api/v1/members/{member.id}", json={"nickname": "   "}, headers=member_headers
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == "Nickname must be at least 1 characters"
    assert client.get(f"/api/v1/members/{member.id}").json()["nickname"] == "alice"


def test_member_cannot_update_someone_else(client, other_member, member_headers) -> None:
    r = client.put(
        f"/api/v1/members/{other_member.id}", json={"nickname": "hijack"}, headers=member_headers
    )
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_nickname_clash_conflicts(client, member, other_member, member_headers) -> None:
    r = client.put(
        f"/api/v1/members/{member.id}", json={"nickname": "bob"}, headers=member_headers
    )
    assert r.status_code == status.HTTP_409_CONFLICT


def test_member_deletes_self(client, db_session, member, member_headers) -> None:
    """Self-deletion soft-deletes the member and revokes its sessions."""
    r = client.delete(f"/api/v1/members/{member.id}", headers=member_headers)
    assert r.status_code == status.HTTP_204_NO_CONTENT

    assert client.get(f"/api/v1/members/{member.id}").status_code == status.HTTP_404_NOT_FOUND
    live = (
        db_session.query(JwtSession)
        .filter(
            JwtSession.user_account_id == member.user_account_id,
            JwtSession.revoked_at.is_(None),
        )
        .count()
    )
    assert live == 0


def test_member_cannot_delete_other(client, other_member, member_headers) -> None:
    r = client.delete(f"/api/v1/members/{other_member.id}", headers=member_headers)
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_administrator_deletes_member(client, db_session, member, administrator_headers) -> None:
    r = client.delete(f"/api/v1/members/{member.id}", headers=administrator_headers)
    assert r.status_code == status.HTTP_204_NO_CONTENT
    assert db_session.query(AuditLog).filter(AuditLog.action_type == "member_delete").count() == 1


def test_search_members(client, member, other_member, administrator_headers) -> None:
    r = client.patch(
        "/api/v1/members",
        json={"nickname": "ali", "sort_by": "nickname", "sort_order": "asc"},
        headers=administrator_headers,
    )
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert [m["nickname"] for m in body["data"]] == ["alice"]
    assert body["pagination"]["records"] == 1
    assert body["pagination"]["current"] == 1


def test_search_members_paging(client, make_member, administrator_headers) -> None:
    for _ in range(3):
        make_member()
    r = client.patch(
        "/api/v1/members", json={"page": 2, "limit": 2}, headers=administrator_headers
    )
    assert r.status_code == status.HTTP_200_OK
    pagination = r.json()["pagination"]
    # Three members plus the administrator's own member row.
    assert pagination["records"] == 4
    assert pagination["pages"] == 2
    assert len(r.json()["data"]) == 2


def test_search_members_rejects_inverted_range(client, administrator_headers) -> None:
    r = client.patch(
        "/api/v1/members",
        json={"created_from": "2030-01-02T00:00:00Z", "created_to": "2030-01-01T00:00:00Z"},
        headers=administrator_headers,
    )
    assert r.status_code == 422


class TestModeratorAssignment:
    def test_assign_creates_then_is_idempotent(self, client, member, administrator_headers):
        url = f"/api/v1/members/{member.id}/moderator"
        r = client.put(url, headers=administrator_headers)
        assert r.status_code == status.HTTP_201_CREATED
        moderator_id = r.json()["id"]

        r = client.put(url, headers=administrator_headers)
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["id"] == moderator_id

    def test_revoke_then_reassign_reactivates(self, client, member, administrator_headers):
        url = f"/api/v1/members/{member.id}/moderator"
        created = client.put(url, headers=administrator_headers).json()

        r = client.delete(url, headers=administrator_headers)
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["revoked_at"] is not None

        r = client.put(url, headers=administrator_headers)
        assert r.status_code == status.HTTP_200_OK
        assert r.json()["id"] == created["id"]
        assert r.json()["revoked_at"] is None

    def test_revoke_without_record(self, client, member, administrator_headers):
        r = client.delete(f"/api/v1/members/{member.id}/moderator", headers=administrator_headers)
        assert r.status_code == status.HTTP_404_NOT_FOUND

    def test_member_cannot_assign(self, client, member, member_headers):
        r = client.put(f"/api/v1/members/{member.id}/moderator", headers=member_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN


class TestAdministratorEscalation:
    def test_escalate_records_escalator(self, client, member, administrator, administrator_headers):
        r = client.post(
            f"/api/v1/members/{member.id}/administrator", headers=administrator_headers
        )
        assert r.status_code == status.HTTP_201_CREATED
        assert r.json()["escalated_by_administrator_id"] == administrator.id

    def test_escalate_twice_conflicts(self, client, administrator, administrator_headers):
        r = client.post(
            f"/api/v1/members/{administrator.member_id}/administrator",
            headers=administrator_headers,
        )
        assert r.status_code == status.HTTP_409_CONFLICT
