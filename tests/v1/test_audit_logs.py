# mypy: ignore-errors
# tests/v1/test_audit_logs.py
"""Tests for the audit log endpoints."""

from fastapi import status


def test_search_audit_logs(client, post, member_headers, moderator_headers, administrator_headers) -> None:
    client.delete(f"/api/v1/posts/{post.id}", headers=moderator_headers)

    r = client.patch(
        "/api/v1/audit-logs", json={"action_type": "post_delete"}, headers=administrator_headers
    )
    assert r.status_code == status.HTTP_200_OK
    [row] = r.json()["data"]
    assert row["actor_role"] == "moderator"
    assert row["target_table"] == "post"
    assert row["target_id"] == post.id

    r = client.get(f"/api/v1/audit-logs/{row['id']}", headers=administrator_headers)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["id"] == row["id"]


def test_audit_logs_sorted_by_action_type(client, member_headers, administrator_headers) -> None:
    client.post("/api/v1/posts", json={"title": "One", "body": "Body"}, headers=member_headers)
    client.post("/api/v1/forbidden-words", json={"expression": "zzz"}, headers=administrator_headers)

    r = client.patch(
        "/api/v1/audit-logs",
        json={"sort_by": "action_type", "sort_order": "asc"},
        headers=administrator_headers,
    )
    types = [row["action_type"] for row in r.json()["data"]]
    assert types == sorted(types)
    assert len(types) == 2


def test_audit_logs_are_administrator_only(client, moderator_headers) -> None:
    r = client.patch("/api/v1/audit-logs", json={}, headers=moderator_headers)
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_missing_audit_log(client, administrator_headers) -> None:
    r = client.get("/api/v1/audit-logs/missing", headers=administrator_headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND
