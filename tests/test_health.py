# tests/test_health.py
from fastapi import status


def test_health_responds(client) -> None:
    """The health endpoint reports the service as up."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_root_describes_api(client) -> None:
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["docs"] == "/docs"
    assert {"name", "version", "description"} <= set(body)
