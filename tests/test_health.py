# tests/test_health.py
from typing import Any

from fastapi import status


def test_health_responds(client: Any) -> None:
    """Verify that the health endpoint reports the service as up."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_root_describes_api(client: Any) -> None:
    """The root endpoint names the application and links the docs."""
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["docs"] == "/docs"
