# mypy: ignore-errors
"""Tests for system endpoints."""

from fastapi import status


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_public_config(client, test_settings) -> None:
    data = client.get("/api/config").json()
    assert data["ui"] == {"page_size": test_settings.page_size}
    assert data["max_upload_bytes"] == test_settings.max_upload_bytes
