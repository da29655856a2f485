"""
Unit tests for the manager capability gate.
"""

from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient

ENDPOINT = "/api/ota/sync-stats"


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.unit
def test_admin_is_allowed(
    api_client: TestClient, add_user: Callable[..., int], token_for: Callable[..., str]
) -> None:
    user_id = add_user(5, role="admin")

    response = api_client.get(ENDPOINT, headers=_bearer(token_for(user_id)))

    assert response.status_code == 200


@pytest.mark.unit
def test_expired_token_is_401(
    api_client: TestClient, add_user: Callable[..., int], token_for: Callable[..., str]
) -> None:
    user_id = add_user(5)

    response = api_client.get(ENDPOINT, headers=_bearer(token_for(user_id, expires_in=-60)))

    assert response.status_code == 401
    assert response.json()["detail"] == "Token expired"


@pytest.mark.unit
def test_token_with_wrong_signature_is_403(
    api_client: TestClient, add_user: Callable[..., int], token_for: Callable[..., str]
) -> None:
    user_id = add_user(5)

    token = token_for(user_id, secret="another-jwt-secret-that-does-not-match-01")

    response = api_client.get(ENDPOINT, headers=_bearer(token))

    assert response.status_code == 403
    assert response.json()["detail"] == "Invalid token"


@pytest.mark.unit
def test_inactive_or_unknown_user_is_401(
    api_client: TestClient, add_user: Callable[..., int], token_for: Callable[..., str]
) -> None:
    inactive_id = add_user(6, is_active=False)

    inactive = api_client.get(ENDPOINT, headers=_bearer(token_for(inactive_id)))
    unknown = api_client.get(ENDPOINT, headers=_bearer(token_for(404)))

    for response in (inactive, unknown):
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token - user not found"


@pytest.mark.unit
def test_staff_is_403(
    api_client: TestClient, add_user: Callable[..., int], token_for: Callable[..., str]
) -> None:
    user_id = add_user(7, role="staff")

    response = api_client.post("/api/ota/sync-all", headers=_bearer(token_for(user_id)))

    assert response.status_code == 403
    assert response.json()["detail"] == "Manager access required"
