"""E2E authentication tests using Playwright."""

from __future__ import annotations

import pytest

pytestmark = [pytest.mark.e2e]


def test_sign_in_returns_session(api_request_context, auth_credentials):
    email, password = auth_credentials

    response = api_request_context.post(
        "/api/v1/auth/sign-in/",
        data={"email": email, "password": password},
    )

    assert response.status == 200
    data = response.json()
    assert data["token"]
    assert data["expires_at"]
    assert data["user"]["email"] == email


def test_sign_in_invalid_password_returns_401(api_request_context, auth_credentials):
    email, _ = auth_credentials

    response = api_request_context.post(
        "/api/v1/auth/sign-in/",
        data={"email": email, "password": "password-sbagliata"},
    )

    assert response.status == 401


def test_token_opens_and_sign_out_closes_session(api_request_context, auth_token):
    headers = {"Authorization": f"Bearer {auth_token}"}

    assert api_request_context.get("/api/v1/me", headers=headers).status == 200
    assert api_request_context.post("/api/v1/auth/sign-out/", headers=headers).status == 204
    assert api_request_context.get("/api/v1/me", headers=headers).status == 401
