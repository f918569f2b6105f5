"""E2E smoke test for the part-request list using Playwright."""

from __future__ import annotations

import pytest

pytestmark = [pytest.mark.e2e]


def test_list_requires_token(api_request_context):
    response = api_request_context.get("/api/v1/part-requests/")
    assert response.status == 401


def test_list_is_paginated(api_request_context, auth_token):
    response = api_request_context.get(
        "/api/v1/part-requests/",
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status == 200
    data = response.json()
    assert "count" in data
    assert isinstance(data["results"], list)
