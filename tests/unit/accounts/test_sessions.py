"""Unit tests for session-token identity resolution and bearer parsing.

Covers:
- resolve_identity: absent, unknown, expired (at and after expiry) and
  live tokens; expired sessions are not deleted by the lookup.
- get_bearer_token: absent, malformed and well-formed headers.
"""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from django.utils import timezone
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.test import APIRequestFactory

from modules.accounts.authentication import get_bearer_token
from modules.accounts.models import Session
from modules.accounts.sessions import resolve_identity

pytestmark = pytest.mark.unit


@pytest.fixture()
def now():
    return timezone.now()


@pytest.fixture()
def session(staff_user, now):
    return Session.objects.create(
        user=staff_user, token="live-token", expires_at=now + timedelta(hours=1)
    )


class TestResolveIdentity:
    @pytest.mark.parametrize("token", [None, ""])
    def test_absent_token(self, token):
        assert resolve_identity(token) is None

    def test_absent_token_skips_lookup(self):
        repository = MagicMock()
        assert resolve_identity("", repository=repository) is None
        repository.get_by_token.assert_not_called()

    def test_unknown_token(self, session):
        assert resolve_identity("no-such-token") is None

    def test_live_token(self, session, staff_user, now):
        assert resolve_identity("live-token", now=now) == staff_user

    def test_expiry_instant_is_expired(self, session):
        assert resolve_identity("live-token", now=session.expires_at) is None

    def test_after_expiry(self, session):
        later = session.expires_at + timedelta(seconds=1)
        assert resolve_identity("live-token", now=later) is None
        assert Session.objects.filter(token="live-token").exists()

    def test_just_before_expiry(self, session, staff_user):
        earlier = session.expires_at - timedelta(microseconds=1)
        assert resolve_identity("live-token", now=earlier) == staff_user


class TestGetBearerToken:
    factory = APIRequestFactory()

    def test_no_header(self):
        assert get_bearer_token(self.factory.get("/")) is None

    def test_bearer_header(self):
        request = self.factory.get("/", HTTP_AUTHORIZATION="Bearer abc123")
        assert get_bearer_token(request) == "abc123"

    def test_keyword_is_case_insensitive(self):
        request = self.factory.get("/", HTTP_AUTHORIZATION="bearer abc123")
        assert get_bearer_token(request) == "abc123"

    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer a b"])
    def test_malformed_header(self, header):
        with pytest.raises(AuthenticationFailed):
            get_bearer_token(self.factory.get("/", HTTP_AUTHORIZATION=header))
