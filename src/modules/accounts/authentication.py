"""Bearer session-token authentication for Django REST Framework.

Security decisions
------------------
* **Fail Closed**: a malformed header, unknown token or expired session
  returns 401.
* Tokens are opaque random strings looked up in the ``Session`` table;
  nothing is decoded client-side.
"""

from __future__ import annotations

import structlog
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

from modules.accounts.sessions import resolve_identity

logger = structlog.get_logger(__name__)

KEYWORD = "Bearer"


def get_bearer_token(request) -> str | None:
    """Extract the token from ``Authorization: Bearer <token>``.

    Returns ``None`` when the header is absent; raises
    ``AuthenticationFailed`` when it is present but malformed.
    """
    header = request.META.get("HTTP_AUTHORIZATION", "")
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != KEYWORD.lower():
        raise AuthenticationFailed("Invalid Authorization header format.")
    return parts[1]


class SessionTokenAuthentication(BaseAuthentication):
    """DRF authentication class that resolves bearer session tokens."""

    def authenticate(self, request):
        """Return ``(AppUser, token)`` or ``None`` (no credentials)."""
        token = get_bearer_token(request)
        if token is None:
            return None

        user = resolve_identity(token)
        if user is None:
            raise AuthenticationFailed("Invalid or expired session token.")

        structlog.contextvars.bind_contextvars(user_id=str(user.id), role=user.role)
        return (user, token)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{KEYWORD} realm="api"'
