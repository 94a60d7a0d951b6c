# gateway/services/session/errors.py
from __future__ import annotations


class GatewayError(Exception):
    """Base for gateway failures."""


class SessionStoreError(GatewayError):
    """Session row could not be read (DB down, malformed row...)."""


class RefreshError(GatewayError):
    """The refresh authority did not renew the session.

    `status_code` is the upstream HTTP status, or None when the call never got
    a response (connect error, timeout).
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GateDenied(GatewayError):
    """Request rejected by the auth gate; rendered as 401 by the app."""

    def __init__(self, reason: str, cookies: tuple[str, ...] = ()):
        super().__init__(reason)
        self.reason = reason
        self.cookies = cookies
