from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

# Settings() needs these before anything from gateway is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NEXT_REFRESH_URL", "http://refresh.test/api/auth/refresh")
os.environ.setdefault("SESSION_COOKIE_NAME", "sid")

from gateway.core.config import get_settings  # noqa: E402
from gateway.schemas.sessions import SessionRecord  # noqa: E402
from gateway.services.session.errors import RefreshError, SessionStoreError  # noqa: E402

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def make_session(token: str = "tok", *, expires_in: timedelta, user_id: str = "user-1") -> SessionRecord:
    return SessionRecord(
        id=token,
        user_id=user_id,
        expires_at=NOW + expires_in,
        refresh_token=f"rt-{token}",
        refresh_expires_at=NOW + timedelta(days=7),
    )


class FakeStore:
    def __init__(self, *sessions: SessionRecord, fail: bool = False):
        self.sessions = {s.id: s for s in sessions}
        self.fail = fail
        self.calls = 0

    async def get_by_token(self, token):
        self.calls += 1
        if self.fail:
            raise SessionStoreError("db down")
        return self.sessions.get(token)


class FakeAuthority:
    """Refresh authority stub with a call counter."""

    def __init__(self, cookies=("sid=new; Path=/; HttpOnly",), error: RefreshError | None = None):
        self.cookies = tuple(cookies)
        self.error = error
        self.calls = 0
        self.headers: list[str | None] = []

    async def refresh(self, cookie_header):
        self.calls += 1
        self.headers.append(cookie_header)
        if self.error is not None:
            raise self.error
        return self.cookies


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return lambda: NOW
