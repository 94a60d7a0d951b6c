# gateway/services/session/validator.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from gateway.core.logging import mask_token
from gateway.schemas.sessions import SessionRecord
from gateway.services.repo.sessions_async import SessionStore
from gateway.services.session.errors import RefreshError
from gateway.utils.dt import now_utc

log = logging.getLogger(__name__)

REFRESH_WINDOW = timedelta(minutes=15)


class RefreshAuthority(Protocol):
    async def refresh(self, cookie_header: str | None) -> tuple[str, ...]: ...


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validate_or_refresh call.

    `session` is always the record as read before any refresh; `cookies` are
    the Set-Cookie values to hand back so the *next* request uses the renewed
    session.
    """
    session: Optional[SessionRecord]
    cookies: tuple[str, ...] = ()
    was_expired: bool = False
    error: Optional[RefreshError] = None


class SessionValidator:
    def __init__(
        self,
        store: SessionStore,
        authority: RefreshAuthority,
        *,
        refresh_window: timedelta = REFRESH_WINDOW,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.store = store
        self.authority = authority
        self.refresh_window = refresh_window
        self.clock = clock

    async def validate_or_refresh(self, session_id: str, cookie_header: str | None) -> ValidationResult:
        # 1) lookup; SessionStoreError goes up to the caller as is
        sess = await self.store.get_by_token(session_id)
        if sess is None:
            return ValidationResult(session=None)

        # 2) classify
        now = self.clock()
        expired = now >= sess.expires_at
        near_expiry = not expired and (sess.expires_at - now) <= self.refresh_window

        if not (expired or near_expiry):
            return ValidationResult(session=sess)

        # 3) one refresh attempt, no retry
        try:
            cookies = await self.authority.refresh(cookie_header)
        except RefreshError as e:
            log.warning(
                "refresh failed sid=%s expired=%s: %s", mask_token(session_id), expired, e
            )
            return ValidationResult(session=sess, was_expired=expired, error=e)

        log.info(
            "session refreshed sid=%s expired=%s cookies=%d",
            mask_token(session_id), expired, len(cookies),
        )
        return ValidationResult(session=sess, cookies=tuple(cookies), was_expired=expired)
