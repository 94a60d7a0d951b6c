# gateway/services/session/verifier.py
from __future__ import annotations
from datetime import datetime
from typing import Callable, Optional

from gateway.schemas.sessions import SessionRecord
from gateway.services.repo.sessions_async import SessionStore
from gateway.utils.dt import now_utc


class SessionVerifier:
    """Side-effect free "is this session valid right now" check.

    Unlike SessionValidator it never talks to the refresh authority, so it is
    safe for health and status checks that must not rotate anyone's cookies.
    """

    def __init__(self, store: SessionStore, *, clock: Callable[[], datetime] = now_utc):
        self.store = store
        self.clock = clock

    async def check_validity(self, session_id: str) -> Optional[SessionRecord]:
        sess = await self.store.get_by_token(session_id)
        if sess is None or self.clock() >= sess.expires_at:
            return None
        return sess
