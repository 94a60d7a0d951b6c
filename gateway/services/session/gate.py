# gateway/services/session/gate.py
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from starlette.requests import Request

from gateway.core.logging import mask_token
from gateway.services.session.errors import SessionStoreError
from gateway.services.session.validator import SessionValidator

log = logging.getLogger(__name__)

REASON_MISSING = "missing session"
REASON_UNAUTHORIZED = "unauthorized"
REASON_EXPIRED = "expired, refresh triggered"
REASON_INVALID = "invalid or expired"


class GateState(str, enum.Enum):
    NO_TOKEN = "no_token"
    STORE_MISS = "store_miss"
    STORE_ERROR = "store_error"
    REFRESH_FAILED = "refresh_failed"
    EXPIRED = "expired"
    NEAR_EXPIRY_RENEWED = "near_expiry_renewed"
    VALID = "valid"


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    state: GateState
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    reason: Optional[str] = None
    cookies: tuple[str, ...] = ()


def _deny(state: GateState, reason: str, cookies: tuple[str, ...] = ()) -> GateDecision:
    return GateDecision(allowed=False, state=state, reason=reason, cookies=cookies)


class AuthGate:
    """Per-request allow/deny policy on top of SessionValidator.

    A session that was already expired when the request came in is always
    denied, even if the refresh it triggered went through: the renewed cookies
    ride along on the 401 and the client's next request gets in.
    """

    def __init__(self, validator: SessionValidator, session_cookie_name: str):
        self.validator = validator
        self.session_cookie_name = session_cookie_name

    async def gate(self, request: Request) -> GateDecision:
        # 1) token from cookie
        token = request.cookies.get(self.session_cookie_name)
        if not token:
            return _deny(GateState.NO_TOKEN, REASON_MISSING)

        # 2) validate (+ refresh); the whole Cookie header goes upstream
        try:
            res = await self.validator.validate_or_refresh(token, request.headers.get("cookie"))
        except SessionStoreError as e:
            # same 401 as a miss for the client, but not the same thing for us
            log.warning("session store error sid=%s: %s", mask_token(token), e)
            return _deny(GateState.STORE_ERROR, REASON_UNAUTHORIZED)

        # 3) failed refresh / unknown token
        if res.error is not None:
            return _deny(GateState.REFRESH_FAILED, REASON_UNAUTHORIZED)
        if res.session is None:
            log.info("unknown session sid=%s", mask_token(token))
            return _deny(GateState.STORE_MISS, REASON_UNAUTHORIZED)

        # 4-5) expired at decision time -> deny, but hand over renewed cookies
        if res.was_expired:
            return _deny(GateState.EXPIRED, REASON_EXPIRED, res.cookies)

        # 6) allow
        state = GateState.NEAR_EXPIRY_RENEWED if res.cookies else GateState.VALID
        return GateDecision(
            allowed=True,
            state=state,
            user_id=res.session.user_id,
            session_id=res.session.id,
            cookies=res.cookies,
        )
