# gateway/api/v1/verify.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from gateway.api.deps import get_session_cookie_name, get_verifier
from gateway.core.logging import mask_token
from gateway.schemas.sessions import VerifyOut
from gateway.services.session.errors import SessionStoreError
from gateway.services.session.gate import REASON_INVALID, REASON_MISSING
from gateway.services.session.verifier import SessionVerifier

log = logging.getLogger(__name__)

router = APIRouter(tags=["verify"])

def _invalid(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content=VerifyOut(valid=False, error=reason).model_dump(exclude_none=True),
    )

@router.get("/verify", response_model=VerifyOut, response_model_exclude_none=True)
async def verify(
    request: Request,
    verifier: SessionVerifier = Depends(get_verifier),
    cookie_name: str = Depends(get_session_cookie_name),
):
    # read-only: never triggers a refresh, never sets cookies
    sid = request.cookies.get(cookie_name)
    if not sid:
        return _invalid(REASON_MISSING)

    try:
        sess = await verifier.check_validity(sid)
    except SessionStoreError as e:
        log.warning("verify: session store error sid=%s: %s", mask_token(sid), e)
        return _invalid(REASON_INVALID)

    if sess is None:
        return _invalid(REASON_INVALID)
    return VerifyOut(valid=True, userId=sess.user_id)
