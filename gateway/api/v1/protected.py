# gateway/api/v1/protected.py
"""Protected endpoint behind the cookie-session gate."""

from fastapi import APIRouter, Depends

from gateway.api.deps import AuthContext, require_auth
from gateway.utils.dt import now_utc

router = APIRouter(tags=["protected"])

@router.get("/secure")
def secure(auth: AuthContext = Depends(require_auth)):
    """
    200 OK – session cookie valid (possibly renewed on the way, see Set-Cookie).
    401     – everything else (raised by require_auth).
    """
    return {"message": "secure ok", "userId": auth.user_id, "time": now_utc()}
