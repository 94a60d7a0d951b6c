# gateway/api/deps.py
from __future__ import annotations
from dataclasses import dataclass

from fastapi import Request, Response

from gateway.services.session.errors import GateDenied
from gateway.services.session.gate import AuthGate
from gateway.services.session.verifier import SessionVerifier


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, handed to protected handlers explicitly."""
    user_id: str
    session_id: str


# ───────────────────────── services from app.state ──────────────────────────
def get_gate(request: Request) -> AuthGate:
    return request.app.state.gate

def get_verifier(request: Request) -> SessionVerifier:
    return request.app.state.verifier

def get_session_cookie_name(request: Request) -> str:
    return request.app.state.settings.session_cookie_name


def append_set_cookies(response: Response, cookies) -> None:
    # raw values from the refresh authority, one header each, never re-encoded
    for c in cookies:
        response.headers.append("set-cookie", c)


# ─────────────────────── protected routes dependency ────────────────────────
async def require_auth(request: Request, response: Response) -> AuthContext:
    """
    Runs the auth gate for the request.
    - allow: renewed cookies (if any) go on the response, returns AuthContext
    - deny: raises GateDenied -> 401 {"error": reason} (+ renewed cookies)
    """
    decision = await get_gate(request).gate(request)
    if not decision.allowed:
        raise GateDenied(decision.reason, decision.cookies)

    append_set_cookies(response, decision.cookies)
    return AuthContext(user_id=decision.user_id, session_id=decision.session_id)
