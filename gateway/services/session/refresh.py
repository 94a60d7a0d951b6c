# gateway/services/session/refresh.py
from __future__ import annotations
import logging
from http.cookiejar import CookieJar, DefaultCookiePolicy

import anyio
import httpx

from gateway.services.session.errors import RefreshError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 5.0


def _no_store_jar() -> CookieJar:
    # the client is shared by all callers: it must never keep anyone's cookies
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


def make_http_client(timeout_s: float = DEFAULT_TIMEOUT_S, **kw) -> httpx.AsyncClient:
    """One client per process; owned by the app lifespan."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_s),
        cookies=_no_store_jar(),
        **kw,
    )


class RefreshClient:
    """Calls the frontend's refresh endpoint on behalf of the caller.

    The upstream reads the refresh cookie itself, so the caller's whole
    Cookie header is forwarded as-is and the Set-Cookie values it answers with
    are handed back untouched. `timeout_s` caps the whole call, body included.
    """

    def __init__(self, refresh_url: str, http: httpx.AsyncClient, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.refresh_url = refresh_url
        self.http = http
        self.timeout_s = timeout_s

    async def refresh(self, cookie_header: str | None) -> tuple[str, ...]:
        if self.http.is_closed:
            raise RefreshError("refresh client is closed")

        headers = {"Cookie": cookie_header} if cookie_header else {}
        try:
            with anyio.fail_after(self.timeout_s):
                resp = await self.http.post(self.refresh_url, headers=headers)
        except TimeoutError as e:
            raise RefreshError(f"refresh timed out after {self.timeout_s}s") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RefreshError(f"refresh request failed: {e!r}") from e

        if not resp.is_success:
            raise RefreshError(f"refresh failed: {resp.status_code}", status_code=resp.status_code)

        cookies = tuple(resp.headers.get_list("set-cookie"))
        log.debug("refresh ok, %d cookie(s)", len(cookies))
        return cookies

    async def aclose(self) -> None:
        await self.http.aclose()
