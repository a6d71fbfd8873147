# frameserve/middleware/auth.py
# Shared-token gate. Enabled only when AUTH_TOKEN is set.
#
# Flow:
#  - First visit: /?token=YOURTOKEN (or any path, token=... or t=...)
#  - The gate sets an HttpOnly cookie and redirects to the same URL without
#    the token, so clean URLs can be bookmarked.
#  - Later requests authenticate with the cookie.
# Also accepted: Authorization: Bearer YOURTOKEN
from __future__ import annotations

import hmac
import html
import logging
from typing import Iterable, Optional
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response

from frameserve.core.config import AUTH_COOKIE_MAX_AGE, AUTH_COOKIE_NAME
from frameserve.utils.http import is_https

log = logging.getLogger("frameserve.auth")

TOKEN_PARAMS = ("token", "t")


def tokens_match(want: str, provided: str) -> bool:
    """Length check, then a constant-time compare."""
    a, b = want.encode("utf-8"), provided.encode("utf-8")
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)


def parse_bearer(authz: Optional[str]) -> str:
    """Return the token of an 'Authorization: Bearer <token>' header, or ''."""
    scheme, _, param = (authz or "").strip().partition(" ")
    if scheme.strip().lower() != "bearer":
        return ""
    return param.strip()


def _first_non_blank(a: Optional[str], b: Optional[str]) -> str:
    if a and a.strip():
        return a
    return b or ""


def strip_token_params(request: Request) -> str:
    """Same path and query, minus the token parameters."""
    kept = [(k, v) for k, v in request.query_params.multi_items() if k not in TOKEN_PARAMS]
    url = request.url.path
    if kept:
        url += "?" + urlencode(kept)
    return url


def set_auth_cookie(response: Response, request: Request, token: str) -> None:
    response.set_cookie(
        AUTH_COOKIE_NAME,
        token,
        max_age=AUTH_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=is_https(request),
    )


_UNAUTHORIZED_PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width,initial-scale=1"/>
  <title>Frameserve - Unauthorized</title>
</head>
<body>
  <h1>Unauthorized</h1>
  <p>This Frameserve instance requires a shared access token.</p>
  <p><strong>One-time setup on this device:</strong></p>
  <p>Open this URL once (replace <code>YOURTOKEN</code>):</p>
  <p><code>{path}?token=YOURTOKEN</code></p>
  <p>After that, the device will stay logged in via a long-lived cookie.</p>
  <p>If you cleared cookies or switched browsers, repeat the one-time setup.</p>
</body>
</html>
"""


def unauthorized(request: Request) -> HTMLResponse:
    # Plain page (no inline CSS, which the CSP would block); works on TVs/kiosks.
    body = _UNAUTHORIZED_PAGE.format(path=html.escape(request.url.path, quote=True))
    return HTMLResponse(body, status_code=401, headers={"Cache-Control": "no-store"})


class AuthGateMiddleware(BaseHTTPMiddleware):
    """
    Check, in order: one-time query token, cookie, bearer header.
    A wrong query token does not reject on its own; the request may still
    carry a valid cookie or bearer header.
    """

    def __init__(self, app, *, token: str, exempt: Iterable[str] = ("/healthz",)) -> None:
        super().__init__(app)
        if not token:
            raise ValueError("AuthGateMiddleware needs a non-empty token")
        self._token = token
        self._exempt = frozenset(exempt)

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self._exempt:
            return await call_next(request)

        q = request.query_params
        provided = _first_non_blank(q.get("token"), q.get("t"))
        if provided:
            if tokens_match(self._token, provided):
                response = RedirectResponse(strip_token_params(request), status_code=302)
                set_auth_cookie(response, request, self._token)
                log.info("token exchange from %s", request.client.host if request.client else "-")
                return response
            log.debug("wrong query token for %s", request.url.path)

        cookie = request.cookies.get(AUTH_COOKIE_NAME)
        if cookie is not None and tokens_match(self._token, cookie):
            return await call_next(request)

        bearer = parse_bearer(request.headers.get("authorization"))
        if bearer and tokens_match(self._token, bearer):
            return await call_next(request)

        log.debug("rejecting unauthenticated request for %s", request.url.path)
        return unauthorized(request)
