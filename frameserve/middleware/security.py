# frameserve/middleware/security.py
# Fixed hardening headers, applied to every response (401s, redirects and
# 500s too).
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse

log = logging.getLogger("frameserve.http")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Content-Security-Policy": "; ".join([
        "default-src 'self'",
        "img-src 'self' data:",
        "style-src 'self'",
        "script-src 'self'",
    ]),
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            # Starlette's own error page sits outside user middleware and
            # would go out without the headers.
            log.exception("unhandled error for %s %s", request.method, request.url.path)
            response = PlainTextResponse("Internal Server Error", status_code=500)
        for k, v in SECURITY_HEADERS.items():
            response.headers[k] = v
        return response
