"""Rate limiting middleware using slowapi.

Requests are counted in fixed windows keyed by the authenticated owner id,
or by the client address when no valid session is present. If the counter
storage is unreachable the limiter lets the request through.
"""
from fastapi import Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from eventdesk.auth.utils import decode_access_token
from eventdesk.config import settings


def rate_limit_key(request: Request) -> str:
    """Counter key: "user:<id>" for authenticated callers, "ip:<address>" otherwise."""
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(settings.SESSION_COOKIE_NAME)

    if token:
        payload = decode_access_token(token)
        if payload:
            return f"user:{payload['sub']}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
    swallow_errors=True,
    # Fail open: a dead counter store falls back to per-process memory
    in_memory_fallback_enabled=True,
)


def setup_rate_limiting(app):
    """Configure rate limiting for the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
