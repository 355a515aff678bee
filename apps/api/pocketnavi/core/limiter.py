from slowapi import Limiter
from slowapi.util import get_remote_address


def get_rate_limit_key(request):
    """Per-client rate limit keyed by forwarded IP when behind a proxy; else remote address."""
    forwarded = request.headers.get("X-Forwarded-For") or ""
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return get_remote_address(request)


limiter = Limiter(key_func=get_rate_limit_key)
