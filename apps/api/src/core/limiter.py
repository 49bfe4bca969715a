from slowapi import Limiter
from slowapi.util import get_remote_address

from src.core.auth import decode_access_token


def get_rate_limit_key(request) -> str:
    """Searches are limited per token subject; anonymous calls (rejected later anyway) per IP."""
    auth = request.headers.get("Authorization") or ""
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        claims = decode_access_token(token.strip())
        if claims:
            return f"user:{claims['sub']}"
    return get_remote_address(request)


# In-memory storage: limits are per process
limiter = Limiter(key_func=get_rate_limit_key)
