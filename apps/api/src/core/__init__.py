"""Core configuration, auth, and shared infrastructure."""

from src.core.config import Settings, get_settings
from src.core.auth import create_access_token, decode_access_token
from src.core.limiter import limiter

__all__ = [
    "Settings",
    "get_settings",
    "create_access_token",
    "decode_access_token",
    "limiter",
]
