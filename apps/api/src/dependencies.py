from typing import Annotated, Any, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core import decode_access_token, get_settings
from src.db.session import async_session
from src.services.geocoding import Geocoder
from src.services.search.store import ProfileStore

security = HTTPBearer(auto_error=False)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session


def get_profile_store(request: Request) -> ProfileStore:
    return request.app.state.profile_store


def get_geocoder(request: Request) -> Optional[Geocoder]:
    return getattr(request.app.state, "geocoder", None)


async def require_search_role(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> dict[str, Any]:
    """Bearer token whose role may use worker search. Returns the token claims."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = decode_access_token(credentials.credentials)
    if not claims:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    role = str(claims.get("role") or "").upper()
    if role not in get_settings().search_allowed_roles_set:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient role for worker search",
        )
    return claims
