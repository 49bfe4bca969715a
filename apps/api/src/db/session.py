from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from src.core.config import get_settings


def async_database_url(url: str) -> str:
    """Accept postgres:// and postgresql:// URLs; the app always talks asyncpg."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


engine = create_async_engine(
    async_database_url(get_settings().database_url),
    echo=get_settings().sql_echo,
    # Search fans out count/fetch on separate connections per request
    pool_size=10,
    max_overflow=10,
    pool_pre_ping=True,
)

# Each store call opens its own session from this factory
async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)
Base = declarative_base()
