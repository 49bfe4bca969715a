from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from apps/api so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    database_url: str = "postgresql://localhost/worker_discovery"
    sql_echo: bool = False

    # Bearer tokens are issued by the auth service; we only verify them here
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days
    search_allowed_roles: str = "ADMIN"

    # Rate limiting (per-user when key_func uses user id; multi-instance needs Redis later)
    search_rate_limit: str = "60/minute"

    # Google Geocoding; None => distance search falls back to standard search
    geocode_api_key: str | None = None
    geocode_api_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    geocode_region_suffix: str | None = "Australia"
    geocode_timeout_seconds: float = 10.0
    geocode_cache_ttl_seconds: int = 7 * 24 * 60 * 60  # 7 days
    geocode_cache_max_entries: int = 1000

    # CORS (comma-separated origins; * allows all)
    cors_origins: str = "*"

    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parsed CORS origins for middleware."""
        raw = self.cors_origins.strip()
        return ["*"] if not raw else [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def search_allowed_roles_set(self) -> frozenset[str]:
        return frozenset(r.strip().upper() for r in self.search_allowed_roles.split(",") if r.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
