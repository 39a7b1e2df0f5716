"""
Configuration helpers for the SoloQuest backend.

Settings are read once from the environment so that services and routers never
touch os.environ directly. Every value has a development default.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

from sqlalchemy.engine import URL

DEFAULT_TOKEN_TTL_SECONDS = 7 * 24 * 60 * 60
_UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    log_level: str
    db_host: str
    db_port: int
    db_name: str
    db_user: str
    db_password: str
    database_url: str
    db_create_schema: bool
    admin_email: str
    admin_password: str
    admin_name: str
    jwt_secret: str
    jwt_ttl_seconds: int


def parse_expiry(value: str | None, default: int = DEFAULT_TOKEN_TTL_SECONDS) -> int:
    """Turn "7d" / "12h" / "30m" / "45s" / "3600" into seconds."""
    raw = (value or "").strip().lower()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    amount, unit = raw[:-1], raw[-1]
    if unit not in _UNIT_SECONDS or not amount.isdigit():
        return default
    return int(amount) * _UNIT_SECONDS[unit]


def build_database_url(host: str, port: int, database: str, user: str, password: str) -> str:
    url = URL.create(
        "postgresql+psycopg",
        username=user,
        password=password,
        host=host,
        port=port,
        database=database,
    )
    return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    db_host = os.getenv("DB_HOST", "localhost")
    db_port = _int(os.getenv("DB_PORT", "5432"), 5432)
    db_name = os.getenv("DB_NAME", "solo_quest")
    db_user = os.getenv("DB_USER", "postgres")
    db_password = os.getenv("DB_PASSWORD", "postgres")
    database_url = (os.getenv("DATABASE_URL") or "").strip() or build_database_url(
        db_host, db_port, db_name, db_user, db_password
    )

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        db_host=db_host,
        db_port=db_port,
        db_name=db_name,
        db_user=db_user,
        db_password=db_password,
        database_url=database_url,
        db_create_schema=_bool(os.getenv("DB_CREATE_SCHEMA"), True),
        admin_email=os.getenv("ADMIN_EMAIL", "admin@soloquest.dev").strip(),
        admin_password=os.getenv("ADMIN_PASSWORD", "admin123"),
        admin_name=os.getenv("ADMIN_NAME", "Admin"),
        jwt_secret=os.getenv("JWT_SECRET", "default_secret_for_development_only"),
        jwt_ttl_seconds=parse_expiry(os.getenv("JWT_EXPIRY", "7d")),
    )
