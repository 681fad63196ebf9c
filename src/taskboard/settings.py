from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

_DEV_SECRET = "dev-secret-change-in-production"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/taskboard.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - JWT_SECRET: secret used to sign identity tokens
    - TOKEN_TTL_SECONDS: identity token lifetime (default: 7 days)
    - AUTH_COOKIE_NAME: name of the identity cookie (default: 'authToken')
    - AUTH_COOKIE_SECURE: 'true' to mark the identity cookie Secure (default: false)
    - BCRYPT_ROUNDS: bcrypt work factor, 4..31 (default: 12)
    - LOG_LEVEL: root log level (default: INFO)
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    jwt_secret: str
    token_ttl_seconds: int
    auth_cookie_name: str
    auth_cookie_secure: bool
    bcrypt_rounds: int
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        backend = "memory"

    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/taskboard.db").strip()
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))

    ttl = _parse_int(_get_env("TOKEN_TTL_SECONDS", str(60 * 60 * 24 * 7)), 60 * 60 * 24 * 7)
    if ttl <= 0:
        ttl = 60 * 60 * 24 * 7

    # bcrypt only accepts work factors in 4..31
    rounds = min(max(_parse_int(_get_env("BCRYPT_ROUNDS", "12"), 12), 4), 31)

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=origins,
        jwt_secret=_get_env("JWT_SECRET", _DEV_SECRET),
        token_ttl_seconds=ttl,
        auth_cookie_name=_get_env("AUTH_COOKIE_NAME", "authToken").strip(),
        auth_cookie_secure=_parse_bool(_get_env("AUTH_COOKIE_SECURE", "false"), False),
        bcrypt_rounds=rounds,
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
