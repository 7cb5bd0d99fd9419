"""
Environment-driven settings.

Everything is read lazily from `os.environ` so tests can monkeypatch the
environment without reloading modules.
"""

from __future__ import annotations

import os
from urllib.parse import quote

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

# Hard ceiling for GET /api/audit.
AUDIT_LOG_LIMIT = 1000


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def db_host() -> str:
    return _env_str("DB_HOST", "localhost")


def database_url() -> str:
    """
    DATABASE_URL wins; otherwise build a DSN from the DB_* parts.
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if url:
        return url

    user = _env_str("DB_USER", os.environ.get("USER", "").strip() or "postgres")
    password = os.environ.get("DB_PASSWORD", "")
    name = _env_str("DB_NAME", "radiocalco_dev")
    port = _env_int("DB_PORT", 5432)

    auth = quote(user, safe="")
    if password:
        auth = f"{auth}:{quote(password, safe='')}"
    return f"postgresql://{auth}@{db_host()}:{port}/{quote(name, safe='')}"


def db_ssl() -> bool:
    # RDS endpoints require TLS; everything else opts in explicitly.
    return _env_bool("DB_SSL", default=db_host().endswith("rds.amazonaws.com"))


def db_pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(1, db_pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def db_command_timeout() -> float:
    return float(max(1, _env_int("DB_COMMAND_TIMEOUT", 30)))


def db_init_schema() -> bool:
    return _env_bool("DB_INIT_SCHEMA")


def cors_allow_origins() -> list[str]:
    return _env_list("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS)


def trust_proxy_headers() -> bool:
    return _env_bool("TRUST_PROXY_HEADERS")


def expose_error_detail() -> bool:
    return _env_bool("EXPOSE_ERROR_DETAIL")


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
