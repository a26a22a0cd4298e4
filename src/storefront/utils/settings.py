"""Environment-driven application settings.

Protean's own configuration (databases, brokers, event store) lives in
``domain.toml``; these are the knobs the storefront itself reads.
"""

import os

_DEFAULT_JWT_SECRET = "storefront-development-jwt-secret"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def jwt_secret() -> str:
    return os.getenv("JWT_SECRET", _DEFAULT_JWT_SECRET)


def jwt_algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def jwt_expires_minutes() -> int:
    """Bearer token lifetime, eight hours unless overridden."""
    return _int_env("JWT_EXPIRES_MINUTES", 8 * 60)


def review_cache_ttl_seconds() -> int:
    return _int_env("REVIEW_CACHE_TTL_SECONDS", 600)


def cache_enabled() -> bool:
    return _bool_env("CACHE_ENABLED", True)


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
