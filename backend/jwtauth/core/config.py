"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, ``default`` when unset."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET: str | None
        Shared secret for ``HS*`` algorithms.
    JWT_PRIVATE_KEY / JWT_PUBLIC_KEY: str | None
        PEM key pair for ``RS*`` and ``ES*`` algorithms.
    JWT_ALGORITHM: str
        One of the nine supported algorithm names (``HS256`` by default).
    JWT_TTL: int
        Token lifetime in seconds.
    JWT_LOGIN_TYPE: str
        ``"mpop"`` (multi-point) or ``"sso"`` (single-point).
    JWT_SSO_KEY: str
        Claim carrying the subject in single-point mode.
    JWT_BLACKLIST_CACHE_TTL: int
        Retention of blacklist entries, in seconds.
    JWT_BLACKLIST_GRACE_PERIOD: int
        Seconds a replaced token remains acceptable.
    JWT_BLACKLIST_ENABLED: bool
        Toggles revocation enforcement.
    JWT_BLACKLIST_PREFIX: str
        Key namespace inside the blacklist store.
    REDIS_URL: str | None
        Blacklist backend; the in-memory store is used when unset.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / keys
    JWT_SECRET = os.getenv("JWT_SECRET", "CHANGE_ME_JWT")
    JWT_PRIVATE_KEY = os.getenv("JWT_PRIVATE_KEY")
    JWT_PUBLIC_KEY = os.getenv("JWT_PUBLIC_KEY")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # Lifecycle policy
    JWT_TTL = env_int("JWT_TTL", 7200)
    JWT_LOGIN_TYPE = os.getenv("JWT_LOGIN_TYPE", "mpop")
    JWT_SSO_KEY = os.getenv("JWT_SSO_KEY", "uid")

    # Blacklist
    JWT_BLACKLIST_CACHE_TTL = env_int("JWT_BLACKLIST_CACHE_TTL", 86400)
    JWT_BLACKLIST_GRACE_PERIOD = env_int("JWT_BLACKLIST_GRACE_PERIOD", 0)
    JWT_BLACKLIST_ENABLED = env_bool("JWT_BLACKLIST_ENABLED", True)
    JWT_BLACKLIST_PREFIX = os.getenv("JWT_BLACKLIST_PREFIX", "jwt:bl:")
    REDIS_URL = os.getenv("REDIS_URL")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Never connects to Redis unless ``TEST_REDIS_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    JWT_SECRET = "testing-secret"
    REDIS_URL = os.getenv("TEST_REDIS_URL")
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled; the placeholder ``JWT_SECRET`` must be overridden.
    """

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
