"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when missing)
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
    """Parse an integer from an environment variable, falling back to ``default``."""
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
    SECRET_KEY: str
        Flask secret used for session signing. Defaults to a development-safe
        placeholder and should be overridden in production.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` for signing bearer tokens.
    JWT_ALGORITHM: str
        Signing algorithm. Decoding accepts this single algorithm only.
    SESSION_TOKEN_TTL: timedelta
        Lifetime of session tokens issued at login (7 days).
    PASSWORD_RESET_TOKEN_TTL: timedelta
        Lifetime of single-use password-reset tokens (24 hours).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ENGINE_OPTIONS: dict
        Connection pool tuning shared by all requests.
    REDIS_URL: str | None
        Revocation store location. When unset an in-memory store is used.
    ELASTICSEARCH_URL: str | None
        Search engine location. When unset an in-memory index is used.
    SEARCH_INDEX: str
        Index holding denormalized publication documents.
    SEARCH_SYNC_WORKERS: int
        Size of the bounded background pool running index synchronization.
    SEARCH_SYNC_QUEUE_SIZE: int
        Jobs allowed in flight before new ones are dropped and logged.
    SEARCH_SYNC_MODE: str
        ``"thread"`` runs synchronization on the pool, ``"inline"`` in the
        request thread after commit.
    PASSWORD_RESET_EXPOSE_TOKEN: bool
        Echo reset tokens in API responses. Only for environments without
        an out-of-band delivery channel.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_DECODE_ALGORITHMS = ["HS256"]
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_TYPE = "Bearer"
    SESSION_TOKEN_TTL = timedelta(days=7)
    PASSWORD_RESET_TOKEN_TTL = timedelta(hours=24)
    PASSWORD_RESET_EXPOSE_TOKEN = env_bool("PASSWORD_RESET_EXPOSE_TOKEN", False)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Revocation store / search engine
    REDIS_URL = os.getenv("REDIS_URL")
    ELASTICSEARCH_URL = os.getenv("ELASTICSEARCH_URL")
    ELASTICSEARCH_API_KEY = os.getenv("ELASTICSEARCH_API_KEY")
    SEARCH_INDEX = os.getenv("SEARCH_INDEX", "publications")
    SEARCH_REQUEST_TIMEOUT = env_int("SEARCH_REQUEST_TIMEOUT", 10)
    SEARCH_SYNC_WORKERS = env_int("SEARCH_SYNC_WORKERS", 4)
    SEARCH_SYNC_QUEUE_SIZE = env_int("SEARCH_SYNC_QUEUE_SIZE", 256)
    SEARCH_SYNC_MODE = os.getenv("SEARCH_SYNC_MODE", "thread")  # "thread" | "inline"

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and exposes password-reset tokens in API
    responses since no mail transport is wired.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PASSWORD_RESET_EXPOSE_TOKEN = env_bool("PASSWORD_RESET_EXPOSE_TOKEN", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis or Elasticsearch; in-memory adapters are wired.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SQLALCHEMY_ENGINE_OPTIONS: dict = {}
    REDIS_URL = None
    ELASTICSEARCH_URL = None
    PASSWORD_RESET_EXPOSE_TOKEN = True
    SEARCH_SYNC_MODE = "inline"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled and sizes the connection pool for
    concurrent workers. ``REDIS_URL`` must be set: startup fails
    without a shared revocation store.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": env_int("DB_POOL_SIZE", 10),
        "max_overflow": env_int("DB_MAX_OVERFLOW", 5),
    }
    PASSWORD_RESET_EXPOSE_TOKEN = False
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
