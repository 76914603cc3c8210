# backend/techasset/config.py
from __future__ import annotations
import os


class Config:
    # Signing key for bearer tokens; override in every real deployment
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/techasset.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///techasset.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Connection pool bounds (ignored for SQLite)
    DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW = int(os.environ.get("DB_MAX_OVERFLOW", "5"))
    DB_POOL_TIMEOUT_SECONDS = int(os.environ.get("DB_POOL_TIMEOUT_SECONDS", "30"))
    DB_STATEMENT_TIMEOUT_SECONDS = int(os.environ.get("DB_STATEMENT_TIMEOUT_SECONDS", "30"))

    # Fernet key for vault secrets at rest; derived from SECRET_KEY when unset
    VAULT_KEY = os.environ.get("VAULT_KEY")

    # Bcrypt cost factor for account passwords
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # Bearer tokens
    TOKEN_ALGORITHM = "HS256"
    TOKEN_TTL_SECONDS = int(os.environ.get("TOKEN_TTL_SECONDS", str(24 * 60 * 60)))

    # Audit report window (most recent rows only)
    ACTIVITY_LOG_LIMIT = int(os.environ.get("ACTIVITY_LOG_LIMIT", "1000"))

    TICKET_PREFIX = os.environ.get("TICKET_PREFIX", "TICKET")

    # Base URL for customer feedback links
    APP_URL = os.environ.get("APP_URL", "http://localhost:5173")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if origin.strip()
    ]


def build_engine_options(config) -> dict:
    """
    Engine options for the configured database.

    SQLite uses its own pool classes which reject pool sizing arguments, so
    sizing is only applied to server databases.
    """
    uri = config.get("SQLALCHEMY_DATABASE_URI") or ""
    if uri.startswith("sqlite"):
        return {}
    return {
        "pool_size": config.get("DB_POOL_SIZE", 10),
        "max_overflow": config.get("DB_MAX_OVERFLOW", 5),
        "pool_timeout": config.get("DB_POOL_TIMEOUT_SECONDS", 30),
        "pool_pre_ping": True,
    }
