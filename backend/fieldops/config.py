# backend/fieldops/config.py
from __future__ import annotations
import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/fieldops.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///fieldops.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Seeded on `flask system init` (and at startup when SEED_ADMIN_ON_START is set)
    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@baprogram.com")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "Admin@12345")
    ADMIN_NAME = os.environ.get("ADMIN_NAME", "System Admin")
    SEED_ADMIN_ON_START = os.environ.get("SEED_ADMIN_ON_START", "false").lower() == "true"

    BCRYPT_ROUNDS = _env_int("BCRYPT_ROUNDS", 12)

    SESSION_ABSOLUTE_TIMEOUT_HOURS = _env_int("SESSION_ABSOLUTE_TIMEOUT_HOURS", 24 * 7)
    SESSION_IDLE_TIMEOUT_HOURS = _env_int("SESSION_IDLE_TIMEOUT_HOURS", 24)

    # Result-count caps (default, ceiling)
    PLAN_LIST_DEFAULT_LIMIT = _env_int("PLAN_LIST_DEFAULT_LIMIT", 30)
    PLAN_LIST_MAX_LIMIT = _env_int("PLAN_LIST_MAX_LIMIT", 200)
    SALES_LIST_DEFAULT_LIMIT = _env_int("SALES_LIST_DEFAULT_LIMIT", 200)
    SALES_LIST_MAX_LIMIT = _env_int("SALES_LIST_MAX_LIMIT", 2000)
    MY_SALES_DEFAULT_LIMIT = _env_int("MY_SALES_DEFAULT_LIMIT", 200)
    MY_SALES_MAX_LIMIT = _env_int("MY_SALES_MAX_LIMIT", 1000)

    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    ]
