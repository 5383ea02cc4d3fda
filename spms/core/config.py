"""
Runtime configuration read from the environment.

Values are resolved once at import time. A `.env` file in the working
directory is loaded first so local development does not need exported
variables.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from spms.core.errors import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

# Base directory of the project (parent of 'spms')
BASE_DIR = Path(__file__).resolve().parent.parent.parent

DB_DIR = BASE_DIR / "db"

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

DEV_JWT_SECRET = "spms-development-secret"
MIN_PRODUCTION_SECRET_LENGTH = 32

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{DB_DIR / 'spms.db'}")
SQL_DEBUG = os.getenv("SQL_DEBUG", "false").lower() == "true"

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads" / "documents")))
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "25"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def is_production(environment: str = ENVIRONMENT) -> bool:
    return environment == "production"


def resolve_jwt_secret(secret: str | None, environment: str = ENVIRONMENT) -> str:
    """
    Pick the token signing secret.

    Production refuses to start without an explicit, reasonably long
    secret. Other environments fall back to a fixed development secret
    so tokens survive restarts while working locally.
    """
    if secret:
        if is_production(environment) and len(secret) < MIN_PRODUCTION_SECRET_LENGTH:
            raise ConfigurationError(
                f"JWT_SECRET must be at least {MIN_PRODUCTION_SECRET_LENGTH} characters in production"
            )
        return secret

    if is_production(environment):
        raise ConfigurationError("JWT_SECRET must be set when ENVIRONMENT=production")

    logger.warning("JWT_SECRET is not set; using the development secret. Never do this in production.")
    return DEV_JWT_SECRET


def get_cors_allow_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Ensure DB directory exists for the default SQLite database
os.makedirs(DB_DIR, exist_ok=True)
