"""
ParuShop - Centralized Configuration
=====================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List

from dotenv import load_dotenv

from common.helpers import parse_duration

load_dotenv()

logger = logging.getLogger("parushop.app")


# ==========================================
# 🗄️ Database
# ==========================================
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if all([DB_USER, DB_PASSWORD, DB_HOST, DB_NAME]):
        return f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    return "sqlite:///./parushop.db"


DATABASE_URL = _database_url()


# ==========================================
# 🔐 Security
# ==========================================
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "")
REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

ACCESS_TOKEN_EXPIRY = os.getenv("ACCESS_TOKEN_EXPIRY", "1d")
REFRESH_TOKEN_EXPIRY = os.getenv("REFRESH_TOKEN_EXPIRY", "7d")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS") or "10")

COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")


# ==========================================
# 🌐 HTTP
# ==========================================
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
PORT = int(os.getenv("PORT") or "8005")


# ==========================================
# 🔧 App
# ==========================================
APP_NAME = "ParuShop"
APP_VERSION = "1.0.0"
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass
class Settings:
    """Runtime configuration handed to create_app(). Defaults come from the environment."""
    database_url: str = DATABASE_URL
    access_token_secret: str = ACCESS_TOKEN_SECRET
    refresh_token_secret: str = REFRESH_TOKEN_SECRET
    jwt_algorithm: str = ALGORITHM
    access_token_expiry: timedelta = field(default_factory=lambda: parse_duration(ACCESS_TOKEN_EXPIRY))
    refresh_token_expiry: timedelta = field(default_factory=lambda: parse_duration(REFRESH_TOKEN_EXPIRY))
    cookie_secure: bool = COOKIE_SECURE
    cookie_samesite: str = COOKIE_SAMESITE
    api_prefix: str = API_PREFIX
    cors_origins: List[str] = field(default_factory=lambda: list(CORS_ORIGINS))
    debug: bool = DEBUG


def load_settings() -> Settings:
    """Build Settings from the environment. Exits if the JWT secrets are missing."""
    settings = Settings()
    if not all([settings.access_token_secret, settings.refresh_token_secret]):
        logger.critical("Security keys missing in .env (ACCESS_TOKEN_SECRET, REFRESH_TOKEN_SECRET)")
        sys.exit(1)
    if settings.access_token_secret == settings.refresh_token_secret:
        logger.warning("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET are identical")
    return settings
