"""Jokes app — environment-driven settings."""

import os

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY environment variable is required")

SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", "2592000"))  # 30 days
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "jokes_session")
SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE", "false")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

DATABASE_PATH = os.getenv("JOKES_DB_PATH", os.path.join(os.path.dirname(__file__), "jokes.db"))
DATABASE_URL = f"sqlite:///{DATABASE_PATH}"
SEED_DATA = _flag("JOKES_SEED_DATA", "true")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
