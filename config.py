import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


@dataclass
class Settings:
    secret_key: str
    database_url: str
    session_cookie_secure: bool
    create_tables: bool
    log_level: str
    host: str
    port: int
    web_concurrency: int


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def get_settings() -> Settings:
    return Settings(
        secret_key=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///expenses.db"),
        # set SESSION_COOKIE_SECURE=0 for local non-HTTPS testing
        session_cookie_secure=os.getenv("SESSION_COOKIE_SECURE", "1") != "0",
        create_tables=os.getenv("CREATE_TABLES", "1") != "0",
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 8000),
        web_concurrency=_int_env("WEB_CONCURRENCY", 1),
    )
