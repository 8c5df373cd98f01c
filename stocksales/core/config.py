import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    sql_echo: bool
    auto_create_schema: bool
    cors_origins: tuple[str, ...]
    log_level: str
    pdf_lines_per_page: int


settings = Settings(
    app_name=os.getenv("APP_NAME", "Stock & Sales API"),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./inventory.db"),
    sql_echo=_env_bool("SQL_ECHO", False),
    auto_create_schema=_env_bool("AUTO_CREATE_SCHEMA", True),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ),
    log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    pdf_lines_per_page=_env_int("PDF_LINES_PER_PAGE", 52, min_value=10),
)
