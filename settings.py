import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./study_tracker.db"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url() -> str:
    # We use SQLite by default for easy local dev,
    # but this can be pointed to Postgres via DATABASE_URL in .env
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


@dataclass
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    frontend_url: str = "http://localhost:5173" # Default Vite port
    production: bool = False
    timezone: str | None = None
    validate_target_references: bool = False
    log_level: str = "INFO"
    extra_origins: list[str] = field(default_factory=lambda: [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ])

    @property
    def cors_origins(self) -> list[str]:
        if not self.production:
            return ["*"]
        return [self.frontend_url, *self.extra_origins]

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=_database_url(),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173"),
            production=os.getenv("NODE_ENV") == "production",
            timezone=os.getenv("STUDY_TIMEZONE") or None,
            validate_target_references=_env_flag("VALIDATE_TARGET_REFERENCES"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
