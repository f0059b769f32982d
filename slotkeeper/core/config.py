from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./slotkeeper.db"
    database_ssl: bool = False
    create_tables_on_startup: bool = True
    # Upper bound for a single store round-trip (lock wait included)
    store_timeout_seconds: float = 5.0

    # JWT (identity assertions are issued elsewhere; we only verify them)
    secret_key: str
    access_token_expire_minutes: int = 7 * 24 * 60
    algorithm: str = "HS256"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
