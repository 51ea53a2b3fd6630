import urllib.parse

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- DB connection parts ---
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_db: str = "finance"
    postgres_port: int = 5432
    database_url: str | None = None
    sql_echo: bool = False
    create_tables: bool = True

    # --- Web ---
    host: str = "0.0.0.0"
    port: int = 8000
    session_secret: str = "change-me"
    session_cookie: str = "finance_session"
    session_max_age: int = 60 * 60 * 24 * 14
    log_level: str = "INFO"
    app_url: str = "http://localhost:8000"

    # --- Invitations ---
    invitation_ttl_days: int = 7

    # --- Goal sync ---
    goal_sync_timeout: float = 10.0

    # --- Seed ---
    seed_user_id: str = "0190f5a0-0000-7000-8000-000000000001"

    @model_validator(mode='after')
    def assemble_db_connection(self) -> 'Settings':
        """Assembles the database_url from its parts unless it was given explicitly."""
        if self.database_url:
            return self

        encoded_password = urllib.parse.quote(self.postgres_password)
        self.database_url = f"postgresql+asyncpg://{self.postgres_user}:{encoded_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

        return self

settings = Settings()
