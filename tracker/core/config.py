"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Game Progress Tracker"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./progress_tracker.db"

    # JWT identity tokens. No default secret: startup refuses to run without one.
    secret_key: str | None = None
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 120  # 2 hours

    min_password_length: int = 6

    # Browser front end runs on its own origin
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # python -m tracker
    host: str = "127.0.0.1"
    port: int = 5000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
