"""Password Bot — configuration loaded from environment."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Database ──────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./passwords.db"

    # ── Telegram Bot API ──────────────────────────────────
    telegram_bot_token: str = Field(
        default="",
        validation_alias=AliasChoices("TELEGRAM_BOT_TOKEN", "TOKEN_BOT"),
    )
    telegram_api_base: str = "https://api.telegram.org"
    telegram_webhook_secret: str = ""

    # ── Sessions ──────────────────────────────────────────
    max_sessions: int = 10_000

    # ── App ───────────────────────────────────────────────
    host: str = "127.0.0.1"
    port: int = 8000
    app_name: str = "Password Bot"
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton settings instance
settings = Settings()
