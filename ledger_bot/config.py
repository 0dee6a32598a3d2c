"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./ledger_bot.db"

    # Telegram transport
    telegram_bot_token: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    telegram_secret_token: Optional[str] = None
    authorized_chat_id: Optional[int] = None

    # Local time zone used for periods and card cutoffs
    timezone: str = "America/Argentina/Buenos_Aires"

    # Service
    service_name: str = "ledger-bot"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    reply_max_retries: int = 3
    reply_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
