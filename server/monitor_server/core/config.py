from __future__ import annotations
"""server/monitor_server/core/config.py
~~~~~~~~~~~~~~~~~~~~~~~~
Paramètres du collecteur (pydantic-settings).
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+pysqlite:///./data/monitor.db"
    DB_CONNECT_TIMEOUT: int = Field(5, ge=1)
    REDIS_URL: str = "redis://redis:6379/0"

    # Webhook de repli si aucun `slack_webhook_url` n'est enregistré en base
    SLACK_WEBHOOK: Optional[str] = None
    SLACK_TIMEOUT_SECONDS: float = 5.0

    # Anti-spam : délai minimal entre deux alertes pour un même (client, métrique)
    ALERT_DEBOUNCE_SECONDS: float = 300.0
    ALERT_QUEUE_SIZE: int = Field(100, ge=1)
    LIVE_SUBSCRIBER_QUEUE_SIZE: int = Field(1000, ge=1)

    METRICS_RETENTION_DAYS: int = Field(7, ge=1)
    CLEANUP_INTERVAL_SECONDS: float = 3600.0

    CORS_ALLOW_ORIGINS: Optional[str] = None
    ADMIN_API_KEY: Optional[str] = None

    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
