from __future__ import annotations
"""agent/monitor_agent/core/config.py
~~~~~~~~~~~~~~~~~~~~~~~~
Paramètres de l'agent (pydantic-settings, variables d'environnement / .env).
"""
import socket

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentSettings(BaseSettings):
    SERVER_URL: str = "http://localhost:8080"
    CLIENT_TOKEN: str = Field(min_length=1)
    HOSTNAME: str = Field(default_factory=lambda: socket.gethostname() or "unknown")
    DOCKER_PATH: str = "/var/lib/docker"

    # ~2 minutes d'échantillons à 1 s
    BUFFER_CAPACITY: int = Field(120, ge=1)
    FAST_INTERVAL: float = Field(1.0, gt=0)
    SLOW_INTERVAL: float = Field(300.0, gt=0)
    REPORT_INTERVAL: float = Field(10.0, gt=0)
    REQUEST_TIMEOUT: float = Field(10.0, gt=0)

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def report_url(self) -> str:
        return f"{self.SERVER_URL.rstrip('/')}/api/report"
