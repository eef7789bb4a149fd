from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/database/models/setting.py
~~~~~~~~~~~~~~~~~~~~~~~~
Table settings (clé/valeur, ex: slack_webhook_url).
"""
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from monitor_server.infrastructure.persistence.database.base import Base


class Setting(Base):
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
