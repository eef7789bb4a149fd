from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/database/models/client.py
~~~~~~~~~~~~~~~~~~~~~~~~
Table clients (une ligne par agent enregistré).
"""
from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from monitor_server.infrastructure.persistence.database.base import Base
import uuid
import datetime as dt


def _new_id() -> str:
    return str(uuid.uuid4())


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    hostname: Mapped[str] = mapped_column(String(255))
    # Jeton "bearer" de l'agent ; l'id reste stable même si le hostname change
    token: Mapped[str] = mapped_column(String(64), unique=True, index=True, default=_new_id)
    last_seen: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=lambda: dt.datetime.now(dt.timezone.utc))
    version: Mapped[str | None] = mapped_column(String(64), nullable=True)
