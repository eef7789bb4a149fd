from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/database/models/alert_rule.py
~~~~~~~~~~~~~~~~~~~~~~~~
Table alert_rules (client_id NULL = règle globale).
"""
from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from monitor_server.infrastructure.persistence.database.base import Base


class AlertRule(Base):
    __tablename__ = "alert_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True
    )
    metric_type: Mapped[str] = mapped_column(String(32))
    threshold: Mapped[float] = mapped_column(Float)
    # Stocké mais non appliqué : seul le debounce conditionne le ré-armement
    duration_sec: Mapped[int] = mapped_column(Integer, default=30)
