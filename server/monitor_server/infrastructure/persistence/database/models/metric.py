from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/database/models/metric.py
~~~~~~~~~~~~~~~~~~~~~~~~
Table metrics (un échantillon hôte par ligne).
"""
from sqlalchemy import BigInteger, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from monitor_server.infrastructure.persistence.database.base import Base
import datetime as dt


class MetricRecord(Base):
    __tablename__ = "metrics"
    __table_args__ = (
        Index("ix_metrics_client_ts", "client_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(String(36), ForeignKey("clients.id", ondelete="CASCADE"))
    cpu_usage: Mapped[float] = mapped_column(Float)
    ram_usage: Mapped[float] = mapped_column(Float)
    disk_usage: Mapped[float] = mapped_column(Float)
    inode_usage: Mapped[float] = mapped_column(Float)
    docker_sz: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    gpu_usage: Mapped[float | None] = mapped_column(Float, nullable=True)
    timestamp: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "cpu_usage": self.cpu_usage,
            "ram_usage": self.ram_usage,
            "disk_usage": self.disk_usage,
            "inode_usage": self.inode_usage,
            "docker_sz": self.docker_sz,
            "gpu_usage": self.gpu_usage,
            "timestamp": _iso(self.timestamp),
        }


def _iso(ts: dt.datetime | None) -> str | None:
    if ts is None:
        return None
    # SQLite rend des datetimes naïfs : ils sont stockés en UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=dt.timezone.utc)
    return ts.isoformat()
