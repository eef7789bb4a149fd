from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/repositories/metric_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo metrics (insert_batch, fenêtres de lecture, purge).
"""
from datetime import datetime, timedelta, timezone
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from monitor_server.infrastructure.persistence.database.models.metric import MetricRecord


def parse_timestamp(raw: str | datetime | None) -> datetime:
    """RFC 3339 -> datetime UTC ; None ou illisible -> maintenant."""
    if isinstance(raw, datetime):
        ts = raw
    elif raw:
        try:
            ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            ts = datetime.now(timezone.utc)
    else:
        ts = datetime.now(timezone.utc)
    return ts.astimezone(timezone.utc) if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class MetricRepository:
    def __init__(self, session: Session):
        self.s = session

    def insert_batch(self, client_id: str, samples: Iterable) -> list[MetricRecord]:
        """
        Insère les échantillons DANS L'ORDRE reçu et renvoie les lignes
        (ids attribués par la base après flush).
        """
        rows: list[MetricRecord] = []
        for m in samples:
            rows.append(
                MetricRecord(
                    client_id=client_id,
                    cpu_usage=float(m.cpu_usage),
                    ram_usage=float(m.ram_usage),
                    disk_usage=float(m.disk_usage),
                    inode_usage=float(m.inode_usage),
                    docker_sz=m.docker_sz,
                    gpu_usage=m.gpu_usage,
                    timestamp=parse_timestamp(m.timestamp),
                )
            )
        for row in rows:
            # add + flush un par un : garantit des ids croissants dans l'ordre du batch
            self.s.add(row)
            self.s.flush()
        return rows

    def window(self, client_id: str, *, hours: int = 24, limit: int | None = 1000, newest_first: bool = True) -> list[MetricRecord]:
        since = datetime.now(timezone.utc) - timedelta(hours=hours)
        order = MetricRecord.timestamp.desc() if newest_first else MetricRecord.timestamp.asc()
        stmt = (
            select(MetricRecord)
            .where(MetricRecord.client_id == client_id, MetricRecord.timestamp >= since)
            .order_by(order, MetricRecord.id.desc() if newest_first else MetricRecord.id.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.s.scalars(stmt).all())

    def latest(self, client_id: str, count: int = 60) -> list[MetricRecord]:
        stmt = (
            select(MetricRecord)
            .where(MetricRecord.client_id == client_id)
            .order_by(MetricRecord.timestamp.desc(), MetricRecord.id.desc())
            .limit(count)
        )
        return list(self.s.scalars(stmt).all())

    def delete_older_than(self, cutoff: datetime) -> int:
        res = self.s.execute(delete(MetricRecord).where(MetricRecord.timestamp < cutoff))
        return res.rowcount or 0
