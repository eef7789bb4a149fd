# server/monitor_server/workers/tasks/maintenance_tasks.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from celery.utils.log import get_task_logger

from monitor_server.core.config import settings
from monitor_server.infrastructure.persistence.database.session import get_sync_session
from monitor_server.infrastructure.persistence.repositories.metric_repository import MetricRepository
from monitor_server.workers.celery_app import celery

logger = get_task_logger(__name__)


@celery.task(name="maintenance.purge_old_metrics")
def purge_old_metrics(retention_days: Optional[int] = None) -> int:
    """
    Tâche périodique : supprime les échantillons plus vieux que la rétention
    (METRICS_RETENTION_DAYS par défaut). Retourne le nombre de lignes supprimées.
    """
    days = int(retention_days if retention_days is not None else settings.METRICS_RETENTION_DAYS)
    if days <= 0:
        raise ValueError("retention_days must be > 0")

    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    with get_sync_session() as s:
        deleted = MetricRepository(s).delete_older_than(cutoff)
        s.commit()

    logger.info("purge_old_metrics: deleted=%d retention_days=%d", deleted, days)
    return deleted
