from __future__ import annotations
"""monitor_server/workers/scheduler/beat_schedule.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Planification périodique des tâches Celery (Beat).
"""
from monitor_server.core.config import settings

beat_schedule = {
    "purge-old-metrics": {
        "task": "maintenance.purge_old_metrics",
        "schedule": settings.CLEANUP_INTERVAL_SECONDS,
    },
}
