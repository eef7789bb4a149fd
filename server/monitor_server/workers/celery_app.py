from __future__ import annotations
"""monitor_server/workers/celery_app.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Celery app + auto-import des modules de tâches + beat schedule.
"""
from celery import Celery

from monitor_server.core.config import settings
from monitor_server.workers.scheduler.beat_schedule import beat_schedule

celery = Celery("monitor", broker=settings.REDIS_URL, backend=settings.REDIS_URL)

celery.conf.task_routes = {
    "maintenance.*": {"queue": "maintenance"},
}

celery.conf.update(
    imports=[
        "monitor_server.workers.tasks.maintenance_tasks",
    ],
)

celery.conf.beat_schedule = beat_schedule
