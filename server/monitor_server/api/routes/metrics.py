from __future__ import annotations
"""server/monitor_server/api/routes/metrics.py
~~~~~~~~~~~~~~~~~~~~~~~~
Lecture des échantillons et statistiques d'un client.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from monitor_server.api.schemas.stats import StatsOut
from monitor_server.application.services.stats_service import stats_for_client
from monitor_server.core.security import admin_key_auth
from monitor_server.domain.errors import NotFound
from monitor_server.infrastructure.persistence.database.session import get_db
from monitor_server.infrastructure.persistence.repositories.client_repository import ClientRepository
from monitor_server.infrastructure.persistence.repositories.metric_repository import MetricRepository

router = APIRouter(dependencies=[Depends(admin_key_auth)])

LATEST_COUNT = 60
# Au-delà, now - timedelta(hours) sort de la plage des datetimes
MAX_WINDOW_HOURS = 24 * 365


def _require_client(db: Session, client_id: str) -> None:
    try:
        ClientRepository(db).require(client_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Client not found")


@router.get("/metrics/{client_id}")
async def get_metrics(
    client_id: str,
    hours: int = Query(24, ge=1, le=MAX_WINDOW_HOURS),
    limit: int = Query(1000, ge=1),
    db: Session = Depends(get_db),
) -> list[dict]:
    _require_client(db, client_id)
    rows = MetricRepository(db).window(client_id, hours=hours, limit=limit)
    return [r.to_dict() for r in rows]


@router.get("/metrics/{client_id}/latest")
async def get_latest_metrics(client_id: str, db: Session = Depends(get_db)) -> list[dict]:
    _require_client(db, client_id)
    return [r.to_dict() for r in MetricRepository(db).latest(client_id, LATEST_COUNT)]


@router.get("/stats/{client_id}", response_model=list[StatsOut])
async def get_stats(
    client_id: str,
    hours: int = Query(24, ge=1, le=MAX_WINDOW_HOURS),
    db: Session = Depends(get_db),
):
    _require_client(db, client_id)
    return stats_for_client(db, client_id, hours=hours)
