from __future__ import annotations
"""
server/monitor_server/api/routes/report.py
~~~~~~~~~~~~~~~~~~~~~~~~
POST /api/report : ingestion d'un batch d'agent.

Codes :
- 200 accepté
- 401 jeton absent/inconnu (l'agent jette le batch)
- 5xx erreur serveur (l'agent remet le batch en buffer)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from monitor_server.api.schemas.ingest import MetricBatch
from monitor_server.application.container import Services, get_services
from monitor_server.core.security import bearer_token
from monitor_server.domain.errors import Unauthorized
from monitor_server.infrastructure.persistence.database.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/report", status_code=200)
async def report_metrics(
    batch: MetricBatch,
    token: str = Depends(bearer_token),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
) -> dict:
    try:
        inserted = services.ingestion.ingest(db, token, batch)
    except Unauthorized:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown client token")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("ingest.storage_failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Storage unavailable")
    return {"status": "accepted", "inserted": len(inserted)}
