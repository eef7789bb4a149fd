from __future__ import annotations
"""
server/monitor_server/api/routes/alerts.py
~~~~~~~~~~~~~~~~~~~~~~~~
Gestion des règles d'alerte (client_id null => règle globale).
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from monitor_server.api.schemas.alert_rule import AlertRuleCreate, AlertRuleOut
from monitor_server.core.security import admin_key_auth
from monitor_server.infrastructure.persistence.database.session import get_db
from monitor_server.infrastructure.persistence.repositories.alert_rule_repository import AlertRuleRepository
from monitor_server.infrastructure.persistence.repositories.client_repository import ClientRepository

router = APIRouter(prefix="/alerts", dependencies=[Depends(admin_key_auth)])


@router.get("", response_model=list[AlertRuleOut])
async def list_alert_rules(db: Session = Depends(get_db)):
    return AlertRuleRepository(db).list_all()


@router.post("", status_code=201, response_model=AlertRuleOut)
async def create_alert_rule(payload: AlertRuleCreate, db: Session = Depends(get_db)):
    if payload.client_id is not None and ClientRepository(db).get(payload.client_id) is None:
        raise HTTPException(status_code=404, detail="Client not found")
    rule = AlertRuleRepository(db).create(
        client_id=payload.client_id,
        metric_type=payload.metric_type.strip().lower(),
        threshold=payload.threshold,
        duration_sec=payload.duration_sec,
    )
    db.commit()
    return rule


@router.delete("/{rule_id}", status_code=204)
async def delete_alert_rule(rule_id: int, db: Session = Depends(get_db)) -> Response:
    if not AlertRuleRepository(db).delete(rule_id):
        raise HTTPException(status_code=404, detail="Alert rule not found")
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
