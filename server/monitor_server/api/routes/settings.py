from __future__ import annotations
"""server/monitor_server/api/routes/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~
Paramètres clé/valeur (notamment slack_webhook_url).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from monitor_server.core.security import admin_key_auth
from monitor_server.infrastructure.persistence.database.session import get_db
from monitor_server.infrastructure.persistence.repositories.setting_repository import SettingRepository

router = APIRouter(prefix="/settings", dependencies=[Depends(admin_key_auth)])


@router.get("")
async def get_settings(db: Session = Depends(get_db)) -> dict[str, str]:
    return SettingRepository(db).all()


@router.post("")
async def update_settings(payload: dict[str, str], db: Session = Depends(get_db)) -> dict[str, str]:
    repo = SettingRepository(db)
    for key, value in payload.items():
        repo.set(key, value)
    db.commit()
    return {"status": "ok"}
