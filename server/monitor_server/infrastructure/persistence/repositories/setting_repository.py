from __future__ import annotations
"""
Repository d'accès à la table settings (clé/valeur).

Principes:
- Pas de commit() ici : le code appelant contrôle la transaction.
- Getter "effectif" pour le webhook : valeur en base, sinon fallback config.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from monitor_server.core.config import settings
from monitor_server.infrastructure.persistence.database.models.setting import Setting

SLACK_WEBHOOK_KEY = "slack_webhook_url"


class SettingRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.get(Setting, key)
        return row.value if row else None

    def all(self) -> dict[str, str]:
        return {s.key: s.value for s in self.db.scalars(select(Setting)).all()}

    def set(self, key: str, value: str) -> Setting:
        row = self.db.get(Setting, key)
        if row is None:
            row = Setting(key=key, value=value)
            self.db.add(row)
        else:
            row.value = value
        return row

    def get_effective_slack_webhook(self) -> Optional[str]:
        """
        Priorité :
        1) settings.slack_webhook_url (non vide)
        2) ENV SLACK_WEBHOOK
        """
        url = (self.get(SLACK_WEBHOOK_KEY) or "").strip()
        if url:
            return url
        return (settings.SLACK_WEBHOOK or "").strip() or None
