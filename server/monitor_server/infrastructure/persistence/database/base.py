from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/database/base.py
~~~~~~~~~~~~~~~~~~~~~~~~
Base déclarative commune aux quatre tables (clients, metrics, alert_rules, settings).

init_db() fait un create_all sur Base.metadata : les modèles doivent donc
être enregistrés dès que ce module est importé (import en fin de fichier).
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


import monitor_server.infrastructure.persistence.database.models  # noqa: E402,F401

__all__ = ["Base"]
