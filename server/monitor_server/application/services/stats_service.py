from __future__ import annotations
"""server/monitor_server/application/services/stats_service.py
~~~~~~~~~~~~~~~~~~~~~~~~
Statistiques à la demande (rien de pré-agrégé) sur une fenêtre glissante.
"""

from sqlalchemy.orm import Session

from monitor_server.domain.policies import STATS_FIELDS, compute_stats
from monitor_server.infrastructure.persistence.repositories.metric_repository import MetricRepository


def stats_for_client(session: Session, client_id: str, *, hours: int = 24) -> list[dict]:
    rows = MetricRepository(session).window(client_id, hours=hours, limit=None, newest_first=False)
    if not rows:
        return []

    out: list[dict] = []
    for metric_type, field in STATS_FIELDS.items():
        # gpu / docker : seulement les échantillons qui portent la valeur
        values = [v for v in (getattr(r, field) for r in rows) if v is not None]
        agg = compute_stats(values)
        if agg is None:
            continue
        out.append({"client_id": client_id, "metric_type": metric_type, **agg})
    return out
