from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/repositories/alert_rule_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo alert_rules.
"""
from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from monitor_server.infrastructure.persistence.database.models.alert_rule import AlertRule

DEFAULT_DURATION_SEC = 30


class AlertRuleRepository:
    def __init__(self, session: Session):
        self.s = session

    def list_all(self) -> list[AlertRule]:
        return list(self.s.scalars(select(AlertRule).order_by(AlertRule.id)).all())

    def for_client(self, client_id: str) -> list[AlertRule]:
        """Règles globales (client_id NULL) + règles propres au client."""
        stmt = (
            select(AlertRule)
            .where(or_(AlertRule.client_id.is_(None), AlertRule.client_id == client_id))
            .order_by(AlertRule.id)
        )
        return list(self.s.scalars(stmt).all())

    def create(
        self,
        *,
        client_id: str | None,
        metric_type: str,
        threshold: float,
        duration_sec: int | None = None,
    ) -> AlertRule:
        rule = AlertRule(
            client_id=client_id,
            metric_type=metric_type,
            threshold=float(threshold),
            duration_sec=DEFAULT_DURATION_SEC if duration_sec is None else int(duration_sec),
        )
        self.s.add(rule)
        self.s.flush()
        return rule

    def delete(self, rule_id: int) -> bool:
        res = self.s.execute(delete(AlertRule).where(AlertRule.id == rule_id))
        return (res.rowcount or 0) > 0
