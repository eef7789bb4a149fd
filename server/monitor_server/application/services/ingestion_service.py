from __future__ import annotations
"""
server/monitor_server/application/services/ingestion_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Service d’orchestration de l’ingestion d'un batch d'agent.

Rôle :
    - Résoudre le jeton bearer -> Client (Unauthorized sinon)
    - Mettre à jour last_seen / version
    - Persister TOUS les échantillons, dans l'ordre (ids générés par la base)
    - Évaluer les alertes sur le DERNIER échantillon uniquement
    - Publier les échantillons persistés vers le fan-out live

Isolation des pannes :
    - une erreur pendant l'évaluation est journalisée mais ne fait PAS échouer
      l'ingestion (le batch est déjà commité)
    - l'envoi des notifications est asynchrone (dispatcher), jamais ici
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from monitor_server.api.schemas.ingest import MetricBatch
from monitor_server.application.services.evaluation_service import AlertEvaluator
from monitor_server.application.services.live_service import LiveBroadcaster
from monitor_server.domain.errors import Unauthorized
from monitor_server.infrastructure.persistence.database.models.metric import MetricRecord
from monitor_server.infrastructure.persistence.repositories.alert_rule_repository import AlertRuleRepository
from monitor_server.infrastructure.persistence.repositories.client_repository import ClientRepository
from monitor_server.infrastructure.persistence.repositories.metric_repository import MetricRepository

logger = logging.getLogger(__name__)


class IngestionService:
    def __init__(self, evaluator: AlertEvaluator, broadcaster: LiveBroadcaster):
        self.evaluator = evaluator
        self.broadcaster = broadcaster

    def ingest(self, session: Session, token: str | None, batch: MetricBatch) -> list[MetricRecord]:
        """
        Orchestration complète d'un batch.

        Exceptions :
          - Unauthorized si le jeton est absent ou inconnu
          - SQLAlchemyError si la persistance échoue (-> 5xx, l'agent ré-essaiera)
        """
        clients = ClientRepository(session)
        client = clients.get_by_token(token or "")
        if client is None:
            raise Unauthorized("unknown client token")

        # 1) last_seen / version + échantillons, dans UNE transaction
        clients.touch(client.id, batch.version)
        inserted = MetricRepository(session).insert_batch(client.id, batch.metrics)
        session.commit()

        logger.info(
            "Received %d metrics from client %s (%s)",
            len(inserted),
            client.hostname,
            client.id,
        )

        if not inserted:
            return inserted

        # 2) Alertes sur le dernier échantillon seulement
        self._evaluate(session, client.id, inserted[-1])

        # 3) Fan-out live (best-effort, non bloquant)
        for row in inserted:
            self.broadcaster.publish_metric(row.to_dict())

        return inserted

    def _evaluate(self, session: Session, client_id: str, latest: Any) -> None:
        try:
            rules = AlertRuleRepository(session).for_client(client_id)
            self.evaluator.evaluate(client_id, latest, rules)
        except Exception:
            logger.exception("Alert evaluation failed for client %s (batch already stored)", client_id)
