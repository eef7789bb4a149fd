from __future__ import annotations
"""server/monitor_server/application/services/evaluation_service.py
~~~~~~~~~~~~~~~~~~~~~~~~
Évaluation des règles d'alerte sur le DERNIER échantillon d'un batch :
- mappe metric_type -> champ de l'échantillon (inconnu/absent => ignoré)
- valeur > seuil => passage par le debounce (cooldown depuis la dernière alerte)
- brèche "fraîche" => AlertEvent envoyé au dispatcher (non bloquant)

NB : duration_sec n'est PAS une fenêtre de dépassement soutenu. Un seul
échantillon au-dessus du seuil déclenche immédiatement ; seul le cooldown
du debounce conditionne le ré-armement.
"""

import logging
from typing import Any, Iterable, Protocol

from monitor_server.application.services.alert_debounce import DebounceStore
from monitor_server.domain.events import AlertEvent
from monitor_server.domain.policies import is_breach, metric_value

logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    def send(self, event: AlertEvent) -> bool: ...


class AlertEvaluator:
    def __init__(self, debounce: DebounceStore, sink: AlertSink):
        self.debounce = debounce
        self.sink = sink

    def evaluate(self, client_id: str, sample: Any, rules: Iterable[Any], *, now: float | None = None) -> list[AlertEvent]:
        """Retourne les événements émis (utile pour les tests et les logs)."""
        fired: list[AlertEvent] = []
        for rule in rules:
            if rule.client_id is not None and rule.client_id != client_id:
                continue
            metric_type = (rule.metric_type or "").strip().lower()
            value = metric_value(sample, metric_type)
            if value is None:
                continue
            if not is_breach(value, float(rule.threshold)):
                continue
            # clé normalisée : "CPU" et "cpu" partagent le même cooldown
            if not self.debounce.try_fire(client_id, metric_type, now=now):
                logger.debug(
                    "alert.debounced",
                    extra={"client_id": client_id, "metric_type": metric_type},
                )
                continue

            event = AlertEvent(client_id=client_id, rule=rule, observed_value=value)
            self.sink.send(event)
            fired.append(event)
            logger.info(
                "alert.fired",
                extra={
                    "client_id": client_id,
                    "metric_type": metric_type,
                    "value": value,
                    "threshold": rule.threshold,
                },
            )
        return fired
