from __future__ import annotations
"""server/monitor_server/application/container.py
~~~~~~~~~~~~~~~~~~~~~~~~
Assemblage des services en mémoire partagés par toutes les requêtes
(debounce, dispatcher, fan-out). Une instance par application FastAPI.
"""
from dataclasses import dataclass

from fastapi import Request

from monitor_server.application.services.alert_debounce import DebounceStore
from monitor_server.application.services.evaluation_service import AlertEvaluator
from monitor_server.application.services.ingestion_service import IngestionService
from monitor_server.application.services.live_service import LiveBroadcaster
from monitor_server.application.services.notification_service import NotificationDispatcher
from monitor_server.core.config import settings
from monitor_server.infrastructure.notifications.providers.slack_provider import SlackProvider


@dataclass
class Services:
    debounce: DebounceStore
    dispatcher: NotificationDispatcher
    broadcaster: LiveBroadcaster
    evaluator: AlertEvaluator
    ingestion: IngestionService


def build_services() -> Services:
    debounce = DebounceStore(window_seconds=settings.ALERT_DEBOUNCE_SECONDS)
    dispatcher = NotificationDispatcher(
        queue_size=settings.ALERT_QUEUE_SIZE,
        provider_factory=lambda url: SlackProvider(url, timeout=settings.SLACK_TIMEOUT_SECONDS),
    )
    broadcaster = LiveBroadcaster(subscriber_queue_size=settings.LIVE_SUBSCRIBER_QUEUE_SIZE)
    evaluator = AlertEvaluator(debounce, dispatcher)
    return Services(
        debounce=debounce,
        dispatcher=dispatcher,
        broadcaster=broadcaster,
        evaluator=evaluator,
        ingestion=IngestionService(evaluator, broadcaster),
    )


def services_from_app(app) -> Services:
    """Services de l'app (créés au startup, sinon à la volée)."""
    services = getattr(app.state, "services", None)
    if services is None:
        services = build_services()
        app.state.services = services
    return services


def get_services(request: Request) -> Services:
    """Dépendance FastAPI."""
    return services_from_app(request.app)
