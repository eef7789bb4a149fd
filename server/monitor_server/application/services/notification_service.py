from __future__ import annotations
"""server/monitor_server/application/services/notification_service.py
~~~~~~~~~~~~~~~~~~~~~~~~
Dispatcher de notifications (Slack), découplé du chemin d'ingestion.

- File bornée (asyncio.Queue) alimentée par l'évaluation via send() :
  file pleine => l'événement est ABANDONNÉ, l'ingestion n'attend jamais.
- UN seul worker séquentiel : ordre FIFO, au plus un appel webhook en vol.
- Best-effort : un échec est journalisé puis l'événement est perdu (pas de retry).
"""

import asyncio
import logging
from contextlib import AbstractContextManager
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from monitor_server.domain.events import AlertEvent
from monitor_server.infrastructure.notifications.providers.slack_provider import SlackProvider
from monitor_server.infrastructure.persistence.database.session import get_sync_session
from monitor_server.infrastructure.persistence.repositories.client_repository import ClientRepository
from monitor_server.infrastructure.persistence.repositories.setting_repository import SettingRepository

log = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]
ProviderFactory = Callable[[str], SlackProvider]


def format_alert_message(event: AlertEvent, hostname: str) -> str:
    return "🚨 *Alert*: {} on `{}` is at {:.1f}% (threshold: {:.1f}%)".format(
        str(event.rule.metric_type).upper(),
        hostname,
        event.observed_value,
        float(event.rule.threshold),
    )


class NotificationDispatcher:
    def __init__(
        self,
        *,
        queue_size: int = 100,
        session_factory: SessionFactory = get_sync_session,
        provider_factory: Optional[ProviderFactory] = None,
    ):
        self._queue: asyncio.Queue[AlertEvent] = asyncio.Queue(maxsize=queue_size)
        self._session_factory = session_factory
        self._provider_factory = provider_factory or SlackProvider
        self._worker: asyncio.Task | None = None
        self.dropped = 0

    # ------------------------------------------------------------------
    # Côté producteur (évaluation)
    # ------------------------------------------------------------------
    def send(self, event: AlertEvent) -> bool:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            log.warning(
                "Alert queue full, event dropped",
                extra={"client_id": event.client_id, "metric_type": event.rule.metric_type},
            )
            return False
        return True

    def qsize(self) -> int:
        return self._queue.qsize()

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Démarre le worker sur la boucle courante (idempotent)."""
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self.run(), name="alert-dispatcher")

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def join(self) -> None:
        """Attend que tous les événements en file soient traités."""
        await self._queue.join()

    async def run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.process(event)
            except Exception:
                # Un événement en échec ne doit jamais arrêter le worker
                log.exception("Unexpected error while dispatching alert for client %s", event.client_id)
            finally:
                self._queue.task_done()

    async def process(self, event: AlertEvent) -> bool:
        """Traite UN événement. True si le webhook a accepté le message."""
        try:
            webhook, hostname = self._resolve(event.client_id)
        except SQLAlchemyError as exc:
            log.error("Cannot resolve notification target: %s", exc)
            return False

        if not webhook:
            log.info("Slack webhook non configuré, alerte ignorée (%s)", event.client_id)
            return False

        text = format_alert_message(event, hostname)
        ok = await self._provider_factory(webhook).send(text)
        if ok:
            log.info(
                "Sent alert for %s on %s: %.1f", event.rule.metric_type, hostname, event.observed_value
            )
        else:
            log.error("Failed to send Slack notification for client %s", event.client_id)
        return ok

    def _resolve(self, client_id: str) -> tuple[Optional[str], str]:
        with self._session_factory() as s:
            webhook = SettingRepository(s).get_effective_slack_webhook()
            client = ClientRepository(s).get(client_id)
            hostname = client.hostname if client else client_id
        return webhook, hostname
