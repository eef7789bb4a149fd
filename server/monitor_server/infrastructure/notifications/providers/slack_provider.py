from __future__ import annotations
"""server/monitor_server/infrastructure/notifications/providers/slack_provider.py
~~~~~~~~~~~~~~~~~~~~~~~~
SlackProvider : envoi de notifications via webhook Slack (Incoming Webhooks).
"""

import logging
from typing import Optional

import httpx

log = logging.getLogger(__name__)


class SlackProvider:
    def __init__(
        self,
        webhook: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not webhook:
            raise ValueError("Slack webhook URL must be provided")
        self.webhook = webhook
        self.timeout = timeout
        # Injection du transport pour les tests (httpx.MockTransport)
        self._transport = transport

    async def send(self, text: str) -> bool:
        """
        Envoie un message texte (mrkdwn).
        - True si le webhook répond 2xx
        - False sinon (erreur réseau ou statut non-2xx), déjà journalisé
        """
        payload = {"text": text, "mrkdwn": True}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(self.webhook, json=payload)
        except httpx.HTTPError as exc:
            log.warning("Slack send failed: %s", exc)
            return False

        if not r.is_success:
            log.warning("Slack API returned status %s", r.status_code)
            return False
        return True
