from __future__ import annotations
"""agent/monitor_agent/reporter.py
~~~~~~~~~~~~~~~~~~~~~~~~
Livraison des échantillons bufferisés vers le collecteur.

Un tick = drain du buffer -> POST /api/report (Bearer) :
- 2xx          : batch livré
- 4xx          : batch abandonné (DeliveryRejected), ré-essayer ne servirait à rien
- 5xx / réseau : batch remis en buffer (DeliveryFailed), repris au tick suivant

Livraison au moins une fois : un 2xx perdu en route => doublons côté serveur.
"""
import asyncio
import enum
import logging
from typing import Optional

import httpx

from monitor_agent import __version__
from monitor_agent.buffer import SampleBuffer
from monitor_agent.errors import DeliveryFailed, DeliveryRejected
from monitor_agent.models import Batch

logger = logging.getLogger(__name__)


class DeliveryResult(enum.Enum):
    EMPTY = "empty"
    SENT = "sent"


class Reporter:
    def __init__(
        self,
        buffer: SampleBuffer,
        *,
        url: str,
        token: str,
        hostname: str,
        version: Optional[str] = __version__,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.buffer = buffer
        self.url = url
        self.hostname = hostname
        self.version = version
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {token}"},
        )
        # Au plus un envoi en vol
        self._lock = asyncio.Lock()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Reporter":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def send_batch(self) -> DeliveryResult:
        async with self._lock:
            metrics = self.buffer.drain()
            if not metrics:
                return DeliveryResult.EMPTY

            batch = Batch(hostname=self.hostname, version=self.version, metrics=metrics)
            try:
                resp = await self._client.post(self.url, json=batch.model_dump(mode="json"))
            except httpx.HTTPError as exc:
                self.buffer.requeue(metrics)
                logger.error("Failed to send metrics: %s", exc)
                raise DeliveryFailed(f"Request failed: {exc}") from exc

            if resp.is_success:
                logger.info("Sent %d metrics to server", len(metrics))
                return DeliveryResult.SENT

            logger.error("Server returned error %d: %s", resp.status_code, resp.text[:500])
            if resp.is_client_error:
                raise DeliveryRejected(f"Server rejected batch: {resp.status_code}", status_code=resp.status_code)

            self.buffer.requeue(metrics)
            raise DeliveryFailed(f"Server error: {resp.status_code}", status_code=resp.status_code)
