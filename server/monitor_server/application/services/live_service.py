from __future__ import annotations
"""server/monitor_server/application/services/live_service.py
~~~~~~~~~~~~~~~~~~~~~~~~
Fan-out "live" des échantillons ingérés vers les abonnés (WebSocket dashboard).

- Chaque abonné possède sa propre file bornée ; publish() ne bloque JAMAIS :
  file pleine => message perdu pour CET abonné uniquement.
- Pas de backlog : un abonné ne reçoit que ce qui est publié après subscribe().
"""

import asyncio
import json
import logging
import threading
from typing import Any

log = logging.getLogger(__name__)


class Subscription:
    def __init__(self, maxsize: int):
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def offer(self, message: str) -> bool:
        try:
            self._queue.put_nowait(message)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            return False

    async def get(self) -> str:
        return await self._queue.get()

    def get_nowait(self) -> str:
        return self._queue.get_nowait()

    def pending(self) -> int:
        return self._queue.qsize()


class LiveBroadcaster:
    def __init__(self, subscriber_queue_size: int = 1000):
        self.subscriber_queue_size = subscriber_queue_size
        self._subscribers: set[Subscription] = set()
        self._lock = threading.Lock()

    def subscribe(self) -> Subscription:
        sub = Subscription(self.subscriber_queue_size)
        with self._lock:
            self._subscribers.add(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subscribers.discard(sub)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, message: str) -> int:
        """Retourne le nombre d'abonnés ayant reçu le message."""
        with self._lock:
            targets = list(self._subscribers)
        delivered = 0
        for sub in targets:
            if sub.offer(message):
                delivered += 1
            else:
                log.debug("live subscriber lagging, message dropped")
        return delivered

    def publish_metric(self, metric: dict[str, Any]) -> int:
        return self.publish(encode_metric_event(metric))


def encode_metric_event(metric: dict[str, Any]) -> str:
    return json.dumps({"event": "metric", "data": metric})
