from __future__ import annotations
"""agent/monitor_agent/buffer.py
~~~~~~~~~~~~~~~~~~~~~~~~
Buffer borné d'échantillons, partagé entre producteurs et livraison.

- push : toujours accepté ; plein => les plus anciens sont évincés
- drain : échange atomique contre une liste vide
- requeue : remet un batch non livré EN TÊTE, dans la limite de la place libre
"""
import logging
import threading
from typing import Iterable

from monitor_agent.models import Sample

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 120


class SampleBuffer:
    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._items: list[Sample] = []
        self._lock = threading.Lock()
        self.dropped_total = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def push(self, sample: Sample) -> int:
        """Ajoute un échantillon ; retourne le nombre d'anciens évincés."""
        with self._lock:
            overflow = 0
            if len(self._items) >= self._capacity:
                overflow = len(self._items) - self._capacity + 1
                del self._items[:overflow]
                self.dropped_total += overflow
            self._items.append(sample)
        if overflow:
            logger.warning("Buffer overflow, dropped %d old metrics", overflow)
        return overflow

    def drain(self) -> list[Sample]:
        with self._lock:
            items, self._items = self._items, []
        return items

    def requeue(self, samples: Iterable[Sample]) -> int:
        """
        Remet `samples` (ordre d'origine) devant le contenu actuel.
        Seuls les plus anciens tenant dans la place libre sont gardés ;
        retourne le nombre réadmis.
        """
        samples = list(samples)
        with self._lock:
            free = max(self._capacity - len(self._items), 0)
            kept = samples[:free]
            self._items = kept + self._items
            lost = len(samples) - len(kept)
            self.dropped_total += lost
        if lost:
            logger.warning("Buffer full, %d undelivered metrics lost", lost)
        elif kept:
            logger.debug("Re-buffered %d metrics for retry", len(kept))
        return len(kept)
