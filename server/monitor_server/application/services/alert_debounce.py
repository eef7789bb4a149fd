from __future__ import annotations
"""server/monitor_server/application/services/alert_debounce.py
~~~~~~~~~~~~~~~~~~~~~~~~
Anti-spam des alertes par (client_id, metric_type).

- Mémoire process uniquement : un redémarrage peut provoquer UNE notification en double.
- try_fire() fait le check-then-set sous un seul verrou : deux évaluations
  simultanées de la même brèche ne peuvent pas passer toutes les deux.
"""

import threading
import time
from typing import Callable

DebounceKey = tuple[str, str]


class DebounceStore:
    def __init__(self, window_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.window_seconds = float(window_seconds)
        self._clock = clock
        self._last_fired: dict[DebounceKey, float] = {}
        self._lock = threading.Lock()

    def try_fire(self, client_id: str, metric_type: str, *, now: float | None = None) -> bool:
        """
        True  -> l'alerte peut partir (l'entrée est posée/écrasée à `now`)
        False -> dernière alerte trop récente, aucun changement d'état
        """
        key = (client_id, metric_type)
        with self._lock:
            ts = self._clock() if now is None else now
            last = self._last_fired.get(key)
            if last is not None and (ts - last) < self.window_seconds:
                return False
            self._last_fired[key] = ts
            return True

    def last_fired(self, client_id: str, metric_type: str) -> float | None:
        with self._lock:
            return self._last_fired.get((client_id, metric_type))

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_fired)
