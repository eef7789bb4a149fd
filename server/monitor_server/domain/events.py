from __future__ import annotations
"""server/monitor_server/domain/events.py
~~~~~~~~~~~~~~~~~~~~~~~~
Message one-shot émis par l'évaluation, consommé une seule fois par le dispatcher.
"""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AlertEvent:
    client_id: str
    rule: Any  # AlertRule (ORM) ou tout objet exposant metric_type/threshold
    observed_value: float
