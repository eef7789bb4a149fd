from __future__ import annotations
"""server/monitor_server/api/schemas/alert_rule.py
~~~~~~~~~~~~~~~~~~~~~~~~
Schémas règles d'alerte.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AlertRuleCreate(BaseModel):
    client_id: Optional[str] = None  # None => règle globale
    metric_type: str = Field(min_length=1, max_length=32)
    threshold: float
    duration_sec: Optional[int] = Field(
        default=None,
        ge=0,
        description="Stocké tel quel ; n'impose pas de dépassement soutenu (seul le debounce s'applique).",
    )


class AlertRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: Optional[str] = None
    metric_type: str
    threshold: float
    duration_sec: int
