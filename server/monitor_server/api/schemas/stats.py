from __future__ import annotations
"""server/monitor_server/api/schemas/stats.py
~~~~~~~~~~~~~~~~~~~~~~~~
Schéma Stats (calculé, jamais stocké).
"""
from pydantic import BaseModel


class StatsOut(BaseModel):
    client_id: str
    metric_type: str
    min: float
    max: float
    avg: float
    p95: float
    count: int
