from __future__ import annotations
"""server/monitor_server/api/schemas/ingest.py
~~~~~~~~~~~~~~~~~~~~~~~~
Schémas ingestion (format envoyé par l'agent).
"""
from typing import Optional
from pydantic import BaseModel, Field


class MetricInput(BaseModel):
    cpu_usage: float
    ram_usage: float
    disk_usage: float
    inode_usage: float
    docker_sz: Optional[int] = None
    gpu_usage: Optional[float] = None
    timestamp: str


class MetricBatch(BaseModel):
    hostname: str
    version: Optional[str] = None
    metrics: list[MetricInput] = Field(default_factory=list)
