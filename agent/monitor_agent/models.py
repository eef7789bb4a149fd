from __future__ import annotations
"""agent/monitor_agent/models.py
~~~~~~~~~~~~~~~~~~~~~~~~
Échantillon hôte et batch envoyé au collecteur.
"""
import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now_rfc3339() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


class Sample(BaseModel):
    """Un relevé ; immuable une fois produit."""
    model_config = ConfigDict(frozen=True)

    cpu_usage: float
    ram_usage: float
    disk_usage: float
    inode_usage: float
    docker_sz: Optional[int] = None
    gpu_usage: Optional[float] = None
    timestamp: str = Field(default_factory=utc_now_rfc3339)


class Batch(BaseModel):
    hostname: str
    version: Optional[str] = None
    metrics: list[Sample]
