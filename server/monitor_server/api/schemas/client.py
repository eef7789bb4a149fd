from __future__ import annotations
"""server/monitor_server/api/schemas/client.py
~~~~~~~~~~~~~~~~~~~~~~~~
Schémas clients.
"""
import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateClientRequest(BaseModel):
    hostname: str = Field(min_length=1, max_length=255)

    @field_validator("hostname")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("hostname must not be blank")
        return v


class CreateClientResponse(BaseModel):
    id: str
    hostname: str
    token: str


class ClientOut(BaseModel):
    """Vue publique d'un client : le jeton n'est JAMAIS renvoyé ici."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    hostname: str
    last_seen: dt.datetime
    version: Optional[str] = None
