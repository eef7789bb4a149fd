from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/repositories/client_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo clients (enregistrement, résolution du jeton, last_seen).

Pas de commit() ici : le code appelant contrôle la transaction.
"""
import datetime as dt

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from monitor_server.domain.errors import NotFound
from monitor_server.infrastructure.persistence.database.models.client import Client


class ClientRepository:
    def __init__(self, session: Session):
        self.s = session

    def get(self, client_id: str) -> Client | None:
        return self.s.get(Client, client_id)

    def require(self, client_id: str) -> Client:
        client = self.get(client_id)
        if client is None:
            raise NotFound(f"client {client_id} not found")
        return client

    def get_by_token(self, token: str) -> Client | None:
        if not token:
            return None
        return self.s.scalar(select(Client).where(Client.token == token))

    def list_all(self) -> list[Client]:
        return list(self.s.scalars(select(Client).order_by(Client.hostname)).all())

    def create(self, hostname: str) -> Client:
        client = Client(hostname=hostname, last_seen=dt.datetime.now(dt.timezone.utc))
        self.s.add(client)
        self.s.flush()
        return client

    def touch(self, client_id: str, version: str | None, *, now: dt.datetime | None = None) -> None:
        """Met à jour last_seen ; la version n'est écrasée que si l'agent l'envoie."""
        values: dict = {"last_seen": now or dt.datetime.now(dt.timezone.utc)}
        if version:
            values["version"] = version
        self.s.execute(update(Client).where(Client.id == client_id).values(**values))

    def delete(self, client_id: str) -> bool:
        res = self.s.execute(delete(Client).where(Client.id == client_id))
        return (res.rowcount or 0) > 0
