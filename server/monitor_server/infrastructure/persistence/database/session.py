# server/monitor_server/infrastructure/persistence/database/session.py
from __future__ import annotations

"""
Moteur + fabrique de sessions du collecteur.

SQLite par défaut (fichier ./data/monitor.db, ou :memory: en tests),
PostgreSQL via DATABASE_URL. Les clés étrangères SQLite sont activées à
chaque connexion, sinon la suppression d'un client ne supprimerait ni ses
échantillons ni ses règles.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from monitor_server.core.config import settings

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _engine_options(url: URL) -> dict[str, Any]:
    """kwargs de create_engine selon le dialecte."""
    backend = url.get_backend_name()
    if backend.startswith("sqlite"):
        opts: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        database = (url.database or "").strip()
        if database in ("", ":memory:"):
            # une seule connexion partagée, sinon chaque session verrait une base vide
            opts["poolclass"] = StaticPool
        else:
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        return opts
    if backend.startswith("postgres"):
        return {"connect_args": {"connect_timeout": settings.DB_CONNECT_TIMEOUT}, "pool_pre_ping": True}
    return {"pool_pre_ping": True}


def _sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cur = dbapi_connection.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


def init_engine() -> Engine:
    """Engine unique du process (créé au premier appel)."""
    global _engine
    if _engine is None:
        url = make_url(settings.DATABASE_URL)
        engine = create_engine(url, **_engine_options(url))
        if url.get_backend_name().startswith("sqlite"):
            event.listen(engine, "connect", _sqlite_foreign_keys)
        _engine = engine
    return _engine


def init_sessionmaker() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        # expire_on_commit=False : les lignes restent lisibles après commit (fan-out, réponses)
        _SessionLocal = sessionmaker(bind=init_engine(), autoflush=True, expire_on_commit=False)
    return _SessionLocal


def init_db() -> None:
    """create_all idempotent (pas de migrations : schéma à quatre tables)."""
    from monitor_server.infrastructure.persistence.database.base import Base

    Base.metadata.create_all(bind=init_engine())


@contextmanager
def get_sync_session() -> Iterator[Session]:
    """Hors requête HTTP (dispatcher, tâches Celery) : `with get_sync_session() as s:`."""
    with init_sessionmaker()() as s:
        yield s


def get_db() -> Iterator[Session]:
    """Dépendance FastAPI : une session par requête, fermée en sortie."""
    with init_sessionmaker()() as db:
        yield db
