# server/tests/conftest.py
"""
Conftest global de la suite serveur.

Points clés :
- ENV posées AVANT tout import monitor_server.* (Settings() est instancié à l'import) :
  SQLite in-memory partagée (StaticPool), pas de webhook, pas de clé admin.
- Tables créées une fois par session ; contenu purgé après chaque test unitaire.
- `api` : TestClient démarré (startup => services + dispatcher sur la boucle du client).
"""

import datetime as dt
import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.pop("SLACK_WEBHOOK", None)
os.environ.pop("ADMIN_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402


def _is_unit(request: pytest.FixtureRequest) -> bool:
    """True si le test courant est marqué @pytest.mark.unit."""
    return request.node.get_closest_marker("unit") is not None


@pytest.fixture(scope="session")
def _db_ready():
    from monitor_server.infrastructure.persistence.database.session import init_db

    init_db()
    return True


@pytest.fixture
def Session(_db_ready):
    """sessionmaker lié à la base SQLite in-memory : `with Session() as s:`."""
    from monitor_server.infrastructure.persistence.database.session import init_sessionmaker

    return init_sessionmaker()


# Purge DB entre tests unitaires (évite les fuites d'état)
@pytest.fixture(autouse=True)
def _clear_db_between_unit_tests(request, _db_ready):
    """⚠️ Générateur : doit 'yield' aussi hors unit."""
    if not _is_unit(request):
        yield
        return

    yield
    from monitor_server.infrastructure.persistence.database.base import Base
    from monitor_server.infrastructure.persistence.database.session import get_sync_session

    with get_sync_session() as s:
        for table in reversed(Base.metadata.sorted_tables):
            s.execute(table.delete())
        s.commit()


@pytest.fixture
def api(_db_ready):
    """TestClient démarré ; une boucle (portal) partagée par toutes ses requêtes."""
    from monitor_server.main import app

    with TestClient(app) as c:
        yield c
    app.state.services = None


@pytest.fixture
def make_client(Session):
    """Crée un client en base ; retourne (id, token)."""
    from monitor_server.infrastructure.persistence.repositories.client_repository import ClientRepository

    def _make(hostname: str = "web-01") -> tuple[str, str]:
        with Session() as s:
            c = ClientRepository(s).create(hostname)
            s.commit()
            return c.id, c.token

    return _make


@pytest.fixture
def sample_payload():
    """Fabrique un échantillon au format agent (timestamp = maintenant par défaut)."""

    def _sample(cpu: float = 10.0, **overrides) -> dict:
        data = {
            "cpu_usage": cpu,
            "ram_usage": 40.0,
            "disk_usage": 55.0,
            "inode_usage": 3.0,
            "docker_sz": None,
            "gpu_usage": None,
            "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
        }
        data.update(overrides)
        return data

    return _sample
