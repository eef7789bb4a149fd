from __future__ import annotations
"""server/monitor_server/domain/errors.py
~~~~~~~~~~~~~~~~~~~~~~~~
Erreurs métier du collecteur.

- Unauthorized : jeton inconnu/absent -> 401, l'agent ne doit pas réessayer
- NotFound     : client/règle inconnu -> 404
"""


class MonitorError(Exception):
    """Base des erreurs métier."""


class Unauthorized(MonitorError):
    pass


class NotFound(MonitorError):
    pass
