from __future__ import annotations
"""agent/monitor_agent/errors.py
~~~~~~~~~~~~~~~~~~~~~~~~
Erreurs de livraison.
"""


class DeliveryError(Exception):
    """Échec d'envoi d'un batch."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DeliveryRejected(DeliveryError):
    """4xx : le batch est abandonné (pas de nouvel essai)."""


class DeliveryFailed(DeliveryError):
    """5xx ou erreur transport : le batch a été remis en buffer."""
