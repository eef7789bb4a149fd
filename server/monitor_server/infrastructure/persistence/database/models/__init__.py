from __future__ import annotations
"""server/monitor_server/infrastructure/persistence/database/models/__init__.py
~~~~~~~~~~~~~~~~~~~~~~~~
Modèles ORM.
"""

from .client import Client
from .metric import MetricRecord
from .alert_rule import AlertRule
from .setting import Setting

__all__ = ["Client", "MetricRecord", "AlertRule", "Setting"]
