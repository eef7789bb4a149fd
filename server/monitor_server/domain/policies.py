# server/monitor_server/domain/policies.py

from __future__ import annotations
"""
Règles métier pures (sans I/O).

- metric_value(sample, metric_type) : valeur du champ visé par une règle
- is_breach(value, threshold)       : dépassement strict
- compute_stats(values)             : min/max/avg/p95/count
"""

from typing import Any, Iterable

# metric_type d'une règle -> attribut de l'échantillon
METRIC_FIELDS = {
    "cpu": "cpu_usage",
    "ram": "ram_usage",
    "disk": "disk_usage",
    "inode": "inode_usage",
    "gpu": "gpu_usage",
}

# Agrégats exposés par /api/stats (docker_sz en plus, jamais évalué par les alertes)
STATS_FIELDS = {**METRIC_FIELDS, "docker": "docker_sz"}


def metric_value(sample: Any, metric_type: str) -> float | None:
    """
    Retourne la valeur du champ correspondant à metric_type, ou None si
    le type est inconnu ou le champ absent (ex: GPU sur un hôte sans GPU).
    """
    field = METRIC_FIELDS.get((metric_type or "").strip().lower())
    if field is None:
        return None
    value = getattr(sample, field, None)
    if value is None:
        return None
    return float(value)


def is_breach(value: float, threshold: float) -> bool:
    return value > threshold


def compute_stats(values: Iterable[float]) -> dict[str, float | int] | None:
    """
    Agrégats sur des valeurs brutes.
    p95 = valeur triée à l'index floor(n * 0.95), borné au dernier élément.
    Retourne None si aucune valeur.
    """
    ordered = sorted(float(v) for v in values)
    count = len(ordered)
    if count == 0:
        return None
    p95_idx = min(int(count * 0.95), count - 1)
    return {
        "min": ordered[0],
        "max": ordered[-1],
        "avg": sum(ordered) / count,
        "p95": ordered[p95_idx],
        "count": count,
    }
