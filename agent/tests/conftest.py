# agent/tests/conftest.py
from __future__ import annotations

import pytest

from monitor_agent.models import Sample


@pytest.fixture
def make_sample():
    """Échantillon repérable par sa valeur CPU."""

    def _make(i: float) -> Sample:
        return Sample(cpu_usage=float(i), ram_usage=1.0, disk_usage=2.0, inode_usage=3.0)

    return _make
