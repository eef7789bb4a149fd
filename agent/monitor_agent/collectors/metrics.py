from __future__ import annotations
"""agent/monitor_agent/collectors/metrics.py
~~~~~~~~~~~~~~~~~~~~~~~~
Relevés hôte :
- rapides (chaque seconde) : CPU, RAM, disque racine, inodes, GPU
- lents (toutes les 5 min) : taille du répertoire Docker, mise en cache

Le GPU passe par NVML (paquet optionnel `nvidia-ml-py`) ; sans pilote NVIDIA,
gpu_usage reste None.
"""
import logging
import os
import stat
from pathlib import Path
from typing import Optional

import psutil

from monitor_agent.models import Sample

logger = logging.getLogger(__name__)


class DockerSizeCache:
    """Dernière taille calculée (octets). Lecture sans verrou : un seul écrivain."""

    def __init__(self) -> None:
        self._value = 0

    def get(self) -> Optional[int]:
        value = self._value
        return value if value > 0 else None

    def set(self, value: int) -> None:
        self._value = int(value)


def calculate_dir_size(path: str | os.PathLike) -> int:
    """Somme des tailles des fichiers (liens symboliques non suivis, erreurs ignorées)."""
    total = 0
    for root, _dirs, files in os.walk(path, onerror=lambda e: logger.debug("walk error: %s", e)):
        for name in files:
            try:
                st = os.lstat(os.path.join(root, name))
            except OSError:
                continue
            if stat.S_ISREG(st.st_mode):
                total += st.st_size
    return total


def disk_and_inode_usage(path: str = "/") -> tuple[float, float]:
    """(% disque utilisé, % inodes utilisés) pour le point de montage `path`."""
    try:
        st = os.statvfs(path)
    except (OSError, AttributeError) as exc:
        logger.warning("statvfs(%s) failed: %s", path, exc)
        return 0.0, 0.0

    total = st.f_blocks * st.f_frsize
    available = st.f_bavail * st.f_frsize
    disk = ((total - available) / total * 100.0) if total > 0 else 0.0

    inode = 0.0
    if st.f_files > 0:
        inode = (st.f_files - st.f_ffree) / st.f_files * 100.0
    return disk, inode


class _Nvml:
    """Accès paresseux au premier GPU NVIDIA ; désactivé si NVML est indisponible."""

    def __init__(self) -> None:
        self._handle = None
        self._pynvml = None
        try:
            import pynvml  # type: ignore

            pynvml.nvmlInit()
            self._handle = pynvml.nvmlDeviceGetHandleByIndex(0)
            self._pynvml = pynvml
            logger.debug("NVIDIA NVML initialized successfully")
        except Exception as exc:
            logger.debug("NVIDIA NVML not available (%s)", exc)

    def utilization(self) -> Optional[float]:
        if self._handle is None:
            return None
        try:
            return float(self._pynvml.nvmlDeviceGetUtilizationRates(self._handle).gpu)
        except Exception as exc:
            logger.debug("GPU utilization read failed: %s", exc)
            return None


class MetricCollector:
    def __init__(self, docker_path: str, *, root_path: str = "/", enable_gpu: bool = True):
        self.docker_path = docker_path
        self.root_path = root_path
        self.docker_cache = DockerSizeCache()
        self._gpu = _Nvml() if enable_gpu else None
        # Premier appel à cpu_percent(None) = 0.0 : on amorce le compteur
        psutil.cpu_percent(interval=None)

    def collect_fast(self) -> Sample:
        disk, inode = disk_and_inode_usage(self.root_path)
        return Sample(
            cpu_usage=float(psutil.cpu_percent(interval=None)),
            ram_usage=float(psutil.virtual_memory().percent),
            disk_usage=disk,
            inode_usage=inode,
            docker_sz=self.docker_cache.get(),
            gpu_usage=self._gpu.utilization() if self._gpu else None,
        )

    def update_docker_size(self) -> Optional[int]:
        """Scan complet (bloquant : à lancer dans un thread)."""
        path = Path(self.docker_path)
        if not path.exists():
            logger.debug("Docker path %s does not exist", self.docker_path)
            return None
        size = calculate_dir_size(path)
        self.docker_cache.set(size)
        logger.debug("Updated Docker size: %d bytes", size)
        return size
