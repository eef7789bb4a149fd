from __future__ import annotations
"""agent/monitor_agent/runner.py
~~~~~~~~~~~~~~~~~~~~~~~~
Boucles de l'agent (asyncio) :

- fast   : relevé vitals toutes les FAST_INTERVAL s -> buffer
- slow   : scan du répertoire Docker (thread) toutes les SLOW_INTERVAL s -> cache
- report : livraison du buffer toutes les REPORT_INTERVAL s

Chaque boucle journalise ses erreurs et continue.
"""
import asyncio
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from monitor_agent import __version__
from monitor_agent.buffer import SampleBuffer
from monitor_agent.collectors.metrics import MetricCollector
from monitor_agent.core.config import AgentSettings
from monitor_agent.core.logging import setup_logging
from monitor_agent.errors import DeliveryError
from monitor_agent.reporter import Reporter

logger = logging.getLogger(__name__)


class AgentRunner:
    def __init__(
        self,
        settings: AgentSettings,
        *,
        collector: Optional[MetricCollector] = None,
        reporter: Optional[Reporter] = None,
    ):
        self.settings = settings
        self.buffer = reporter.buffer if reporter else SampleBuffer(settings.BUFFER_CAPACITY)
        self.collector = collector or MetricCollector(settings.DOCKER_PATH)
        self.reporter = reporter or Reporter(
            self.buffer,
            url=settings.report_url,
            token=settings.CLIENT_TOKEN,
            hostname=settings.HOSTNAME,
            timeout=settings.REQUEST_TIMEOUT,
        )

    # ------------------------------------------------------------------
    # Un tick de chaque boucle (testables séparément)
    # ------------------------------------------------------------------
    def fast_tick(self) -> None:
        self.buffer.push(self.collector.collect_fast())

    async def slow_tick(self) -> None:
        await asyncio.to_thread(self.collector.update_docker_size)

    async def report_tick(self) -> None:
        try:
            await self.reporter.send_batch()
        except DeliveryError as exc:
            logger.error("Failed to send batch: %s", exc)

    # ------------------------------------------------------------------
    # Boucles
    # ------------------------------------------------------------------
    async def fast_loop(self) -> None:
        while True:
            await asyncio.sleep(self.settings.FAST_INTERVAL)
            try:
                self.fast_tick()
            except Exception:
                logger.exception("Metric collection failed")

    async def slow_loop(self) -> None:
        # Scan initial immédiat, puis périodique
        while True:
            try:
                await self.slow_tick()
            except Exception:
                logger.exception("Docker size scan failed")
            await asyncio.sleep(self.settings.SLOW_INTERVAL)

    async def report_loop(self) -> None:
        while True:
            await asyncio.sleep(self.settings.REPORT_INTERVAL)
            try:
                await self.report_tick()
            except Exception:
                logger.exception("Unexpected error in report loop")

    async def run(self) -> None:
        logger.info("Starting status-monitor agent v%s", __version__)
        logger.info("Hostname: %s", self.settings.HOSTNAME)
        logger.info("Server: %s", self.settings.SERVER_URL)
        logger.info("Docker path: %s", self.settings.DOCKER_PATH)
        try:
            await asyncio.gather(self.fast_loop(), self.slow_loop(), self.report_loop())
        finally:
            await self.reporter.aclose()


def main() -> int:
    try:
        settings = AgentSettings()
    except ValidationError as exc:
        setup_logging()
        logger.error("Invalid agent configuration (CLIENT_TOKEN is required): %s", exc)
        return 1

    setup_logging(settings.LOG_LEVEL)
    try:
        asyncio.run(AgentRunner(settings).run())
    except KeyboardInterrupt:
        logger.info("Agent stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
