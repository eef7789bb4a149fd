# agent/tests/test_agent_runner.py
from __future__ import annotations

import asyncio

import httpx
import pytest

from monitor_agent.buffer import SampleBuffer
from monitor_agent.core.config import AgentSettings
from monitor_agent.reporter import Reporter
from monitor_agent.runner import AgentRunner

pytestmark = pytest.mark.unit


class _FakeCollector:
    def __init__(self, make_sample):
        self._make = make_sample
        self.n = 0
        self.scans = 0

    def collect_fast(self):
        self.n += 1
        return self._make(self.n)

    def update_docker_size(self):
        self.scans += 1
        return 1024


@pytest.fixture
def agent_settings(monkeypatch):
    monkeypatch.setenv("CLIENT_TOKEN", "tok")
    monkeypatch.setenv("SERVER_URL", "http://collector.test/")
    monkeypatch.setenv("HOSTNAME", "web-01")
    return AgentSettings(_env_file=None)


def test_settings_defaults_and_report_url(agent_settings):
    assert agent_settings.report_url == "http://collector.test/api/report"
    assert agent_settings.BUFFER_CAPACITY == 120
    assert agent_settings.REPORT_INTERVAL == 10.0
    assert agent_settings.SLOW_INTERVAL == 300.0


def test_settings_require_token(monkeypatch):
    monkeypatch.delenv("CLIENT_TOKEN", raising=False)
    with pytest.raises(Exception):
        AgentSettings(_env_file=None)


def test_ticks_collect_scan_and_report(agent_settings, make_sample):
    statuses = iter([503, 200])
    posted = []

    def handler(request):
        posted.append(request)
        return httpx.Response(next(statuses))

    buf = SampleBuffer(agent_settings.BUFFER_CAPACITY)
    reporter = Reporter(buf, url=agent_settings.report_url, token="tok", hostname="web-01",
                        transport=httpx.MockTransport(handler))
    collector = _FakeCollector(make_sample)
    runner = AgentRunner(agent_settings, collector=collector, reporter=reporter)

    async def scenario():
        runner.fast_tick()
        runner.fast_tick()
        await runner.slow_tick()
        await runner.report_tick()  # 503 : erreur journalisée, batch conservé
        assert len(runner.buffer) == 2
        runner.fast_tick()
        await runner.report_tick()
        await reporter.aclose()

    asyncio.run(scenario())

    assert collector.scans == 1
    assert len(posted) == 2
    assert len(runner.buffer) == 0
