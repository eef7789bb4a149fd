from __future__ import annotations
"""server/monitor_server/api/routes/router.py
~~~~~~~~~~~~~~~~~~~~~~~~
Router principal /api.
"""
from fastapi import APIRouter
from monitor_server.api.routes import alerts, clients, metrics, report, settings

api_router = APIRouter()
api_router.include_router(report.router, tags=["ingest"])
api_router.include_router(clients.router, tags=["clients"])
api_router.include_router(metrics.router, tags=["metrics"])
api_router.include_router(alerts.router, tags=["alerts"])
api_router.include_router(settings.router, tags=["settings"])
