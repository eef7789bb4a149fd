from __future__ import annotations
"""server/monitor_server/main.py
~~~~~~~~~~~~~~~~~~~~~~~~
Point d'entrée FastAPI.
"""
import logging
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from monitor_server import __version__
from monitor_server.api.routes import health, live
from monitor_server.api.routes.router import api_router
from monitor_server.application.container import build_services
from monitor_server.core.config import settings
from monitor_server.core.logging import setup_logging
from monitor_server.infrastructure.persistence.database.session import init_db

logger = logging.getLogger(__name__)

app = FastAPI(title="Status Monitor", version=__version__)

allow_origins: List[str] = []
if origins := getattr(settings, "CORS_ALLOW_ORIGINS", None):
    allow_origins = [o.strip() for o in origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup() -> None:
    setup_logging(settings.LOG_LEVEL)
    init_db()
    # Files asyncio liées à la boucle qui sert l'app
    app.state.services = build_services()
    app.state.services.dispatcher.start()
    logger.info("Status monitor server started")


@app.on_event("shutdown")
async def shutdown() -> None:
    services = getattr(app.state, "services", None)
    if services is not None:
        await services.dispatcher.stop()


app.include_router(api_router, prefix="/api")
app.include_router(health.router, tags=["health"])
app.include_router(live.router, tags=["live"])


def run() -> None:
    import uvicorn

    uvicorn.run("monitor_server.main:app", host=settings.HOST, port=settings.PORT)
