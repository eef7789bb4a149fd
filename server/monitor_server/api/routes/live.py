from __future__ import annotations
"""server/monitor_server/api/routes/live.py
~~~~~~~~~~~~~~~~~~~~~~~~
WS /ws/live : flux temps réel des échantillons ingérés.

Aucun historique à la connexion ; un abonné lent perd des messages
(file bornée côté LiveBroadcaster) sans ralentir l'ingestion.
"""
import asyncio
import logging

from fastapi import APIRouter, WebSocket

from monitor_server.application.container import services_from_app
from monitor_server.application.services.live_service import Subscription

logger = logging.getLogger(__name__)

router = APIRouter()


async def _forward(websocket: WebSocket, sub: Subscription) -> None:
    while True:
        message = await sub.get()
        await websocket.send_text(message)


@router.websocket("/ws/live")
async def live(websocket: WebSocket) -> None:
    broadcaster = services_from_app(websocket.app).broadcaster
    await websocket.accept()
    sub = broadcaster.subscribe()
    forwarder = asyncio.create_task(_forward(websocket, sub))
    logger.info("[WebSocket] live subscriber connected (total=%d)", broadcaster.subscriber_count)
    try:
        # Le client n'envoie rien d'utile : on attend seulement sa déconnexion
        while True:
            msg = await websocket.receive()
            if msg["type"] == "websocket.disconnect":
                break
    finally:
        broadcaster.unsubscribe(sub)
        forwarder.cancel()
        try:
            await forwarder
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            # envoi échoué : le client est parti, la déconnexion suit
            logger.debug("[WebSocket] live forward stopped: %s", exc)
        logger.info("[WebSocket] live subscriber gone (total=%d)", broadcaster.subscriber_count)
