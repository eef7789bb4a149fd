from __future__ import annotations
"""server/monitor_server/core/security.py
~~~~~~~~~~~~~~~~~~~~~~~~
Sécurité :
- jeton agent (header Authorization: Bearer <token>) pour /api/report
- clé admin optionnelle (header X-API-Key) pour les endpoints de gestion
"""
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from monitor_server.core.config import settings


async def bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Extrait le jeton bearer ; 401 si absent ou mal formé."""
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authorization header")
    return token.strip()


async def admin_key_auth(x_api_key: Optional[str] = Header(default=None, alias="X-API-Key")) -> None:
    """
    Si ADMIN_API_KEY est configurée, elle est exigée ; sinon les endpoints
    de gestion restent ouverts (déploiement derrière un reverse proxy).
    """
    expected = settings.ADMIN_API_KEY
    if not expected:
        return None
    if not x_api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")
    if not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")
    return None
