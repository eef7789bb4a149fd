from __future__ import annotations
"""server/monitor_server/api/routes/clients.py
~~~~~~~~~~~~~~~~~~~~~~~~
CRUD clients (enregistrement d'un agent => jeton).
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from monitor_server.api.schemas.client import ClientOut, CreateClientRequest, CreateClientResponse
from monitor_server.core.security import admin_key_auth
from monitor_server.domain.errors import NotFound
from monitor_server.infrastructure.persistence.database.session import get_db
from monitor_server.infrastructure.persistence.repositories.client_repository import ClientRepository

router = APIRouter(prefix="/clients", dependencies=[Depends(admin_key_auth)])


@router.get("", response_model=list[ClientOut])
async def list_clients(db: Session = Depends(get_db)):
    return ClientRepository(db).list_all()


@router.post("", status_code=201, response_model=CreateClientResponse)
async def create_client(payload: CreateClientRequest, db: Session = Depends(get_db)):
    client = ClientRepository(db).create(payload.hostname)
    db.commit()
    return CreateClientResponse(id=client.id, hostname=client.hostname, token=client.token)


@router.get("/{client_id}", response_model=ClientOut)
async def get_client(client_id: str, db: Session = Depends(get_db)):
    try:
        return ClientRepository(db).require(client_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Client not found")


@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: str, db: Session = Depends(get_db)) -> Response:
    deleted = ClientRepository(db).delete(client_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Client not found")
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
