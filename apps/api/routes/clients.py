from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from ..models.client import Client
from ..repos.clients import list_clients as repo_list_clients, get_client
from ..store import SessionStore, get_store

router = APIRouter(prefix="/clients", tags=["clients"])

# List all clients
@router.get("", response_model=List[Client])
def list_clients(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    store: SessionStore = Depends(get_store),
):
    return repo_list_clients(store, limit=limit, offset=offset)

# Get single client
@router.get("/{client_id}", response_model=Client)
def get_client_by_id(client_id: str, store: SessionStore = Depends(get_store)):
    client = get_client(store, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client
