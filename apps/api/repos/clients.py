from typing import List, Optional

from ..models.client import Client
from ..store import SessionStore

# Lists clients in seed order with pagination.
def list_clients(store: SessionStore, limit: int = 100, offset: int = 0) -> List[Client]:
    return store.clients[offset:offset + limit]

# Fetches a single client by ID. Returns None if not found.
def get_client(store: SessionStore, client_id: str) -> Optional[Client]:
    for client in store.clients:
        if client.id == client_id:
            return client
    return None
