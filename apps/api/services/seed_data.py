import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.client import Client
from ..models.invoice import Invoice, InvoiceStatus, LineItem
from ..store import SessionStore

logger = logging.getLogger(__name__)


MOCK_CLIENTS: List[Client] = [
    Client(id="1", name="TechStart Inc", email="billing@techstart.io"),
    Client(id="2", name="Global Logistics", email="accounts@globallog.com"),
    Client(id="3", name="Creative Studio", email="hello@creative.studio"),
]

MOCK_INVOICES: List[Invoice] = [
    Invoice(
        id="inv_123456",
        client_id="1",
        client_name="TechStart Inc",
        status=InvoiceStatus.PAID,
        invoice_date=date(2023, 10, 15),
        due_date=date(2023, 10, 30),
        tax_rate=10,
        items=[
            LineItem(id="1", description="Frontend Development", quantity=40, price=100),
            LineItem(id="2", description="UI Design", quantity=10, price=120),
        ],
    ),
    Invoice(
        id="inv_789012",
        client_id="2",
        client_name="Global Logistics",
        status=InvoiceStatus.PENDING,
        invoice_date=date(2023, 10, 28),
        due_date=date(2023, 11, 12),
        tax_rate=10,
        items=[
            LineItem(id="3", description="Consultation", quantity=5, price=200),
        ],
    ),
    Invoice(
        id="inv_345678",
        client_id="3",
        client_name="Creative Studio",
        status=InvoiceStatus.OVERDUE,
        invoice_date=date(2023, 9, 1),
        due_date=date(2023, 9, 15),
        tax_rate=10,
        items=[
            LineItem(id="4", description="Logo Redesign", quantity=1, price=1500),
        ],
    ),
]


class SeedBundle(BaseModel):
    """Shape of a seed file, as written by scripts/make_fake_invoices.py."""
    clients: List[Client] = Field(default_factory=list)
    invoices: List[Invoice] = Field(default_factory=list)


def load_seed_file(path: str) -> SeedBundle:
    """
    Read and validate a JSON seed file.

    Raises FileNotFoundError if the path is missing and pydantic's
    ValidationError if the content does not match SeedBundle.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return SeedBundle.model_validate(raw)


def build_session_store(seed_file: Optional[str] = None) -> SessionStore:
    if seed_file:
        bundle = load_seed_file(seed_file)
        logger.info(
            "Loaded %d clients and %d invoices from %s",
            len(bundle.clients), len(bundle.invoices), seed_file,
        )
        return SessionStore(clients=bundle.clients, invoices=bundle.invoices)
    # deep copies so one store can't leak edits into another
    return SessionStore(
        clients=[c.model_copy(deep=True) for c in MOCK_CLIENTS],
        invoices=[inv.model_copy(deep=True) for inv in MOCK_INVOICES],
    )
