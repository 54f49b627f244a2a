from typing import List, Optional

from ..models.invoice import Invoice
from ..services.invoice_filter import ALL, StatusFacet, filter_invoices
from ..store import SessionStore

# Lists invoices newest-first (insertion order), narrowed by status facet and query.
# LIMIT = page size; OFFSET = start index
def list_invoices(
    store: SessionStore,
    status: StatusFacet = ALL,
    query: str = "",
    limit: int = 50,
    offset: int = 0,
) -> List[Invoice]:
    matched = filter_invoices(store.invoices, status, query)
    return matched[offset:offset + limit]


# Fetches a single invoice with its line items. Returns None if not found.
def get_invoice(store: SessionStore, invoice_id: str) -> Optional[Invoice]:
    for inv in store.invoices:
        if inv.id == invoice_id:
            return inv
    return None


# Prepends a newly saved invoice; invoices are never updated or deleted.
# Figures changed, so any outstanding insight request is now stale.
def insert_invoice(store: SessionStore, invoice: Invoice) -> Invoice:
    if get_invoice(store, invoice.id) is not None:
        raise ValueError(f"Invoice {invoice.id} already exists")
    store.invoices.insert(0, invoice)
    store.invalidate_insights()
    return invoice
