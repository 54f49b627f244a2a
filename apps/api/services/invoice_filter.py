from typing import Iterable, List, Union

from ..models.invoice import Invoice, InvoiceStatus

ALL = "All"

StatusFacet = Union[InvoiceStatus, str]


def _matches_status(inv: Invoice, status_facet: StatusFacet) -> bool:
    return status_facet == ALL or inv.status == status_facet


def _matches_query(inv: Invoice, query: str) -> bool:
    # client name is case-insensitive; invoice id is matched as typed
    return query.lower() in inv.client_name.lower() or query in inv.id


def filter_invoices(invoices: Iterable[Invoice], status_facet: StatusFacet = ALL, query: str = "") -> List[Invoice]:
    """
    Select invoices by status facet and free-text query.

    `status_facet` is "All" or one of the InvoiceStatus values. Both the
    status check and the query check must pass. Input order is kept and an
    empty list is a normal result.
    """
    query = query or ""
    return [
        inv for inv in invoices
        if _matches_status(inv, status_facet) and _matches_query(inv, query)
    ]
