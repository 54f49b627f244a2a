import logging
from datetime import date
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from typing import List, Literal, Optional
from pydantic import BaseModel

from ..repos.clients import get_client, list_clients
from ..repos.invoices import (
    list_invoices as repo_list_invoices,
    get_invoice as repo_get_invoice,
    insert_invoice,
)
from ..models.invoice import Amount, Invoice, InvoiceDraft, InvoiceWithTotals, LineItem
from ..models.validation import ValidationIssue
from ..services.calculator import (
    draft_totals,
    invoice_subtotal,
    invoice_tax,
    invoice_total,
    is_past_due,
)
from ..services.formatting import format_currency
from ..services.line_items import (
    append_items,
    blank_line_item,
    ensure_ids,
    new_invoice_id,
    remove_item,
    update_item,
)
from ..services.validator import validate_invoice_draft
from ..store import SessionStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])

StatusQuery = Literal["All", "Draft", "Pending", "Paid", "Overdue"]


# Pydantic model for editor changes to one line item
class LineItemPatch(BaseModel):
    description: Optional[str] = None
    quantity: Optional[Amount] = None
    price: Optional[Amount] = None


class ItemOperation(BaseModel):
    op: Literal["add", "update", "remove"]
    item_id: Optional[str] = None   # required for update and remove
    changes: LineItemPatch = LineItemPatch()


class PreviewRequest(InvoiceDraft):
    # applied in order after ids are assigned
    operations: List[ItemOperation] = []


class InvoicePreview(BaseModel):
    items: List[LineItem]
    subtotal: float
    tax: float
    total: float
    formatted_total: str


class InvoiceCreated(BaseModel):
    ok: bool = True
    invoice: InvoiceWithTotals
    warnings: List[ValidationIssue]


def with_totals(inv: Invoice, today: Optional[date] = None) -> InvoiceWithTotals:
    total = invoice_total(inv)
    return InvoiceWithTotals(
        **inv.model_dump(),
        subtotal=invoice_subtotal(inv),
        tax=invoice_tax(inv),
        total=total,
        formatted_total=format_currency(total),
        past_due=is_past_due(inv, today),
    )


# List invoices endpoint
@router.get("")
def list_invoices(
    status: StatusQuery = Query("All", description="Status facet"),
    q: str = Query("", description="Client name or invoice id"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    store: SessionStore = Depends(get_store),
):
    items = repo_list_invoices(store, status=status, query=q, limit=limit, offset=offset)
    return {
        "items": [with_totals(inv) for inv in items],
        "total_loaded": len(store.invoices),
        "limit": limit,
        "offset": offset,
    }


# Editor defaults for a new invoice
@router.get("/new", response_model=InvoiceDraft)
def new_invoice_template(store: SessionStore = Depends(get_store)):
    first = list_clients(store, limit=1)
    return InvoiceDraft(client_id=first[0].id if first else "")


def apply_item_operations(items: List[LineItem], operations: List[ItemOperation]) -> List[LineItem]:
    """
    Replay the editor's add/update/remove actions on an item list.

    Returns a new list. Raises HTTPException 422 when an update or remove
    names an item that is not in the list.
    """
    for idx, operation in enumerate(operations):
        changes = operation.changes.model_dump(exclude_none=True)
        if operation.op == "add":
            item = blank_line_item(taken={i.id for i in items})
            items = append_items(items, [item.model_copy(update=changes)])
            continue
        if not any(i.id == operation.item_id for i in items):
            raise HTTPException(
                status_code=422,
                detail=[{
                    "field": f"operations[{idx}].item_id",
                    "code": "LINE_ITEM_NOT_FOUND",
                    "message": f"No line item with id {operation.item_id!r}.",
                }],
            )
        if operation.op == "update":
            items = update_item(items, operation.item_id, changes)
        else:
            items = remove_item(items, operation.item_id)
    return items


# Live totals for an unsaved draft, after applying any editor operations
@router.post("/preview", response_model=InvoicePreview)
def preview_invoice(draft: PreviewRequest = Body(...)):
    items = apply_item_operations(ensure_ids(draft.items), draft.operations)
    subtotal, tax, total = draft_totals(items, draft.tax_rate)
    return InvoicePreview(
        items=items,
        subtotal=subtotal,
        tax=tax,
        total=total,
        formatted_total=format_currency(total),
    )


# Get single invoice with lines
@router.get("/{invoice_id}", response_model=InvoiceWithTotals)
def get_invoice(invoice_id: str, store: SessionStore = Depends(get_store)):
    inv = repo_get_invoice(store, invoice_id)
    if not inv:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return with_totals(inv)


@router.post("", response_model=InvoiceCreated, status_code=201)
def create_invoice(draft: InvoiceDraft = Body(...), store: SessionStore = Depends(get_store)):
    report = validate_invoice_draft(draft, store.clients)
    if report.has_errors:
        raise HTTPException(status_code=422, detail=report.error_detail())

    norm = report.normalized_draft
    client = get_client(store, norm.client_id)
    inv = Invoice(
        id=new_invoice_id(),
        client_id=client.id,
        client_name=client.name,
        status=norm.status,
        invoice_date=norm.invoice_date,
        due_date=norm.due_date,
        items=ensure_ids(norm.items),
        notes=norm.notes,
        tax_rate=norm.tax_rate,
    )
    insert_invoice(store, inv)
    if report.has_warnings:
        logger.info(
            "Saved invoice %s with warnings: %s",
            inv.id, ", ".join(w.code for w in report.warnings),
        )
    return InvoiceCreated(invoice=with_totals(inv), warnings=report.warnings)
