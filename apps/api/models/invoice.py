from pydantic import BaseModel, Field
from typing import List, Optional, Annotated
from datetime import date, timedelta
from enum import Enum

from ..settings import settings

# JSON can't carry NaN/Infinity; reject them at the boundary so the
# calculator only ever sees finite numbers from requests.
Amount = Annotated[float, Field(allow_inf_nan=False)]


class InvoiceStatus(str, Enum):
    DRAFT = "Draft"
    PENDING = "Pending"
    PAID = "Paid"
    OVERDUE = "Overdue"


class LineItemDraft(BaseModel):
    """A line item without an identifier, as returned by AI extraction."""
    description: str
    quantity: Amount = 1
    price: Amount = 0


class LineItem(LineItemDraft):
    id: str


class LineItemIn(LineItemDraft):
    # ids are optional on input; missing ones are assigned on save
    id: Optional[str] = None


class Invoice(BaseModel):
    id: str
    client_id: str
    client_name: str  # cached at creation time, never re-synced
    status: InvoiceStatus
    invoice_date: date
    due_date: date
    items: List[LineItem] = Field(default_factory=list)
    notes: Optional[str] = None
    tax_rate: Amount = 10


def _default_due_date() -> date:
    return date.today() + timedelta(days=settings.DEFAULT_DUE_DAYS)


class InvoiceDraft(BaseModel):
    """Payload for creating an invoice from the editor."""
    client_id: str = ""
    status: InvoiceStatus = InvoiceStatus.DRAFT
    invoice_date: date = Field(default_factory=date.today)
    due_date: date = Field(default_factory=_default_due_date)
    items: List[LineItemIn] = Field(default_factory=list)
    notes: Optional[str] = None
    tax_rate: Amount = Field(default_factory=lambda: settings.DEFAULT_TAX_RATE)


class InvoiceWithTotals(Invoice):
    subtotal: float
    tax: float
    total: float
    formatted_total: str
    past_due: bool = False
