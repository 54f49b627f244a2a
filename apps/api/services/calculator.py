from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Any, Iterable, List, Tuple

from ..models.dashboard import DashboardStats, MonthlyRevenue
from ..models.invoice import InvoiceStatus

"""
Derived money figures for invoices.

Every view that shows an amount goes through these helpers so the list,
the editor and the dashboard can't drift apart.

Two totals exist on purpose:
  - `invoice_total` is post-tax and is what a single invoice displays.
  - `aggregate_by_status` sums *pre-tax* subtotals and feeds the dashboard
    figures (revenue, pending, overdue).

Nothing here rounds or validates. A non-finite quantity or price yields NaN
and negative amounts give negative totals; input checking belongs to the
request models and `services/validator.py`.
"""


def line_item_total(item: Any) -> float:
    return item.quantity * item.price


def items_subtotal(items: Iterable[Any]) -> float:
    return sum((line_item_total(item) for item in items), 0.0)


def invoice_subtotal(invoice: Any) -> float:
    return items_subtotal(invoice.items)


def invoice_tax(invoice: Any) -> float:
    return invoice_subtotal(invoice) * invoice.tax_rate / 100


def invoice_total(invoice: Any) -> float:
    return invoice_subtotal(invoice) + invoice_tax(invoice)


def draft_totals(items: Iterable[Any], tax_rate: float) -> Tuple[float, float, float]:
    """Live (subtotal, tax, total) for an unsaved item list."""
    subtotal = items_subtotal(items)
    tax = subtotal * tax_rate / 100
    return subtotal, tax, subtotal + tax


def aggregate_by_status(invoices: Iterable[Any], status: InvoiceStatus) -> float:
    """
    Sum the pre-tax subtotal of every invoice with the given status.

    This is additive: aggregating A + B equals aggregating A plus
    aggregating B for disjoint collections.
    """
    return sum(
        (invoice_subtotal(inv) for inv in invoices if inv.status == status),
        0.0,
    )


def dashboard_stats(invoices: Iterable[Any]) -> DashboardStats:
    invoices = list(invoices)
    return DashboardStats(
        total_revenue=aggregate_by_status(invoices, InvoiceStatus.PAID),
        pending_amount=aggregate_by_status(invoices, InvoiceStatus.PENDING),
        overdue_amount=aggregate_by_status(invoices, InvoiceStatus.OVERDUE),
        paid_invoices_count=sum(1 for inv in invoices if inv.status == InvoiceStatus.PAID),
    )


def revenue_by_month(
    invoices: Iterable[Any],
    status: InvoiceStatus = InvoiceStatus.PAID,
) -> List[MonthlyRevenue]:
    """
    Group pre-tax subtotals by the month of `invoice_date`.

    Returns one entry per month that has at least one matching invoice,
    oldest month first. Same tax policy as `aggregate_by_status`.
    """
    buckets: dict[str, float] = defaultdict(float)
    for inv in invoices:
        if inv.status != status:
            continue
        issued: date = inv.invoice_date
        buckets[issued.strftime("%Y-%m")] += invoice_subtotal(inv)
    return [MonthlyRevenue(month=m, amount=buckets[m]) for m in sorted(buckets)]


def is_past_due(invoice: Any, today: date | None = None) -> bool:
    # Read-only hint for the list view; status is never changed from here.
    today = today or date.today()
    return invoice.status == InvoiceStatus.PENDING and invoice.due_date < today
