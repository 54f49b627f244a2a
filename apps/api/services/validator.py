from typing import Iterable, List
from ..models.client import Client
from ..models.invoice import InvoiceDraft
from ..models.validation import ValidationIssue, ValidationReport


def validate_invoice_draft(draft: InvoiceDraft, clients: Iterable[Client]) -> ValidationReport:
    """
    Perform business-level validation on an InvoiceDraft that has already
    passed schema validation.

    This checks:
    - The draft references a known client (hard error; save is aborted)
    - Per-line sanity: description present, quantity and price not negative
    - Dates: due date not before the issue date

    Only the client check blocks a save. Negative amounts are accepted and
    produce negative totals; they are reported as warnings so the caller can
    surface them. The returned ValidationReport includes a normalized_draft
    with descriptions and notes trimmed.
    """
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    # Work on a normalized copy so we can safely adjust values without mutating the input
    norm = draft.model_copy(deep=True)

    # 1) Client must exist
    known_ids = {c.id for c in clients}
    if not norm.client_id or norm.client_id not in known_ids:
        errors.append(
            ValidationIssue(
                field="client_id",
                code="CLIENT_NOT_FOUND",
                message="Please select a client",
            )
        )

    # 2) Line items
    normalized_items = []
    for idx, item in enumerate(norm.items):
        description = item.description.strip()
        if not description:
            warnings.append(
                ValidationIssue(
                    field=f"items[{idx}].description",
                    code="EMPTY_DESCRIPTION",
                    message="Line item has no description.",
                )
            )
        if item.quantity < 0:
            warnings.append(
                ValidationIssue(
                    field=f"items[{idx}].quantity",
                    code="NEGATIVE_QUANTITY",
                    message=f"quantity is negative ({item.quantity}); the line total will be negative.",
                )
            )
        if item.price < 0:
            warnings.append(
                ValidationIssue(
                    field=f"items[{idx}].price",
                    code="NEGATIVE_PRICE",
                    message=f"price is negative ({item.price:.2f}); the line total will be negative.",
                )
            )
        normalized_items.append(item.model_copy(update={"description": description}))

    # 3) Dates
    if norm.due_date < norm.invoice_date:
        warnings.append(
            ValidationIssue(
                field="due_date",
                code="DUE_BEFORE_ISSUE",
                message=(
                    f"due_date {norm.due_date.isoformat()} is before "
                    f"invoice_date {norm.invoice_date.isoformat()}."
                ),
            )
        )

    notes = norm.notes.strip() if norm.notes else None
    norm = norm.model_copy(update={"items": normalized_items, "notes": notes or None})

    return ValidationReport(
        errors=errors,
        warnings=warnings,
        normalized_draft=norm,
    )
