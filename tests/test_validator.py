from datetime import date

from apps.api.models.invoice import InvoiceDraft, LineItemIn
from apps.api.services.validator import validate_invoice_draft


def codes(issues):
    return [i.code for i in issues]


def test_unknown_client_is_an_error(store):
    report = validate_invoice_draft(InvoiceDraft(client_id="nope"), store.clients)
    assert report.has_errors
    assert codes(report.errors) == ["CLIENT_NOT_FOUND"]
    assert report.errors[0].message == "Please select a client"


def test_missing_client_is_an_error(store):
    report = validate_invoice_draft(InvoiceDraft(), store.clients)
    assert codes(report.errors) == ["CLIENT_NOT_FOUND"]


def test_clean_draft_passes(store):
    draft = InvoiceDraft(
        client_id="1",
        items=[LineItemIn(description="Design", quantity=2, price=50)],
    )
    report = validate_invoice_draft(draft, store.clients)
    assert not report.has_errors
    assert not report.has_warnings


def test_negative_amounts_warn_but_do_not_block(store):
    draft = InvoiceDraft(
        client_id="1",
        items=[
            LineItemIn(description="Refund", quantity=-1, price=20),
            LineItemIn(description="Credit", quantity=1, price=-5),
        ],
    )
    report = validate_invoice_draft(draft, store.clients)
    assert not report.has_errors
    assert codes(report.warnings) == ["NEGATIVE_QUANTITY", "NEGATIVE_PRICE"]
    assert report.warnings[0].field == "items[0].quantity"
    assert report.warnings[1].field == "items[1].price"


def test_due_before_issue_and_blank_description_warn(store):
    draft = InvoiceDraft(
        client_id="2",
        invoice_date=date(2024, 5, 10),
        due_date=date(2024, 5, 1),
        items=[LineItemIn(description="   ", quantity=1, price=1)],
    )
    report = validate_invoice_draft(draft, store.clients)
    assert codes(report.warnings) == ["EMPTY_DESCRIPTION", "DUE_BEFORE_ISSUE"]


def test_normalizes_without_mutating_input(store):
    draft = InvoiceDraft(
        client_id="1",
        notes="  thanks  ",
        items=[LineItemIn(description="  Design  ", quantity=1, price=1)],
    )
    report = validate_invoice_draft(draft, store.clients)
    assert report.normalized_draft.items[0].description == "Design"
    assert report.normalized_draft.notes == "thanks"
    assert draft.items[0].description == "  Design  "
    assert draft.notes == "  thanks  "


def test_error_detail_lists_only_errors(store):
    draft = InvoiceDraft(items=[LineItemIn(description="Credit", quantity=1, price=-5)])
    report = validate_invoice_draft(draft, store.clients)
    assert report.has_warnings
    detail = report.error_detail()
    assert [d["code"] for d in detail] == ["CLIENT_NOT_FOUND"]
    assert set(detail[0]) == {"field", "code", "message"}
