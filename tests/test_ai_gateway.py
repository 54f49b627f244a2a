import json

import pytest

from apps.api.models.invoice import InvoiceStatus
from apps.api.services.ai_gateway import (
    INSIGHTS_EMPTY,
    INSIGHTS_UNAVAILABLE,
    AIGateway,
    ExternalServiceError,
    build_financial_summary,
)
from conftest import FakeOpenAI


def items_reply(*items):
    return json.dumps({"items": [dict(description=d, quantity=q, price=p) for d, q, p in items]})


@pytest.mark.asyncio
async def test_extract_returns_drafts_without_ids():
    llm = FakeOpenAI(items_reply(("Website build", 1, 2500), ("Hosting", 12, 20)))
    gateway = AIGateway(client=llm, model="test-model")

    drafts = await gateway.extract_line_items("Built a website and hosted it for a year")

    assert [(d.description, d.quantity, d.price) for d in drafts] == [
        ("Website build", 1, 2500),
        ("Hosting", 12, 20),
    ]
    assert not any(hasattr(d, "id") for d in drafts)


@pytest.mark.asyncio
async def test_extract_sends_strict_schema_and_text():
    llm = FakeOpenAI(items_reply(("Consulting", 3, 150)))
    gateway = AIGateway(client=llm, model="test-model")

    await gateway.extract_line_items("3 hours consulting")

    call = llm.completions.calls[0]
    assert call["model"] == "test-model"
    assert "3 hours consulting" in call["messages"][0]["content"]
    schema = call["response_format"]["json_schema"]
    assert schema["strict"] is True
    line = schema["schema"]["properties"]["items"]["items"]
    assert set(line["required"]) == {"description", "quantity", "price"}


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [
    "not json at all",
    '{"items": [{"description": "x", "quantity": 1',
    '{"items": [{"description": "x", "quantity": "lots", "price": 5}]}',
    '{"items": [{"quantity": 1, "price": 5}]}',
    '[{"description": "x", "quantity": 1, "price": 5}]',
])
async def test_extract_fails_on_malformed_reply(reply):
    gateway = AIGateway(client=FakeOpenAI(reply), model="test-model")
    with pytest.raises(ExternalServiceError):
        await gateway.extract_line_items("some work")


@pytest.mark.asyncio
async def test_extract_fails_on_transport_error():
    gateway = AIGateway(client=FakeOpenAI(ConnectionError("boom")), model="test-model")
    with pytest.raises(ExternalServiceError):
        await gateway.extract_line_items("some work")


@pytest.mark.asyncio
async def test_extract_without_api_key_fails():
    gateway = AIGateway(api_key="")
    with pytest.raises(ExternalServiceError):
        await gateway.extract_line_items("some work")


@pytest.mark.asyncio
async def test_extract_empty_reply_is_empty_list():
    gateway = AIGateway(client=FakeOpenAI(""), model="test-model")
    assert await gateway.extract_line_items("nothing billable") == []


@pytest.mark.asyncio
async def test_extract_rejects_blank_text():
    llm = FakeOpenAI(items_reply(("x", 1, 1)))
    gateway = AIGateway(client=llm, model="test-model")
    with pytest.raises(ValueError):
        await gateway.extract_line_items("   ")
    assert llm.completions.calls == []


@pytest.mark.asyncio
async def test_summarize_returns_text_verbatim():
    gateway = AIGateway(client=FakeOpenAI("1. Chase overdue.\n2. Raise rates."), model="test-model")
    assert await gateway.summarize_financials("Total Revenue: $10.00.") == "1. Chase overdue.\n2. Raise rates."


@pytest.mark.asyncio
async def test_summarize_falls_back_on_failure():
    gateway = AIGateway(client=FakeOpenAI(TimeoutError("slow")), model="test-model")
    assert await gateway.summarize_financials("anything") == INSIGHTS_UNAVAILABLE


@pytest.mark.asyncio
async def test_summarize_without_api_key_falls_back():
    gateway = AIGateway(api_key="")
    assert await gateway.summarize_financials("anything") == INSIGHTS_UNAVAILABLE


@pytest.mark.asyncio
async def test_summarize_empty_reply():
    gateway = AIGateway(client=FakeOpenAI(None), model="test-model")
    assert await gateway.summarize_financials("anything") == INSIGHTS_EMPTY


def test_build_financial_summary(invoice_factory):
    invoices = [
        invoice_factory(id="a", status=InvoiceStatus.PAID, items=((44, 100),)),
        invoice_factory(id="b", status=InvoiceStatus.PENDING, items=((1, 1000),)),
        invoice_factory(id="c", status=InvoiceStatus.OVERDUE, items=((1, 1500),)),
    ]
    summary = build_financial_summary(invoices)
    assert "Total Revenue: $4,400.00" in summary
    assert "Pending: $1,000.00" in summary
    assert "Overdue: $1,500.00" in summary
    assert "Total Invoices: 3" in summary
