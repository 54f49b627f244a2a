from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from apps.api.main import app
from apps.api.models.invoice import Invoice, InvoiceStatus, LineItem
from apps.api.services.ai_gateway import AIGateway, get_gateway
from apps.api.services.seed_data import build_session_store
from apps.api.store import get_store


class FakeCompletions:
    """Stands in for `AsyncOpenAI().chat.completions`.

    Each reply is either a string (returned as message content) or an
    exception (raised). The last reply repeats once the list runs out.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply, refusal=None)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, *replies):
        self.completions = FakeCompletions(replies)
        self.chat = SimpleNamespace(completions=self.completions)


def make_invoice(id="inv_test", status=InvoiceStatus.PENDING, items=((1, 100),),
                 tax_rate=10, client_name="TechStart Inc", invoice_date=date(2024, 1, 10),
                 due_date=date(2024, 1, 24)):
    return Invoice(
        id=id,
        client_id="1",
        client_name=client_name,
        status=status,
        invoice_date=invoice_date,
        due_date=due_date,
        tax_rate=tax_rate,
        items=[
            LineItem(id=str(i), description=f"item {i}", quantity=q, price=p)
            for i, (q, p) in enumerate(items)
        ],
    )


@pytest.fixture
def store():
    return build_session_store()


@pytest.fixture
def fake_llm():
    return FakeOpenAI("Collect overdue balances first.")


@pytest.fixture
def gateway(fake_llm):
    return AIGateway(client=fake_llm, model="test-model")


@pytest.fixture
def client(store, gateway):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def invoice_factory():
    return make_invoice
