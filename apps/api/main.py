import logging

from fastapi import FastAPI
from .settings import settings
from .routes.clients import router as clients_router
from .routes.invoices import router as invoices_router
from .routes.extract import router as extract_router
from .routes.dashboard import router as dashboard_router
from .services.ai_gateway import AIGateway
from .services.seed_data import build_session_store

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="InvoiceDesk API",
    version="0.1.0",
    description="Clients, invoices, line item extraction and dashboard figures."
)

# Session state lives for the lifetime of the process.
app.state.store = build_session_store(settings.SEED_FILE)
app.state.gateway = AIGateway()

app.include_router(clients_router)
app.include_router(invoices_router)
app.include_router(extract_router)
app.include_router(dashboard_router)


@app.get("/health")
def health():
    return {"ok": True, "ai_configured": bool(settings.OPENAI_API_KEY)}
