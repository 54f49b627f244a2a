from fastapi import APIRouter, Depends, HTTPException

from ..models.dashboard import DashboardView, InsightResponse
from ..services.ai_gateway import AIGateway, build_financial_summary, get_gateway
from ..services.calculator import dashboard_stats, revenue_by_month
from ..services.formatting import format_currency
from ..store import SessionStore, get_store

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


async def run_insight_request(store: SessionStore, gateway: AIGateway) -> InsightResponse:
    """
    Ask the gateway for insights on the current figures and write the answer
    into the store, unless a newer request or a data change superseded it
    while we were waiting.
    """
    generation = store.begin_insight_request()
    try:
        summary = build_financial_summary(store.invoices)
        text = await gateway.summarize_financials(summary)
        applied = store.complete_insight_request(generation, text)
    finally:
        store.abandon_insight_request(generation)
    return InsightResponse(insights=text, generation=generation, applied=applied)


@router.get("", response_model=DashboardView)
async def get_dashboard(
    store: SessionStore = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    """Stats, monthly revenue and the current insight text.

    The first load in a session fetches insights once if invoices exist.
    """
    if store.invoices and store.insights is None and not store.insight_in_flight:
        await run_insight_request(store, gateway)

    stats = dashboard_stats(store.invoices)
    return DashboardView(
        stats=stats,
        formatted={
            "total_revenue": format_currency(stats.total_revenue),
            "pending_amount": format_currency(stats.pending_amount),
            "overdue_amount": format_currency(stats.overdue_amount),
        },
        revenue_trend=revenue_by_month(store.invoices),
        insights=store.insights,
        insights_loading=store.insight_in_flight,
        invoice_count=len(store.invoices),
    )


@router.post("/insights", response_model=InsightResponse)
async def refresh_insights(
    store: SessionStore = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    if store.insight_in_flight:
        raise HTTPException(status_code=409, detail="Insight request already in progress")
    return await run_insight_request(store, gateway)
