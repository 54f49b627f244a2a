from typing import List, Optional
from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    total_revenue: float = 0.0      # pre-tax, Paid invoices
    pending_amount: float = 0.0     # pre-tax, Pending invoices
    overdue_amount: float = 0.0     # pre-tax, Overdue invoices
    paid_invoices_count: int = 0


class MonthlyRevenue(BaseModel):
    month: str      # YYYY-MM
    amount: float


class DashboardView(BaseModel):
    stats: DashboardStats
    formatted: dict = Field(default_factory=dict)
    revenue_trend: List[MonthlyRevenue] = Field(default_factory=list)
    insights: Optional[str] = None
    insights_loading: bool = False
    invoice_count: int = 0


class InsightResponse(BaseModel):
    insights: str
    generation: int
    applied: bool   # False when a newer request superseded this one
