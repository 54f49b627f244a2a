from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional

from fastapi import Request
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from ..models.invoice import InvoiceStatus, LineItemDraft
from ..settings import settings
from .calculator import aggregate_by_status
from .formatting import format_currency

"""
Adapter between the invoicing service and a hosted LLM.

This is the only module that talks to the network and the only source of
non-determinism. Two operations, with deliberately different failure
policies:

  - `extract_line_items` fails loudly. Transport errors, refusals and
    anything that does not parse into the line-item schema raise
    `ExternalServiceError`, so the caller never inserts partial results.
  - `summarize_financials` fails quietly. Any error is logged and replaced
    by `INSIGHTS_UNAVAILABLE` so the dashboard keeps working.

There is no caching, no request deduplication and no retry (the OpenAI client
is built with `max_retries=0`). Guarding against concurrent duplicate calls
is the caller's job.
"""

logger = logging.getLogger(__name__)

INSIGHTS_EMPTY = "Unable to generate insights at this time."
INSIGHTS_UNAVAILABLE = "AI service temporarily unavailable."

LINE_ITEMS_SCHEMA = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "description": {"type": "string"},
                    "quantity": {"type": "number"},
                    "price": {"type": "number"},
                },
                "required": ["description", "quantity", "price"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}


class ExternalServiceError(RuntimeError):
    """The AI service could not produce a usable answer."""


class _ExtractedItems(BaseModel):
    items: List[LineItemDraft]


class AIGateway:
    def __init__(self, client: Any = None, model: str | None = None, api_key: str | None = None):
        """
        Args:
            client: an object shaped like `openai.AsyncOpenAI`. Built lazily
                from `api_key` when omitted.
            model: model id; defaults to settings.OPENAI_MODEL.
            api_key: defaults to settings.OPENAI_API_KEY.
        """
        self._client = client
        self.model = model or settings.OPENAI_MODEL
        self._api_key = api_key if api_key is not None else settings.OPENAI_API_KEY

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise ExternalServiceError("OPENAI_API_KEY is not set; cannot call OpenAI LLM")
            self._client = AsyncOpenAI(api_key=self._api_key, max_retries=0)
        return self._client

    async def extract_line_items(self, free_text: str) -> List[LineItemDraft]:
        """Turn a free-text work description into line-item drafts.

        The returned drafts carry no ids; callers assign fresh ones before
        inserting them into an invoice. An empty model reply yields an
        empty list. Everything else that isn't the expected JSON raises
        `ExternalServiceError`.
        """
        if not free_text.strip():
            raise ValueError("Empty text provided to extract_line_items")

        prompt = (
            "Extract invoice line items from the following description.\n"
            "If quantity is not specified, assume 1.\n"
            "If price is not specified, estimate a reasonable professional rate or set to 0.\n\n"
            f'Description: "{free_text}"'
        )

        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "line_items",
                        "strict": True,
                        "schema": LINE_ITEMS_SCHEMA,
                    },
                },
                temperature=0.0,
            )
        except ExternalServiceError:
            logger.exception("Line item extraction unavailable")
            raise
        except Exception as e:
            logger.exception("Line item extraction request failed")
            raise ExternalServiceError(f"LLM extraction failed: {e}") from e

        message = response.choices[0].message
        if getattr(message, "refusal", None):
            raise ExternalServiceError(f"LLM refused extraction: {message.refusal}")

        content = (message.content or "").strip()
        if not content:
            logger.warning("LLM returned no content for line item extraction")
            return []

        try:
            return _ExtractedItems.model_validate(json.loads(content)).items
        except json.JSONDecodeError as e:
            logger.error("Failed to parse JSON from LLM response: %s", e)
            raise ExternalServiceError("LLM response did not contain valid JSON") from e
        except ValidationError as e:
            logger.error("LLM response did not match line item schema: %s", e)
            raise ExternalServiceError("LLM response did not match line item schema") from e

    async def summarize_financials(self, summary_text: str) -> str:
        """Short prose insights for the dashboard. Never raises."""
        prompt = (
            "You are a financial analyst. Analyze this invoice data summary and give "
            "3 short, punchy, actionable insights for the business owner to improve "
            "cash flow or business health. Keep it under 100 words total.\n\n"
            f"Data: {summary_text}"
        )
        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
            text: Optional[str] = response.choices[0].message.content
        except Exception:
            logger.exception("Error analyzing financials")
            return INSIGHTS_UNAVAILABLE
        return text or INSIGHTS_EMPTY


def build_financial_summary(invoices: Iterable[Any]) -> str:
    """Compose the summary text the dashboard sends for analysis."""
    invoices = list(invoices)
    revenue = aggregate_by_status(invoices, InvoiceStatus.PAID)
    pending = aggregate_by_status(invoices, InvoiceStatus.PENDING)
    overdue = aggregate_by_status(invoices, InvoiceStatus.OVERDUE)
    return (
        f"Total Revenue: {format_currency(revenue)}. "
        f"Pending: {format_currency(pending)}. "
        f"Overdue: {format_currency(overdue)}. "
        f"Total Invoices: {len(invoices)}."
    )


def get_gateway(request: Request) -> AIGateway:
    return request.app.state.gateway
