import logging
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field

from ..models.invoice import LineItem, LineItemIn
from ..services.ai_gateway import AIGateway, ExternalServiceError, get_gateway
from ..services.calculator import items_subtotal
from ..services.line_items import append_items, assign_ids, ensure_ids

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/extract", tags=["extraction"])


class ExtractRequest(BaseModel):
    text: str
    # items already in the editor; extracted items are appended after them
    items: List[LineItemIn] = Field(default_factory=list)


class ExtractResponse(BaseModel):
    ok: bool = True
    items: List[LineItem]
    added: int
    subtotal: float


@router.post("/line-items", response_model=ExtractResponse)
async def extract_line_items(
    payload: ExtractRequest = Body(...),
    gateway: AIGateway = Depends(get_gateway),
):
    """
    Turn a free-text work description into line items using the AI gateway
    and append them to the caller's current items.

    All-or-nothing: if the gateway fails, the response is a 502 and the
    caller keeps the items it sent. Extracted items always get fresh ids.
    """
    if not payload.text.strip():
        raise HTTPException(400, "Empty text provided for extraction")

    existing = ensure_ids(payload.items)
    try:
        drafts = await gateway.extract_line_items(payload.text)
    except ExternalServiceError as e:
        logger.warning("Line item extraction failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to generate items. Please try again.")

    new_items = assign_ids(drafts, taken={item.id for item in existing})
    items = append_items(existing, new_items)
    return ExtractResponse(items=items, added=len(new_items), subtotal=items_subtotal(items))
