import secrets
import uuid
from typing import Any, Dict, Iterable, List, Optional, Set

from ..models.invoice import LineItem, LineItemDraft


def new_line_item_id() -> str:
    return secrets.token_hex(5)


def new_invoice_id() -> str:
    return f"inv_{uuid.uuid4().hex[:10]}"


def _fresh_id(taken: Set[str]) -> str:
    item_id = new_line_item_id()
    while item_id in taken:
        item_id = new_line_item_id()
    taken.add(item_id)
    return item_id


def blank_line_item(taken: Optional[Set[str]] = None) -> LineItem:
    item_id = _fresh_id(taken if taken is not None else set())
    return LineItem(id=item_id, description="", quantity=1, price=0)


def assign_ids(drafts: Iterable[LineItemDraft], taken: Iterable[str] = ()) -> List[LineItem]:
    """Give every draft a fresh id not in `taken`. Ids from upstream are never trusted."""
    used = set(taken)
    return [
        LineItem(id=_fresh_id(used), **d.model_dump(include={"description", "quantity", "price"}))
        for d in drafts
    ]


def ensure_ids(items: Iterable[Any]) -> List[LineItem]:
    # keep the first use of each caller id; missing or repeated ids get a fresh one
    items = list(items)
    used: Set[str] = set()
    seen: Set[str] = set()
    for item in items:
        if item.id:
            used.add(item.id)
    out: List[LineItem] = []
    for item in items:
        data = item.model_dump()
        if not data.get("id") or data["id"] in seen:
            data["id"] = _fresh_id(used)
        seen.add(data["id"])
        out.append(LineItem(**data))
    return out


def append_items(items: List[LineItem], new_items: Iterable[LineItem]) -> List[LineItem]:
    return [*items, *new_items]


def update_item(items: List[LineItem], item_id: str, changes: Dict[str, Any]) -> List[LineItem]:
    allowed = {"description", "quantity", "price"}
    patch = {k: v for k, v in changes.items() if k in allowed}
    return [
        item.model_copy(update=patch) if item.id == item_id else item
        for item in items
    ]


def remove_item(items: List[LineItem], item_id: str) -> List[LineItem]:
    return [item for item in items if item.id != item_id]
