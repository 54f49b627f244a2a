#!/usr/bin/env python3
"""
make_fake_invoices.py

Generate a synthetic seed file for InvoiceDesk.
- Clients with Faker company names, emails and addresses
- Invoices across all four statuses, spread over the last ~180 days
- Edge cases: fractional quantities, zero-price items, credit lines (negative),
  empty invoices

Usage examples:
  python scripts/make_fake_invoices.py --out data/seed.json --clients 8 --n 40
  SEED_FILE=data/seed.json uvicorn apps.api.main:app

Dependencies:
  pip install faker

This script is deterministic per --seed to make debugging easier.
"""
from __future__ import annotations
import argparse
import json
from dataclasses import dataclass, asdict, field
from datetime import date, timedelta
from pathlib import Path
from random import Random
from typing import List, Optional

try:
    from faker import Faker
except Exception as e:
    raise SystemExit("Please install 'faker' (pip install faker)")

STATUSES = ["Draft", "Pending", "Paid", "Overdue"]
STATUS_WEIGHTS = [1, 3, 5, 2]

SERVICE_POOL = [
    ("Frontend Development", 100.0),
    ("Backend Development", 110.0),
    ("UI Design", 120.0),
    ("Consultation", 200.0),
    ("Logo Redesign", 1500.0),
    ("Code Review", 90.0),
    ("Hosting (monthly)", 45.0),
    ("Project Management", 85.0),
    ("Copywriting", 60.0),
]

TAX_RATES = [0.0, 5.0, 10.0, 20.0]


@dataclass
class LineItem:
    id: str
    description: str
    quantity: float
    price: float


@dataclass
class Client:
    id: str
    name: str
    email: str
    address: Optional[str] = None


@dataclass
class Invoice:
    id: str
    client_id: str
    client_name: str
    status: str
    invoice_date: str  # ISO yyyy-mm-dd
    due_date: str
    tax_rate: float
    items: List[LineItem] = field(default_factory=list)
    notes: Optional[str] = None


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def make_invoice_id(counter: int) -> str:
    # e.g., inv_2025090142
    return f"inv_{date.today().strftime('%Y%m')}{counter:04d}"


def build_client(fake: Faker, idx: int) -> Client:
    name = fake.company()
    domain = fake.domain_name()
    return Client(
        id=str(idx),
        name=name,
        email=f"billing@{domain}",
        address=fake.address().replace("\n", ", "),
    )


def random_line_item(rng: Random, item_id: str) -> LineItem:
    desc, base = rng.choice(SERVICE_POOL)
    # hourly work gets fractional hours now and then
    qty = rng.choice([1, 2, 5, 10, 20, 40]) if base < 1000 else 1
    if rng.random() < 0.2:
        qty = round(qty + rng.choice([0.25, 0.5, 0.75]), 2)
    price = round(base * (0.85 + rng.random() * 0.4), 2)
    return LineItem(id=item_id, description=desc, quantity=qty, price=price)


def build_invoice(rng: Random, fake: Faker, client: Client, idx: int) -> Invoice:
    # issue date spread over last ~180 days
    d = date.today() - timedelta(days=rng.randint(0, 180))
    due = d + timedelta(days=rng.choice([7, 14, 30]))
    status = rng.choices(STATUSES, weights=STATUS_WEIGHTS)[0]

    n_items = rng.randint(1, 6)
    items = [random_line_item(rng, f"{idx}-{j + 1}") for j in range(n_items)]

    # Sometimes a free item
    if rng.random() < 0.1:
        items.append(LineItem(id=f"{idx}-free", description="Onboarding call", quantity=1, price=0.0))

    # Sometimes insert a credit line (negative) as an edge case
    if rng.random() < 0.08:
        items.append(LineItem(
            id=f"{idx}-credit",
            description="Promotional credit",
            quantity=1,
            price=-round(rng.uniform(50, 250), 2),
        ))

    # Rarely, an invoice with nothing on it yet
    if status == "Draft" and rng.random() < 0.25:
        items = []

    return Invoice(
        id=make_invoice_id(idx),
        client_id=client.id,
        client_name=client.name,
        status=status,
        invoice_date=d.isoformat(),
        due_date=due.isoformat(),
        tax_rate=rng.choice(TAX_RATES),
        items=items,
        notes=fake.sentence() if rng.random() < 0.3 else None,
    )


def write_seed(out_path: Path, clients: List[Client], invoices: List[Invoice]) -> None:
    ensure_dir(out_path.parent)
    # newest first, matching how the service prepends new invoices
    ordered = sorted(invoices, key=lambda inv: inv.invoice_date, reverse=True)
    payload = {
        "clients": [asdict(c) for c in clients],
        "invoices": [asdict(inv) for inv in ordered],
    }
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def main() -> None:
    ap = argparse.ArgumentParser(description="Generate a synthetic InvoiceDesk seed file")
    ap.add_argument("--out", type=Path, required=True, help="Output path for the seed JSON file")
    ap.add_argument("--clients", type=int, default=6, help="Number of clients to generate")
    ap.add_argument("--n", type=int, default=24, help="Number of invoices to generate")
    ap.add_argument("--seed", type=int, default=42, help="RNG seed for reproducibility")
    args = ap.parse_args()

    rng = Random(args.seed)
    fake = Faker()
    Faker.seed(args.seed)

    clients = [build_client(fake, i + 1) for i in range(max(1, args.clients))]
    invoices = [build_invoice(rng, fake, rng.choice(clients), i + 1) for i in range(args.n)]

    write_seed(args.out, clients, invoices)
    print(f"[ok] Wrote {len(clients)} clients and {len(invoices)} invoices to {args.out}")


if __name__ == "__main__":
    main()
