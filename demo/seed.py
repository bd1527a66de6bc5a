#!/usr/bin/env python3
"""
Demo seed script: populates a running moco API with sample data.

!! NOT FOR PRODUCTION !!
This script creates test users with known passwords and fake financial
data. It is intended ONLY for local demos and frontend development.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Reset the database (restart the server afterwards):
    python demo/seed.py --reset

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000

Login credentials after seeding:
    ┌──────────────────────────────┬───────────────────┐
    │ Email                        │ Password          │
    ├──────────────────────────────┼───────────────────┤
    │ ayu.lestari@example.com      │ AyuDemo123!       │
    │ budi.santoso@example.com     │ BudiDemo123!      │
    └──────────────────────────────┴───────────────────┘
"""

import argparse
import asyncio
import os
import random
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"

# ---------------------------------------------------------------------------
# Demo users
# ---------------------------------------------------------------------------

USERS = [
    {
        "email": "ayu.lestari@example.com",
        "password": "AyuDemo123!",
        "display_name": "Ayu",
        "salary": 8_500_000,
        "wallets": [("Cash", "cash"), ("BCA", "bank"), ("Tabungan", "savings")],
    },
    {
        "email": "budi.santoso@example.com",
        "password": "BudiDemo123!",
        "display_name": "Budi",
        "salary": 6_000_000,
        "wallets": [("Dompet", "cash"), ("Mandiri", "bank"), ("GoPay", "ewallet")],
    },
]

# (category, percent of income, [(subcategory, percent of category)])
EXPENSE_BUDGET = [
    ("Makan", 30, [("Groceries", 60), ("Jajan", 30)]),
    ("Transport", 10, [("Bensin", 70), ("Parkir", 20)]),
    ("Tagihan", 15, [("Listrik", 40), ("Internet", 40)]),
    ("Hiburan", 5, []),
]

NOTES = {
    "Groceries": ["Pasar", "Supermarket", "Sayur"],
    "Jajan": ["Kopi", "Bakso", "Martabak"],
    "Bensin": ["Pertamax", "Isi bensin"],
    "Parkir": ["Parkir mall", "Parkir kantor"],
    "Listrik": ["Token listrik"],
    "Internet": ["Wifi bulanan"],
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


def rupiah(amount: int) -> str:
    return f"Rp {amount:,}".replace(",", ".")


def month_start(months_back: int) -> date:
    first = date.today().replace(day=1)
    for _ in range(months_back):
        first = (first - timedelta(days=1)).replace(day=1)
    return first


async def signup(client: httpx.AsyncClient, user: dict) -> str:
    """Sign up a user, return JWT token."""
    resp = await client.post(f"{BASE_URL}/auth/signup", json={
        "email": user["email"],
        "password": user["password"],
        "display_name": user["display_name"],
    })
    resp.raise_for_status()
    return resp.json()["token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def post(client: httpx.AsyncClient, token: str, path: str, body: dict) -> dict:
    resp = await client.post(f"{BASE_URL}{path}", json=body, headers=auth_header(token))
    resp.raise_for_status()
    return resp.json()


# ---------------------------------------------------------------------------
# Seed logic
# ---------------------------------------------------------------------------

async def seed_budget(client: httpx.AsyncClient, token: str, salary: int) -> dict[str, tuple]:
    """Create the income line and the expense envelopes.

    Returns subcategory name -> (category_id, subcategory_id).
    """
    income = await post(client, token, "/budget/categories",
                        {"type": "income", "name": "Gaji", "amount": salary})
    targets: dict[str, tuple] = {"Gaji": (income["id"], None)}
    for name, percent, subs in EXPENSE_BUDGET:
        category = await post(client, token, "/budget/categories",
                              {"type": "expense", "name": name, "percent": percent})
        targets[name] = (category["id"], None)
        for sub_name, sub_percent in subs:
            sub = await post(client, token, "/budget/subcategories",
                             {"category_id": category["id"], "name": sub_name,
                              "percent": sub_percent})
            targets[sub_name] = (category["id"], sub["id"])
    return targets


async def seed_month(
    client: httpx.AsyncClient, token: str, first_day: date,
    wallets: dict[str, str], targets: dict[str, tuple], salary: int,
) -> int:
    """One month of salary, spending and a savings transfer. Returns the row count."""
    cash, bank, savings = list(wallets.values())
    count = 0

    await post(client, token, "/transactions", {
        "type": "income", "amount": salary, "wallet_id": bank,
        "category_id": targets["Gaji"][0],
        "date": first_day.isoformat(), "note": "Gaji bulanan",
    })
    await post(client, token, "/transactions", {
        "type": "transfer", "amount": 1_500_000, "transfer_from": bank,
        "transfer_to_id": cash, "date": (first_day + timedelta(days=1)).isoformat(),
    })
    await post(client, token, "/transactions", {
        "type": "transfer", "amount": random.choice([500_000, 750_000, 1_000_000]),
        "transfer_from": bank, "transfer_to_id": savings,
        "date": (first_day + timedelta(days=2)).isoformat(), "note": "Nabung",
    })
    count += 3

    last_day = min(date.today(), (first_day + timedelta(days=32)).replace(day=1) - timedelta(days=1))
    for _ in range(random.randint(12, 20)):
        sub_name = random.choice(list(NOTES))
        category_id, subcategory_id = targets[sub_name]
        day = first_day + timedelta(days=random.randint(0, (last_day - first_day).days))
        await post(client, token, "/transactions", {
            "type": "expense",
            "amount": random.randrange(10_000, 250_000, 500),
            "wallet_id": random.choice([cash, bank]),
            "category_id": category_id,
            "subcategory_id": subcategory_id,
            "date": day.isoformat(),
            "note": random.choice(NOTES[sub_name]),
        })
        count += 1
    return count


async def seed_user(client: httpx.AsyncClient, user: dict) -> None:
    print(f"\nCreating {user['display_name']}...")
    token = await signup(client, user)
    log(f"Login: {user['email']} / {user['password']}")

    wallets: dict[str, str] = {}
    for name, wallet_type in user["wallets"]:
        wallet = await post(client, token, "/wallets", {"name": name, "type": wallet_type})
        wallets[name] = wallet["id"]
    log(f"Wallets: {', '.join(wallets)}")

    targets = await seed_budget(client, token, user["salary"])
    log(f"Budget: {len(EXPENSE_BUDGET)} expense categories on {rupiah(user['salary'])}")

    rows = 0
    for months_back in (1, 0):
        rows += await seed_month(
            client, token, month_start(months_back), wallets, targets, user["salary"]
        )
    log(f"Transactions: {rows} across 2 months")

    savings_wallet = list(wallets.values())[2]
    for name, target, saving in (("Dana darurat", 20_000_000, 1_000_000),
                                 ("Liburan Bali", 7_500_000, 250_000)):
        goal = await post(client, token, "/goals", {
            "name": name, "target_amount": target, "saving_amount": saving,
            "saving_frequency": "monthly", "wallet_id": savings_wallet,
        })
        log(f"Goal '{name}': {goal['percent']}%, ETA {goal['eta_label']}")

    debt = await post(client, token, "/debts", {
        "type": "hutang", "name": "Cicilan motor", "amount": 12_000_000,
        "due_date": (date.today() + timedelta(days=300)).isoformat(),
    })
    for _ in range(3):
        debt = await post(client, token, f"/debts/{debt['id']}/payments", {"amount": 1_000_000})
    loan = await post(client, token, "/debts", {
        "type": "piutang", "name": "Pinjaman ke teman", "amount": 500_000,
    })
    await post(client, token, f"/debts/{loan['id']}/payments", {"amount": 500_000})
    log(f"Debt remaining: {rupiah(debt['remaining'])}")

    resp = await client.get(f"{BASE_URL}/wallets", headers=auth_header(token))
    resp.raise_for_status()
    log(f"Total balance: {resp.json()['total_balance_display']}")


async def seed(base_url: str) -> None:
    global BASE_URL
    BASE_URL = base_url

    print("\n========================================")
    print("  DEMO SEED: NOT FOR PRODUCTION")
    print("========================================\n")

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            health = await client.get(f"{BASE_URL}/health")
            health.raise_for_status()
        except (httpx.ConnectError, httpx.HTTPStatusError):
            print(f"  ERROR: Cannot connect to {BASE_URL}")
            print("  Start the server first: uvicorn moco.main:app --reload\n")
            sys.exit(1)

        for user in USERS:
            await seed_user(client, user)

    print("\n========================================")
    print("  SEED COMPLETE: Login Credentials")
    print("========================================")
    print(f"\n  {'Email':<30s} {'Password'}")
    print(f"  {'─' * 30} {'─' * 20}")
    for user in USERS:
        print(f"  {user['email']:<30s} {user['password']}")
    print()


def reset_database() -> None:
    """Delete the SQLite database file so the server recreates it on restart."""
    db_path = os.path.join(os.path.dirname(__file__), "..", "data", "moco.db")
    db_path = os.path.normpath(db_path)

    if os.path.exists(db_path):
        os.remove(db_path)
        print(f"\n  Deleted {db_path}")
        print("  Restart the server to recreate empty tables.\n")
    else:
        print(f"\n  No database found at {db_path}\n")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Demo seed script (NOT FOR PRODUCTION)",
        epilog="Creates sample users, wallets, budgets, goals and debts for demos.",
    )
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Delete the database file and exit (restart server to recreate)",
    )
    args = parser.parse_args()

    if args.reset:
        reset_database()
        return

    await seed(args.base_url)


if __name__ == "__main__":
    asyncio.run(main())
