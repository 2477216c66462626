#!/usr/bin/env python3
"""
Demo seed script — populates a running API with sample users and payments.

!! NOT FOR PRODUCTION !!
This script creates test users with known passwords and fake payments.
It is intended ONLY for local demos and frontend development.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000

Login credentials after seeding:
    ┌──────────────┬───────────────────┬──────────┐
    │ Username     │ Password          │ Role     │
    ├──────────────┼───────────────────┼──────────┤
    │ reviewer     │ Reviewer123!      │ Employee │
    │ alice        │ AliceDemo123!     │ Customer │
    │ bob          │ BobDemo123!       │ Customer │
    └──────────────┴───────────────────┴──────────┘
"""

import argparse
import asyncio
import random
from decimal import Decimal

import httpx

BASE_URL = "http://localhost:8000"

# ---------------------------------------------------------------------------
# Demo users
# ---------------------------------------------------------------------------

REVIEWER = {
    "full_name": "Rita Reviewer",
    "username": "reviewer",
    "email": "reviewer@bankdemo.com",
    "password": "Reviewer123!",
    "role": "Employee",
    "employee_number": "EMP-0001",
}

CUSTOMERS = [
    {
        "full_name": "Alice Chen",
        "username": "alice",
        "email": "alice.chen@example.com",
        "password": "AliceDemo123!",
        "id_number": "8001015009087",
        "accounts": [
            {"account_number": "ALC-CHK-0001", "account_type": "Checking",
             "currency_code": "USD", "balance": "2500.00"},
            {"account_number": "ALC-SAV-0001", "account_type": "Savings",
             "currency_code": "EUR", "balance": "8000.00"},
        ],
    },
    {
        "full_name": "Bob Martinez",
        "username": "bob",
        "email": "bob.martinez@example.com",
        "password": "BobDemo123!",
        "id_number": "7505125123081",
        "accounts": [
            {"account_number": "BOB-BUS-0001", "account_type": "Business",
             "currency_code": "ZAR", "balance": "40000.00"},
        ],
    },
]

PAYEES = [
    ("GB29NWBK60161331926819", "NWBKGB2L"),
    ("DE89370400440532013000", "COBADEFFXXX"),
    ("FR1420041010050500013M02606", "PSSTFRPPPAR"),
    ("ZA6200000000123456789", "SBZAZAJJ"),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register_and_login(client: httpx.AsyncClient, user: dict) -> str:
    body = {k: v for k, v in user.items() if k != "accounts"}
    resp = await client.post(f"{BASE_URL}/api/auth/register", json=body)
    if resp.status_code != 409:
        resp.raise_for_status()
    resp = await client.post(
        f"{BASE_URL}/api/auth/login",
        json={"username": user["username"], "password": user["password"]},
    )
    resp.raise_for_status()
    return resp.json()["token"]


async def open_account(client: httpx.AsyncClient, token: str, account: dict) -> dict:
    resp = await client.post(
        f"{BASE_URL}/api/bank-accounts",
        json=account,
        headers=auth_header(token),
    )
    resp.raise_for_status()
    return resp.json()


async def pay(client: httpx.AsyncClient, token: str, account: dict) -> dict:
    balance = Decimal(account["balance"])
    amount = (balance * Decimal(random.randint(2, 20)) / 100).quantize(Decimal("0.01"))
    payee_account, swift = random.choice(PAYEES)
    resp = await client.post(
        f"{BASE_URL}/api/payments",
        json={
            "account_id": account["id"],
            "amount": str(amount),
            "currency_code": account["currency_code"],
            "payee_account": payee_account,
            "payee_swift_code": swift,
        },
        headers=auth_header(token),
    )
    resp.raise_for_status()
    return resp.json()


async def review(client: httpx.AsyncClient, token: str, payment_id: str, action: str) -> None:
    resp = await client.post(
        f"{BASE_URL}/api/payments/{payment_id}/verify",
        json={"action": action},
        headers=auth_header(token),
    )
    resp.raise_for_status()


# ---------------------------------------------------------------------------
# Seed logic
# ---------------------------------------------------------------------------

async def seed(base_url: str) -> None:
    global BASE_URL
    BASE_URL = base_url

    print("\n========================================")
    print("  DEMO SEED — NOT FOR PRODUCTION")
    print("========================================\n")

    async with httpx.AsyncClient(timeout=30) as client:
        reviewer_token = await register_and_login(client, REVIEWER)
        log(f"Reviewer ready: {REVIEWER['username']}")

        payment_ids: list[str] = []
        for customer in CUSTOMERS:
            token = await register_and_login(client, customer)
            log(f"Customer ready: {customer['username']}")
            for details in customer["accounts"]:
                account = await open_account(client, token, details)
                log(f"  Opened {account['account_type']} {account['account_number']}")
                for _ in range(random.randint(2, 4)):
                    payment = await pay(client, token, account)
                    payment_ids.append(payment["id"])

        # Review roughly half; leave the rest Pending for the review queue
        for payment_id in payment_ids[::2]:
            action = "Verified" if random.random() < 0.75 else "Rejected"
            await review(client, reviewer_token, payment_id, action)

    log(f"Created {len(payment_ids)} payments, reviewed {len(payment_ids[::2])}")
    print("\nDone.\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the Payments API with demo data")
    parser.add_argument("--base-url", default=BASE_URL, help="API base URL")
    args = parser.parse_args()
    asyncio.run(seed(args.base_url))


if __name__ == "__main__":
    main()
