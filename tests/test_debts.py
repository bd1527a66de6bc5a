"""
Tests for debt and loan endpoints.

These tests verify:
  - Status and remaining balance are recomputed from the payments
  - Editing or deleting a payment is reflected immediately
  - Overpayment reads as paid with a negative remainder
  - Payment dates may not lie in the future
  - Debts keep a manual display order
  - The summary splits payable (hutang) and receivable (piutang)
"""

import uuid
from datetime import datetime, timedelta, timezone


async def _debt(client, name="Bank loan", amount=1_000_000, debt_type="hutang", **fields):
    response = await client.post(
        "/debts", json={"type": debt_type, "name": name, "amount": amount, **fields}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _pay(client, debt_id, amount, **fields):
    return await client.post(f"/debts/{debt_id}/payments", json={"amount": amount, **fields})


# ---------------------------------------------------------------------------
# Debts
# ---------------------------------------------------------------------------

class TestCreateDebt:

    async def test_new_debt_is_unpaid(self, authenticated_client):
        debt = await _debt(authenticated_client, due_date="2026-12-31", note="car")
        assert debt["status"] == "unpaid"
        assert debt["total_paid"] == 0
        assert debt["remaining"] == 1_000_000
        assert debt["due_date"] == "2026-12-31"
        assert debt["payments"] == []

    async def test_type_must_be_known(self, authenticated_client):
        response = await authenticated_client.post(
            "/debts", json={"type": "gift", "name": "X", "amount": 10}
        )
        assert response.status_code == 422

    async def test_amount_must_be_positive(self, authenticated_client):
        response = await authenticated_client.post(
            "/debts", json={"type": "hutang", "name": "X", "amount": 0}
        )
        assert response.status_code == 422

    async def test_unknown_wallet(self, authenticated_client):
        response = await authenticated_client.post(
            "/debts",
            json={"type": "hutang", "name": "X", "amount": 10, "wallet_id": str(uuid.uuid4())},
        )
        assert response.status_code == 422
        assert response.json()["field"] == "wallet_id"

    async def test_list_by_type(self, authenticated_client):
        await _debt(authenticated_client, "Owed to Budi")
        await _debt(authenticated_client, "Lent to Sari", debt_type="piutang")

        response = await authenticated_client.get("/debts", params={"type": "piutang"})
        assert response.status_code == 200
        assert [d["name"] for d in response.json()] == ["Lent to Sari"]


class TestUpdateDebt:

    async def test_partial_update(self, authenticated_client):
        debt = await _debt(authenticated_client, note="first")
        response = await authenticated_client.patch(
            f"/debts/{debt['id']}", json={"amount": 1_500_000, "note": None}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["amount"] == 1_500_000
        assert data["remaining"] == 1_500_000
        assert data["note"] is None
        assert data["name"] == "Bank loan"

    async def test_delete_removes_payments(self, authenticated_client):
        debt = await _debt(authenticated_client)
        await _pay(authenticated_client, debt["id"], 100)

        response = await authenticated_client.delete(f"/debts/{debt['id']}")
        assert response.status_code == 204
        response = await authenticated_client.get(f"/debts/{debt['id']}")
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

class TestPayments:

    async def test_partial_then_full(self, authenticated_client):
        debt = await _debt(authenticated_client)

        response = await _pay(authenticated_client, debt["id"], 400_000)
        assert response.status_code == 201
        assert response.json()["status"] == "unpaid"
        assert response.json()["remaining"] == 600_000

        response = await _pay(authenticated_client, debt["id"], 600_000)
        data = response.json()
        assert data["status"] == "paid"
        assert data["remaining"] == 0
        assert data["total_paid"] == 1_000_000
        assert len(data["payments"]) == 2

    async def test_overpayment(self, authenticated_client):
        debt = await _debt(authenticated_client)
        response = await _pay(authenticated_client, debt["id"], 1_250_000)
        assert response.json()["status"] == "paid"
        assert response.json()["remaining"] == -250_000

    async def test_editing_a_payment_reopens_debt(self, authenticated_client):
        debt = await _debt(authenticated_client)
        paid = await _pay(authenticated_client, debt["id"], 1_000_000)
        payment_id = paid.json()["payments"][0]["id"]

        response = await authenticated_client.patch(
            f"/debts/{debt['id']}/payments/{payment_id}", json={"amount": 900_000}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "unpaid"
        assert response.json()["remaining"] == 100_000

    async def test_deleting_a_payment(self, authenticated_client):
        debt = await _debt(authenticated_client)
        paid = await _pay(authenticated_client, debt["id"], 1_000_000)
        payment_id = paid.json()["payments"][0]["id"]

        response = await authenticated_client.delete(
            f"/debts/{debt['id']}/payments/{payment_id}"
        )
        assert response.status_code == 200
        assert response.json()["status"] == "unpaid"
        assert response.json()["payments"] == []

    async def test_past_date_is_kept(self, authenticated_client):
        debt = await _debt(authenticated_client)
        response = await _pay(
            authenticated_client, debt["id"], 100, paid_at="2026-01-15T09:30:00+00:00"
        )
        assert response.status_code == 201
        assert response.json()["payments"][0]["paid_at"].startswith("2026-01-15T09:30:00")

    async def test_future_date_rejected(self, authenticated_client):
        debt = await _debt(authenticated_client)
        tomorrow = datetime.now(timezone.utc) + timedelta(days=1)
        response = await _pay(authenticated_client, debt["id"], 100, paid_at=tomorrow.isoformat())
        assert response.status_code == 422
        assert "future" in response.text

    async def test_payment_of_another_debt(self, authenticated_client):
        first = await _debt(authenticated_client, "First")
        second = await _debt(authenticated_client, "Second")
        paid = await _pay(authenticated_client, first["id"], 100)
        payment_id = paid.json()["payments"][0]["id"]

        response = await authenticated_client.delete(
            f"/debts/{second['id']}/payments/{payment_id}"
        )
        assert response.status_code == 404

    async def test_payment_amount_must_be_positive(self, authenticated_client):
        debt = await _debt(authenticated_client)
        response = await _pay(authenticated_client, debt["id"], 0)
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Ordering and summary
# ---------------------------------------------------------------------------

class TestOrdering:

    async def test_new_debts_go_last(self, authenticated_client):
        first = await _debt(authenticated_client, "A")
        second = await _debt(authenticated_client, "B")
        assert first["order_index"] == 0
        assert second["order_index"] == 1

    async def test_reorder(self, authenticated_client):
        a = await _debt(authenticated_client, "A")
        await _debt(authenticated_client, "B")
        c = await _debt(authenticated_client, "C")

        response = await authenticated_client.put(
            "/debts/order", json={"ids": [c["id"], a["id"]]}
        )
        assert response.status_code == 200
        assert [d["name"] for d in response.json()] == ["C", "A", "B"]

        listed = await authenticated_client.get("/debts")
        assert [(d["name"], d["order_index"]) for d in listed.json()] == [
            ("C", 0), ("A", 1), ("B", 2),
        ]

    async def test_duplicate_ids(self, authenticated_client):
        a = await _debt(authenticated_client, "A")
        response = await authenticated_client.put(
            "/debts/order", json={"ids": [a["id"], a["id"]]}
        )
        assert response.status_code == 422
        assert response.json()["field"] == "ids"

    async def test_unknown_id(self, authenticated_client):
        await _debt(authenticated_client, "A")
        response = await authenticated_client.put(
            "/debts/order", json={"ids": [str(uuid.uuid4())]}
        )
        assert response.status_code == 422


class TestDebtSummary:

    async def test_totals(self, authenticated_client):
        owed = await _debt(authenticated_client, "Bank", 1_000_000)
        lent = await _debt(authenticated_client, "Sari", 400_000, debt_type="piutang")
        settled = await _debt(authenticated_client, "Budi", 100_000)
        await _pay(authenticated_client, owed["id"], 250_000)
        await _pay(authenticated_client, lent["id"], 100_000)
        await _pay(authenticated_client, settled["id"], 150_000)

        response = await authenticated_client.get("/debts/summary")
        assert response.status_code == 200
        assert response.json() == {
            "payable_total": 1_100_000,
            "receivable_total": 400_000,
            "payable_outstanding": 750_000,
            "receivable_outstanding": 300_000,
        }
