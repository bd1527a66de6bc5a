"""
Tests for wallet endpoints.

These tests verify:
  - Wallets start at 0 and their balance is derived from transactions
  - The list is ordered by name and carries the total balance
  - Renaming keeps the balance
  - A wallet still used by transactions or goals cannot be deleted (409)
  - Unused wallets are deleted, and debt links to them are cleared
"""


async def _wallet(client, name="Cash", wallet_type="default"):
    response = await client.post("/wallets", json={"name": name, "type": wallet_type})
    assert response.status_code == 201, response.text
    return response.json()


async def _income(client, wallet_id, amount, date="2026-10-01"):
    response = await client.post(
        "/transactions",
        json={"type": "income", "amount": amount, "wallet_id": wallet_id, "date": date},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateWallet:

    async def test_new_wallet_has_zero_balance(self, authenticated_client):
        wallet = await _wallet(authenticated_client, "Cash")
        assert wallet["name"] == "Cash"
        assert wallet["type"] == "default"
        assert wallet["balance"] == 0
        assert wallet["balance_display"] == "Rp 0"

    async def test_name_is_required(self, authenticated_client):
        response = await authenticated_client.post("/wallets", json={"name": ""})
        assert response.status_code == 422


class TestWalletBalances:

    async def test_balance_follows_transactions(self, authenticated_client):
        """income 1000 -> Cash, expense 200, transfer 300 Cash -> Bank."""
        cash = await _wallet(authenticated_client, "Cash")
        bank = await _wallet(authenticated_client, "Bank", "bank")

        await _income(authenticated_client, cash["id"], 1000)
        await authenticated_client.post(
            "/transactions",
            json={"type": "expense", "amount": 200, "wallet_id": cash["id"]},
        )
        await authenticated_client.post(
            "/transactions",
            json={
                "type": "transfer",
                "amount": 300,
                "transfer_from": cash["id"],
                "transfer_to_id": bank["id"],
            },
        )

        cash_now = await authenticated_client.get(f"/wallets/{cash['id']}")
        bank_now = await authenticated_client.get(f"/wallets/{bank['id']}")
        assert cash_now.json()["balance"] == 500
        assert bank_now.json()["balance"] == 300

    async def test_list_is_sorted_with_total(self, authenticated_client):
        savings = await _wallet(authenticated_client, "Savings")
        await _wallet(authenticated_client, "Bank")
        await _income(authenticated_client, savings["id"], 1_250_000)

        response = await authenticated_client.get("/wallets")
        assert response.status_code == 200
        data = response.json()
        assert [w["name"] for w in data["items"]] == ["Bank", "Savings"]
        assert data["total_balance"] == 1_250_000
        assert data["total_balance_display"] == "Rp 1.250.000"

    async def test_deleting_a_transaction_restores_balance(self, authenticated_client):
        cash = await _wallet(authenticated_client)
        txn = await _income(authenticated_client, cash["id"], 700)

        response = await authenticated_client.delete(f"/transactions/{txn['id']}")
        assert response.status_code == 204

        wallet = await authenticated_client.get(f"/wallets/{cash['id']}")
        assert wallet.json()["balance"] == 0


class TestUpdateWallet:

    async def test_rename_keeps_balance(self, authenticated_client):
        cash = await _wallet(authenticated_client)
        await _income(authenticated_client, cash["id"], 500)

        response = await authenticated_client.patch(
            f"/wallets/{cash['id']}", json={"name": "Pocket"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Pocket"
        assert data["type"] == "default"
        assert data["balance"] == 500

    async def test_unknown_wallet(self, authenticated_client):
        response = await authenticated_client.patch(
            "/wallets/00000000-0000-0000-0000-000000000000", json={"name": "X"}
        )
        assert response.status_code == 404


class TestDeleteWallet:

    async def test_delete_unused_wallet(self, authenticated_client):
        cash = await _wallet(authenticated_client)
        response = await authenticated_client.delete(f"/wallets/{cash['id']}")
        assert response.status_code == 204

        response = await authenticated_client.get(f"/wallets/{cash['id']}")
        assert response.status_code == 404

    async def test_wallet_with_transactions_is_in_use(self, authenticated_client):
        cash = await _wallet(authenticated_client)
        await _income(authenticated_client, cash["id"], 100)

        response = await authenticated_client.delete(f"/wallets/{cash['id']}")
        assert response.status_code == 409
        assert response.json()["error_type"] == "resource_in_use"

    async def test_transfer_target_is_in_use(self, authenticated_client):
        cash = await _wallet(authenticated_client, "Cash")
        bank = await _wallet(authenticated_client, "Bank")
        await authenticated_client.post(
            "/transactions",
            json={
                "type": "transfer",
                "amount": 10,
                "transfer_from": cash["id"],
                "transfer_to_id": bank["id"],
            },
        )
        response = await authenticated_client.delete(f"/wallets/{bank['id']}")
        assert response.status_code == 409

    async def test_goal_wallet_is_in_use(self, authenticated_client):
        savings = await _wallet(authenticated_client, "Savings")
        await authenticated_client.post(
            "/goals",
            json={"name": "Laptop", "target_amount": 10_000_000, "wallet_id": savings["id"]},
        )
        response = await authenticated_client.delete(f"/wallets/{savings['id']}")
        assert response.status_code == 409

    async def test_debt_link_is_cleared(self, authenticated_client):
        cash = await _wallet(authenticated_client)
        debt = await authenticated_client.post(
            "/debts",
            json={"type": "hutang", "name": "Budi", "amount": 50_000, "wallet_id": cash["id"]},
        )
        assert debt.status_code == 201

        response = await authenticated_client.delete(f"/wallets/{cash['id']}")
        assert response.status_code == 204

        debt_now = await authenticated_client.get(f"/debts/{debt.json()['id']}")
        assert debt_now.json()["wallet_id"] is None
