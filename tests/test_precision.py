"""
Tests for amount handling at the API boundary.

These tests verify:
  - Amounts posted as display strings are parsed to whole units
  - Large amounts survive storage unchanged (BigInteger columns)
  - Percent allocations round half-up, not to even
  - Display strings use the configured currency label and separator
  - Amounts beyond the BigInteger range are a 422, not a server error
"""


async def _wallet(client):
    response = await client.post("/wallets", json={"name": "Cash"})
    return response.json()["id"]


class TestAmountStrings:

    async def test_display_string_amount(self, authenticated_client):
        wallet_id = await _wallet(authenticated_client)
        response = await authenticated_client.post(
            "/transactions",
            json={"type": "income", "amount": "Rp 1.500.000", "wallet_id": wallet_id},
        )
        assert response.status_code == 201
        assert response.json()["amount"] == 1_500_000
        assert response.json()["amount_display"] == "Rp 1.500.000"

    async def test_comma_grouped_amount(self, authenticated_client):
        wallet_id = await _wallet(authenticated_client)
        response = await authenticated_client.post(
            "/transactions",
            json={"type": "expense", "amount": "25,000", "wallet_id": wallet_id},
        )
        assert response.json()["amount"] == 25_000

    async def test_float_amount_rounds_half_up(self, authenticated_client):
        wallet_id = await _wallet(authenticated_client)
        response = await authenticated_client.post(
            "/transactions",
            json={"type": "income", "amount": 100.5, "wallet_id": wallet_id},
        )
        assert response.json()["amount"] == 101

    async def test_large_amount(self, authenticated_client):
        """Ten trillion rupiah does not fit in 32 bits."""
        wallet_id = await _wallet(authenticated_client)
        await authenticated_client.post(
            "/transactions",
            json={"type": "income", "amount": 10_000_000_000_000, "wallet_id": wallet_id},
        )
        response = await authenticated_client.get(f"/wallets/{wallet_id}")
        assert response.json()["balance"] == 10_000_000_000_000
        assert response.json()["balance_display"] == "Rp 10.000.000.000.000"

    async def test_goal_and_debt_accept_strings(self, authenticated_client):
        wallet_id = await _wallet(authenticated_client)
        goal = await authenticated_client.post(
            "/goals",
            json={"name": "Car", "target_amount": "Rp 150.000.000", "wallet_id": wallet_id},
        )
        assert goal.json()["target_amount"] == 150_000_000

        debt = await authenticated_client.post(
            "/debts", json={"type": "piutang", "name": "Sari", "amount": "750.000"}
        )
        assert debt.json()["amount"] == 750_000


class TestPercentRounding:

    async def test_half_rounds_up(self, authenticated_client):
        """12.5% of 100 is 12.5, which must allocate 13."""
        await authenticated_client.post(
            "/budget/categories", json={"type": "income", "name": "Tips", "amount": 100}
        )
        response = await authenticated_client.post(
            "/budget/categories", json={"type": "expense", "name": "Snacks", "percent": 12.5}
        )
        assert response.status_code == 201
        assert response.json()["allocated"] == 13

    async def test_two_and_a_half_rounds_to_three(self, authenticated_client):
        await authenticated_client.post(
            "/budget/categories", json={"type": "income", "name": "Tips", "amount": 10}
        )
        response = await authenticated_client.post(
            "/budget/categories", json={"type": "expense", "name": "Coffee", "percent": 25}
        )
        assert response.json()["allocated"] == 3


class TestAmountBounds:

    async def test_amount_over_storage_range_is_rejected(self, authenticated_client):
        wallet_id = await _wallet(authenticated_client)
        for amount in (10**19, 1e30, "9" * 25):
            response = await authenticated_client.post(
                "/transactions",
                json={"type": "income", "amount": amount, "wallet_id": wallet_id},
            )
            assert response.status_code == 422, amount

        listing = await authenticated_client.get("/transactions")
        assert listing.json()["items"] == []

    async def test_largest_storable_amount_is_accepted(self, authenticated_client):
        response = await authenticated_client.post(
            "/debts",
            json={"type": "hutang", "name": "Big", "amount": 9_223_372_036_854_775_807},
        )
        assert response.status_code == 201
        assert response.json()["amount"] == 9_223_372_036_854_775_807

    async def test_oversized_budget_amount_is_rejected(self, authenticated_client):
        response = await authenticated_client.post(
            "/budget/categories",
            json={"type": "income", "name": "Lottery", "amount": "Rp 99.999.999.999.999.999.999"},
        )
        assert response.status_code == 422
