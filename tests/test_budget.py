"""
Tests for budget endpoints.

These tests verify:
  - Category and subcategory allocations are computed on read
  - Expense allocations may not exceed total income (422 over_allocation)
  - Subcategory allocations may not exceed their parent's allocation
  - Partial updates can clear percent or amount but not both
  - Deleting a category removes its subcategories and uncategorises
    its transactions
  - The monthly summary reports allocated vs. spent
"""

import uuid


async def _category(client, name, category_type="expense", **inputs):
    return await client.post(
        "/budget/categories", json={"type": category_type, "name": name, **inputs}
    )


async def _subcategory(client, category_id, name, **inputs):
    return await client.post(
        "/budget/subcategories", json={"category_id": category_id, "name": name, **inputs}
    )


async def _food_budget(client):
    """Salary 2,000,000; Food 20%; Groceries 50% of Food."""
    salary = await _category(client, "Salary", "income", amount=2_000_000)
    assert salary.status_code == 201, salary.text
    food = await _category(client, "Food", percent=20)
    assert food.status_code == 201, food.text
    groceries = await _subcategory(client, food.json()["id"], "Groceries", percent=50)
    assert groceries.status_code == 201, groceries.text
    return salary.json(), food.json(), groceries.json()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class TestCategories:

    async def test_allocations(self, authenticated_client):
        salary, food, groceries = await _food_budget(authenticated_client)
        assert salary["allocated"] == 2_000_000
        assert food["allocated"] == 400_000
        assert groceries["allocated"] == 200_000

    async def test_amount_only_category(self, authenticated_client):
        await _category(authenticated_client, "Salary", "income", amount=2_000_000)
        response = await _category(authenticated_client, "Rent", amount=750_000)
        assert response.status_code == 201
        assert response.json()["allocated"] == 750_000
        assert response.json()["percent"] is None

    async def test_income_needs_amount(self, authenticated_client):
        response = await _category(authenticated_client, "Salary", "income")
        assert response.status_code == 422

    async def test_income_cannot_be_percent(self, authenticated_client):
        response = await _category(
            authenticated_client, "Salary", "income", amount=10, percent=10
        )
        assert response.status_code == 422

    async def test_expense_needs_percent_or_amount(self, authenticated_client):
        response = await _category(authenticated_client, "Misc")
        assert response.status_code == 422

    async def test_percent_above_100(self, authenticated_client):
        response = await _category(authenticated_client, "Food", percent=120)
        assert response.status_code == 422

    async def test_list_by_type(self, authenticated_client):
        await _food_budget(authenticated_client)
        response = await authenticated_client.get("/budget/categories", params={"type": "income"})
        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Salary"]

        response = await authenticated_client.get("/budget/categories")
        assert [c["name"] for c in response.json()] == ["Salary", "Food"]

    async def test_raising_income_raises_percent_allocations(self, authenticated_client):
        salary, food, _ = await _food_budget(authenticated_client)
        await authenticated_client.patch(
            f"/budget/categories/{salary['id']}", json={"amount": 3_000_000}
        )
        response = await authenticated_client.get("/budget/categories", params={"type": "expense"})
        assert response.json()[0]["allocated"] == 600_000


class TestExpenseGuard:

    async def test_over_allocation_rejected(self, authenticated_client):
        await _food_budget(authenticated_client)
        response = await _category(authenticated_client, "Rent", amount=1_700_000)
        assert response.status_code == 422
        data = response.json()
        assert data["error_type"] == "over_allocation"
        assert data["allocated"] == 2_100_000
        assert data["limit"] == 2_000_000

    async def test_exactly_full_is_allowed(self, authenticated_client):
        await _food_budget(authenticated_client)
        response = await _category(authenticated_client, "Rent", amount=1_600_000)
        assert response.status_code == 201

    async def test_update_is_checked_without_its_old_value(self, authenticated_client):
        _, food, _ = await _food_budget(authenticated_client)
        response = await authenticated_client.patch(
            f"/budget/categories/{food['id']}", json={"percent": 100}
        )
        assert response.status_code == 200
        assert response.json()["allocated"] == 2_000_000

    async def test_no_income_skips_guard(self, authenticated_client):
        response = await _category(authenticated_client, "Rent", amount=9_000_000)
        assert response.status_code == 201


class TestUpdateCategory:

    async def test_switch_from_percent_to_amount(self, authenticated_client):
        _, food, _ = await _food_budget(authenticated_client)
        response = await authenticated_client.patch(
            f"/budget/categories/{food['id']}", json={"percent": None, "amount": 300_000}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["percent"] is None
        assert data["allocated"] == 300_000

    async def test_cannot_clear_both_inputs(self, authenticated_client):
        _, food, _ = await _food_budget(authenticated_client)
        response = await authenticated_client.patch(
            f"/budget/categories/{food['id']}", json={"percent": None}
        )
        assert response.status_code == 422
        assert response.json()["error_type"] == "invalid_budget_input"

    async def test_rename_only(self, authenticated_client):
        _, food, _ = await _food_budget(authenticated_client)
        response = await authenticated_client.patch(
            f"/budget/categories/{food['id']}", json={"name": "Meals"}
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Meals"
        assert response.json()["percent"] == 20


class TestDeleteCategory:

    async def test_delete_uncategorises_transactions(self, authenticated_client):
        _, food, groceries = await _food_budget(authenticated_client)
        wallet = await authenticated_client.post("/wallets", json={"name": "Cash"})
        txn = await authenticated_client.post(
            "/transactions",
            json={
                "type": "expense",
                "amount": 10_000,
                "wallet_id": wallet.json()["id"],
                "subcategory_id": groceries["id"],
            },
        )
        assert txn.status_code == 201

        response = await authenticated_client.delete(f"/budget/categories/{food['id']}")
        assert response.status_code == 204

        subs = await authenticated_client.get("/budget/subcategories")
        assert subs.json() == []

        kept = await authenticated_client.get(f"/transactions/{txn.json()['id']}")
        assert kept.status_code == 200
        assert kept.json()["category_id"] is None
        assert kept.json()["subcategory_id"] is None


# ---------------------------------------------------------------------------
# Subcategories
# ---------------------------------------------------------------------------

class TestSubcategories:

    async def test_over_allocation_rejected(self, authenticated_client):
        _, food, _ = await _food_budget(authenticated_client)
        response = await _subcategory(authenticated_client, food["id"], "Snacks", amount=250_000)
        assert response.status_code == 422
        assert response.json()["error_type"] == "over_allocation"
        assert response.json()["limit"] == 400_000

    async def test_fits_remaining_allocation(self, authenticated_client):
        _, food, _ = await _food_budget(authenticated_client)
        response = await _subcategory(authenticated_client, food["id"], "Snacks", amount=200_000)
        assert response.status_code == 201
        assert response.json()["allocated"] == 200_000

    async def test_zero_percent_parent_has_no_room(self, authenticated_client):
        await _category(authenticated_client, "Salary", "income", amount=2_000_000)
        transport = await _category(authenticated_client, "Transport", percent=0)
        assert transport.json()["allocated"] == 0

        response = await _subcategory(
            authenticated_client, transport.json()["id"], "Bus", amount=100_000
        )
        assert response.status_code == 422
        assert response.json()["limit"] == 0

    async def test_parent_must_be_expense(self, authenticated_client):
        salary, _, _ = await _food_budget(authenticated_client)
        response = await _subcategory(authenticated_client, salary["id"], "Bonus", amount=1)
        assert response.status_code == 422
        assert response.json()["field"] == "category_id"

    async def test_unknown_parent(self, authenticated_client):
        response = await _subcategory(authenticated_client, str(uuid.uuid4()), "X", amount=1)
        assert response.status_code == 422

    async def test_needs_percent_or_amount(self, authenticated_client):
        _, food, _ = await _food_budget(authenticated_client)
        response = await _subcategory(authenticated_client, food["id"], "Empty")
        assert response.status_code == 422

    async def test_list_by_category(self, authenticated_client):
        _, food, groceries = await _food_budget(authenticated_client)
        rent = await _category(authenticated_client, "Rent", amount=100_000)
        await _subcategory(authenticated_client, rent.json()["id"], "Deposit", amount=50_000)

        response = await authenticated_client.get(
            "/budget/subcategories", params={"category_id": food["id"]}
        )
        assert [s["id"] for s in response.json()] == [groceries["id"]]

    async def test_update_and_delete(self, authenticated_client):
        _, food, groceries = await _food_budget(authenticated_client)
        response = await authenticated_client.patch(
            f"/budget/subcategories/{groceries['id']}", json={"percent": 100}
        )
        assert response.status_code == 200
        assert response.json()["allocated"] == 400_000

        response = await authenticated_client.patch(
            f"/budget/subcategories/{groceries['id']}", json={"percent": None}
        )
        assert response.status_code == 422

        response = await authenticated_client.delete(f"/budget/subcategories/{groceries['id']}")
        assert response.status_code == 204


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

class TestBudgetSummary:

    async def test_groceries_month(self, authenticated_client):
        _, food, groceries = await _food_budget(authenticated_client)
        wallet = await authenticated_client.post("/wallets", json={"name": "Cash"})
        wallet_id = wallet.json()["id"]
        for amount, day in ((100_000, "2026-10-02"), (50_000, "2026-10-20"), (80_000, "2026-11-01")):
            response = await authenticated_client.post(
                "/transactions",
                json={
                    "type": "expense",
                    "amount": amount,
                    "wallet_id": wallet_id,
                    "category_id": food["id"],
                    "subcategory_id": groceries["id"],
                    "date": day,
                },
            )
            assert response.status_code == 201

        response = await authenticated_client.get(
            "/budget/summary", params={"year": 2026, "month": 10}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2026
        assert data["month"] == 10
        assert data["total_income"] == 2_000_000
        assert data["total_allocated"] == 400_000
        assert data["unallocated_income"] == 1_600_000
        assert data["total_spent"] == 150_000
        assert [line["name"] for line in data["income"]] == ["Salary"]

        food_row = data["categories"][0]
        assert food_row["allocated"] == 400_000
        assert food_row["spent"] == 150_000
        assert food_row["percent_display"] == 20.0
        sub_row = food_row["subcategories"][0]
        assert sub_row["allocated"] == 200_000
        assert sub_row["spent"] == 150_000
        assert sub_row["percent_used"] == 75
