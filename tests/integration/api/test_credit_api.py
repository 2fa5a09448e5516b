import pytest


@pytest.mark.asyncio
class TestAccountsApi:

    async def test_open_account_is_idempotent(self, client):
        first = await client.post("/api/accounts", json={"account_id": "acct_new", "email": "a@example.com"})
        second = await client.post("/api/accounts", json={"account_id": "acct_new"})

        assert first.status_code == 200
        assert first.json()["created"] is True
        assert first.json()["balance_cents"] == 0
        assert second.json()["created"] is False

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
class TestCreditsApi:

    async def test_add_deduct_and_overdraw(self, client, account):
        added = await client.post(
            "/api/credits/add",
            json={"account_id": account.id, "amount_cents": 1000, "transaction_type": "purchase"},
        )
        deducted = await client.post("/api/credits/deduct", json={"account_id": account.id, "amount_cents": 50})
        overdraw = await client.post("/api/credits/deduct", json={"account_id": account.id, "amount_cents": 2000})

        assert added.status_code == 200
        assert added.json()["transaction"]["balance_after_cents"] == 1000
        assert deducted.json()["new_balance_cents"] == 950
        assert deducted.json()["transaction"]["transaction_type"] == "usage"
        assert overdraw.status_code == 402
        assert overdraw.json()["error"]["code"] == "INSUFFICIENT_CREDITS"
        assert overdraw.json()["error"]["details"] == {"required": 2000, "available": 950}

        balance = await client.get(f"/api/credits/{account.id}/balance")
        assert balance.json()["balance_cents"] == 950

    async def test_transactions_newest_first(self, client, account):
        for amount in (100, 200, 300):
            await client.post("/api/credits/add", json={"account_id": account.id, "amount_cents": amount})

        response = await client.get(f"/api/credits/{account.id}/transactions", params={"limit": 2})

        body = response.json()
        assert body["total"] == 3
        assert [t["amount_cents"] for t in body["transactions"]] == [300, 200]

    async def test_check_sufficient_credits(self, client, account):
        await client.post("/api/credits/add", json={"account_id": account.id, "amount_cents": 100})

        enough = await client.get(f"/api/credits/{account.id}/check", params={"amount_cents": 100})
        short = await client.get(f"/api/credits/{account.id}/check", params={"amount_cents": 101})

        assert enough.json()["sufficient"] is True
        assert short.json()["sufficient"] is False

    async def test_unknown_account_is_404(self, client):
        response = await client.get("/api/credits/missing/balance")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_fractional_amount_rejected_by_validation(self, client, account):
        response = await client.post("/api/credits/add", json={"account_id": account.id, "amount_cents": 10.5})

        assert response.status_code == 422

    async def test_zero_amount_is_invalid(self, client, account):
        response = await client.post("/api/credits/add", json={"account_id": account.id, "amount_cents": 0})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_AMOUNT"


@pytest.mark.asyncio
class TestPurchasesApi:

    async def test_purchase_lifecycle(self, client, account):
        created = await client.post("/api/purchases", json={"account_id": account.id, "amount_cents": 2500})
        purchase_id = created.json()["purchase_id"]

        first = await client.post(f"/api/purchases/{purchase_id}/complete", json={"payment_reference": "pi_1"})
        second = await client.post(f"/api/purchases/{purchase_id}/complete", json={})

        assert created.status_code == 201
        assert created.json()["status"] == "pending"
        assert first.json()["already_processed"] is False
        assert first.json()["new_balance_cents"] == 2500
        assert second.json()["already_processed"] is True
        balance = await client.get(f"/api/credits/{account.id}/balance")
        assert balance.json()["balance_cents"] == 2500

    async def test_failed_purchase_cannot_complete(self, client, account):
        created = await client.post("/api/purchases", json={"account_id": account.id, "amount_cents": 2500})
        purchase_id = created.json()["purchase_id"]

        failed = await client.post(f"/api/purchases/{purchase_id}/fail", json={"reason": "card_declined"})
        completed = await client.post(f"/api/purchases/{purchase_id}/complete", json={})

        assert failed.json()["status"] == "failed"
        assert completed.status_code == 409

    async def test_purchase_below_minimum(self, client, account):
        response = await client.post("/api/purchases", json={"account_id": account.id, "amount_cents": 100})

        assert response.status_code == 400
