from datetime import datetime

import pytest
from httpx import AsyncClient

from app.models.expense import Expense
from app.services.expense_service import ExpenseService


BASE = "/api/v1/expenses"


@pytest.mark.asyncio
async def test_list_expenses_newest_first(client: AsyncClient, test_expenses):
    response = await client.get(BASE)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 4
    assert data["total_amount"] == 30.3
    paid = [e["paid_at"] for e in data["expenses"]]
    assert paid == sorted(paid, reverse=True)


@pytest.mark.asyncio
async def test_list_expenses_includes_project_name(client: AsyncClient, test_expenses):
    response = await client.get(BASE, params={"category": "domain"})

    expenses = response.json()["expenses"]
    assert len(expenses) == 1
    assert expenses[0]["project_name"] == "Recipe Hub"


@pytest.mark.asyncio
async def test_list_global_expenses(client: AsyncClient, test_expenses):
    response = await client.get(BASE, params={"global_only": True})

    data = response.json()
    assert data["total"] == 1
    assert data["expenses"][0]["name"] == "Vercel Pro"
    assert data["expenses"][0]["project_id"] is None


@pytest.mark.asyncio
async def test_list_expenses_by_project(client: AsyncClient, test_projects, test_expenses):
    gadgets = test_projects[1]

    response = await client.get(BASE, params={"project_id": gadgets.id})

    data = response.json()
    assert data["total"] == 2
    assert data["total_amount"] == 0.3


@pytest.mark.asyncio
async def test_list_expenses_by_month(client: AsyncClient, test_expenses):
    response = await client.get(BASE, params={"year": 2025, "month": 1})

    assert response.json()["total"] == 3

    response = await client.get(BASE, params={"year": 2025, "month": 3})

    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_year_filter_upper_bound(client: AsyncClient, test_expenses):
    response = await client.get(BASE, params={"year": 9998, "month": 12})

    assert response.status_code == 200
    assert response.json()["total"] == 0

    for params in ({"year": 9999}, {"year": 9999, "month": 12}):
        response = await client.get(BASE, params=params)
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_month_filter_requires_year(client: AsyncClient):
    response = await client.get(BASE, params={"month": 1})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_range"


@pytest.mark.asyncio
async def test_create_expense(client: AsyncClient, test_projects):
    response = await client.post(
        BASE,
        json={
            "name": "Cloudflare",
            "amount": 9.99,
            "category": "hosting",
            "paid_at": "2025-02-01T08:00:00",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["id"] is not None
    assert data["amount"] == 9.99
    assert data["project_id"] is None


@pytest.mark.asyncio
async def test_create_expense_converts_aware_timestamps(client: AsyncClient):
    response = await client.post(
        BASE,
        json={
            "name": "Namecheap",
            "amount": 12,
            "category": "domain",
            "paid_at": "2025-02-01T08:00:00+00:00",
        },
    )

    assert response.status_code == 201
    # Stored as naive local time (UTC by default)
    assert response.json()["paid_at"] == "2025-02-01T08:00:00"


@pytest.mark.asyncio
async def test_domain_expense_updates_project_expiry(client: AsyncClient, test_projects):
    recipe = test_projects[0]

    response = await client.post(
        BASE,
        json={
            "name": "recipehub.example renewal",
            "amount": 11.5,
            "category": "domain",
            "project_id": recipe.id,
            "paid_at": "2025-02-01T08:00:00",
            "expires_at": "2026-02-01T00:00:00",
        },
    )
    assert response.status_code == 201

    project = await client.get(f"/api/v1/projects/{recipe.id}")
    assert project.json()["domain_expiry"] == "2026-02-01T00:00:00"


@pytest.mark.asyncio
async def test_create_expense_for_missing_project(client: AsyncClient):
    response = await client.post(
        BASE,
        json={
            "name": "Orphan",
            "amount": 1,
            "category": "tool",
            "project_id": 999,
            "paid_at": "2025-02-01T08:00:00",
        },
    )

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_create_expense_rejects_negative_amount(client: AsyncClient):
    response = await client.post(
        BASE,
        json={"name": "Refund", "amount": -5, "category": "tool", "paid_at": "2025-02-01T08:00:00"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_update_delete_expense(client: AsyncClient, test_expenses):
    expense_id = test_expenses[1].id

    response = await client.get(f"{BASE}/{expense_id}")
    assert response.status_code == 200
    assert response.json()["name"] == "Vercel Pro"

    response = await client.put(f"{BASE}/{expense_id}", json={"amount": 25})
    assert response.status_code == 200
    assert response.json()["amount"] == 25
    assert response.json()["name"] == "Vercel Pro"

    response = await client.delete(f"{BASE}/{expense_id}")
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = await client.get(f"{BASE}/{expense_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_missing_expense(client: AsyncClient):
    response = await client.put(f"{BASE}/999", json={"amount": 1})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stats_endpoint(client: AsyncClient, test_expenses):
    response = await client.get(f"{BASE}/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["this_month"] == 0.2
    assert data["this_year"] == 30.3
    assert data["total"] == 4
    assert data["global_cost"] == 20.0
    assert data["project_cost"] == 10.3


@pytest.mark.asyncio
async def test_stats_for_a_given_month(test_session, test_expenses):
    stats = await ExpenseService(test_session).get_stats(now=datetime(2025, 3, 20))

    assert stats.this_month == 0.2
    assert stats.this_year == 30.3
    assert stats.global_cost == 20.0
    assert stats.project_cost == 10.3


@pytest.mark.asyncio
async def test_monthly_trend_has_twelve_months(test_session, test_expenses):
    trend = await ExpenseService(test_session).get_monthly_trend(now=datetime(2025, 3, 20))

    names = [m.name for m in trend.months]
    assert len(names) == 12
    assert names[0] == "2024-04"
    assert names[-1] == "2025-03"
    amounts = {m.name: m.amount for m in trend.months}
    assert amounts["2025-01"] == 30.1
    assert amounts["2025-02"] == 0.0
    assert amounts["2025-03"] == 0.2


@pytest.mark.asyncio
async def test_monthly_trend_endpoint(client: AsyncClient, test_expenses):
    response = await client.get(f"{BASE}/monthly-trend")

    assert response.status_code == 200
    months = response.json()["months"]
    assert len(months) == 12
    assert months[0]["name"] == "2024-04"
    assert months[-1]["name"] == "2025-03"
    assert {m["name"]: m["amount"] for m in months if m["amount"]} == {
        "2025-01": 30.1,
        "2025-03": 0.2,
    }


@pytest.mark.asyncio
async def test_monthly_trend_endpoint_without_data(client: AsyncClient):
    response = await client.get(f"{BASE}/monthly-trend")

    months = response.json()["months"]
    assert len(months) == 12
    assert all(m["amount"] == 0 for m in months)


@pytest.mark.asyncio
async def test_upcoming_expiries(test_session, test_projects):
    stamp = datetime(2025, 1, 1)
    test_session.add_all([
        Expense(name="soon.example", amount=10, category="domain", paid_at=stamp,
                expires_at=datetime(2025, 1, 25), created_at=stamp, updated_at=stamp),
        Expense(name="later.example", amount=10, category="domain", paid_at=stamp,
                expires_at=datetime(2025, 3, 1), created_at=stamp, updated_at=stamp),
        Expense(name="gone.example", amount=10, category="domain", paid_at=stamp,
                expires_at=datetime(2025, 1, 5), created_at=stamp, updated_at=stamp),
    ])
    await test_session.flush()

    result = await ExpenseService(test_session).get_upcoming_expiries(
        days=30, now=datetime(2025, 1, 10)
    )

    assert result.days == 30
    assert [u.expense.name for u in result.expiries] == ["soon.example"]
    assert result.expiries[0].days_left == 15


@pytest.mark.asyncio
async def test_upcoming_expiries_endpoint_validates_days(client: AsyncClient):
    response = await client.get(f"{BASE}/upcoming", params={"days": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_upcoming_expiries_endpoint(client: AsyncClient, test_session):
    stamp = datetime(2025, 1, 1)
    test_session.add_all([
        Expense(name="renew.example", amount=12, category="domain", paid_at=stamp,
                expires_at=datetime(2025, 4, 1), created_at=stamp, updated_at=stamp),
        Expense(name="expired.example", amount=12, category="domain", paid_at=stamp,
                expires_at=datetime(2025, 3, 1), created_at=stamp, updated_at=stamp),
    ])
    await test_session.flush()

    response = await client.get(f"{BASE}/upcoming")

    assert response.status_code == 200
    data = response.json()
    assert data["days"] == 30
    assert [u["expense"]["name"] for u in data["expiries"]] == ["renew.example"]
    assert data["expiries"][0]["days_left"] == 11
