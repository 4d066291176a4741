import pytest
from httpx import AsyncClient


PROJECTS = "/api/v1/projects"
BACKLINKS = "/api/v1/backlinks"


@pytest.mark.asyncio
async def test_list_projects_with_health_and_counts(
    client: AsyncClient, test_projects, test_backlinks
):
    response = await client.get(PROJECTS)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    by_name = {p["name"]: p for p in data["projects"]}

    recipe = by_name["Recipe Hub"]
    assert recipe["backlink_count"] == 2
    assert recipe["live_backlink_count"] == 1
    # Never updated counts as stale
    assert recipe["health_status"] == "danger"
    assert "Never updated" in recipe["health_reasons"]

    gadgets = by_name["Gadget Reviews"]
    assert gadgets["backlink_count"] == 1
    assert gadgets["live_backlink_count"] == 1


@pytest.mark.asyncio
async def test_touch_project_refreshes_health(client: AsyncClient, test_projects):
    recipe, gadgets = test_projects

    response = await client.post(f"{PROJECTS}/{recipe.id}/touch")

    assert response.status_code == 200
    data = response.json()
    assert data["last_manual_update"] == "2025-03-20T12:00:00"
    assert data["health_status"] == "good"

    response = await client.post(f"{PROJECTS}/{gadgets.id}/touch")

    assert response.json()["health_status"] == "warning"
    assert response.json()["health_reasons"] == ["AdSense limited"]


@pytest.mark.asyncio
async def test_create_and_get_project(client: AsyncClient):
    response = await client.post(
        PROJECTS,
        json={
            "name": "Travel Notes",
            "site_url": "https://travel.example",
            "adsense_status": "reviewing",
            "domain_expiry": "2030-01-01T00:00:00",
        },
    )

    assert response.status_code == 201
    created = response.json()
    assert created["status"] == "active"
    assert created["adsense_status"] == "reviewing"
    assert created["backlink_count"] == 0

    response = await client.get(f"{PROJECTS}/{created['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Travel Notes"


@pytest.mark.asyncio
async def test_domain_expiry_health_uses_request_clock(client: AsyncClient):
    response = await client.post(
        PROJECTS,
        json={
            "name": "Expiring Soon",
            "domain_expiry": "2025-04-01T00:00:00",
            "last_content_update": "2025-03-19T00:00:00",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["health_status"] == "danger"
    assert data["health_reasons"] == ["Domain expires in 11 days"]


@pytest.mark.asyncio
async def test_create_project_requires_name(client: AsyncClient):
    response = await client.post(PROJECTS, json={"name": ""})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_project(client: AsyncClient, test_projects):
    recipe = test_projects[0]

    response = await client.put(
        f"{PROJECTS}/{recipe.id}", json={"status": "sold", "notes": "Sold on Flippa"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "sold"
    assert data["notes"] == "Sold on Flippa"
    assert data["name"] == "Recipe Hub"


@pytest.mark.asyncio
async def test_missing_project_returns_404(client: AsyncClient):
    assert (await client.get(f"{PROJECTS}/999")).status_code == 404
    assert (await client.put(f"{PROJECTS}/999", json={"notes": "x"})).status_code == 404
    assert (await client.delete(f"{PROJECTS}/999")).status_code == 404
    assert (await client.post(f"{PROJECTS}/999/touch")).status_code == 404
    assert (await client.get(f"{PROJECTS}/999/expenses")).status_code == 404


@pytest.mark.asyncio
async def test_delete_project_removes_backlinks_keeps_expenses(
    client: AsyncClient, test_projects, test_expenses, test_backlinks
):
    recipe = test_projects[0]
    domain_expense_id = test_expenses[0].id

    response = await client.delete(f"{PROJECTS}/{recipe.id}")
    assert response.status_code == 200

    response = await client.get(BACKLINKS)
    assert response.json()["stats"]["total"] == 1

    response = await client.get("/api/v1/expenses", params={"global_only": True})
    ids = [e["id"] for e in response.json()["expenses"]]
    assert domain_expense_id in ids


@pytest.mark.asyncio
async def test_project_expenses(client: AsyncClient, test_projects, test_expenses):
    gadgets = test_projects[1]

    response = await client.get(f"{PROJECTS}/{gadgets.id}/expenses")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["total_amount"] == 0.3


@pytest.mark.asyncio
async def test_project_backlinks_stats(client: AsyncClient, test_projects, test_backlinks):
    recipe = test_projects[0]

    response = await client.get(f"{PROJECTS}/{recipe.id}/backlinks")

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats == {"total": 2, "live": 1, "total_cost": 5.0}


@pytest.mark.asyncio
async def test_create_backlink(client: AsyncClient, test_projects):
    recipe = test_projects[0]

    response = await client.post(
        BACKLINKS,
        json={
            "project_id": recipe.id,
            "target_url": "https://recipehub.example/pasta",
            "source_url": "https://foodblog.example/roundup",
            "anchor_text": "best pasta",
            "da_score": 35,
            "cost": 20,
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "planned"
    assert data["cost"] == 20
    assert data["created_at"] is not None


@pytest.mark.asyncio
async def test_create_backlink_for_missing_project(client: AsyncClient):
    response = await client.post(
        BACKLINKS,
        json={"project_id": 999, "target_url": "https://a.example", "source_url": "https://b.example"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_mark_backlink_live(client: AsyncClient, test_backlinks):
    planned = test_backlinks[1]

    response = await client.put(f"{BACKLINKS}/{planned.id}", json={"status": "live"})

    assert response.status_code == 200
    assert response.json()["status"] == "live"

    response = await client.get(BACKLINKS, params={"project_id": planned.project_id})
    assert response.json()["stats"]["live"] == 2


@pytest.mark.asyncio
async def test_backlink_invalid_status(client: AsyncClient, test_backlinks):
    response = await client.put(f"{BACKLINKS}/{test_backlinks[0].id}", json={"status": "bogus"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_backlink(client: AsyncClient, test_backlinks):
    backlink_id = test_backlinks[2].id

    response = await client.delete(f"{BACKLINKS}/{backlink_id}")
    assert response.status_code == 200

    response = await client.get(f"{BACKLINKS}/{backlink_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_export(client: AsyncClient, test_projects, test_expenses, test_backlinks):
    response = await client.get("/api/v1/export")

    assert response.status_code == 200
    data = response.json()
    assert data["version"] == "1.1.0"
    assert data["exported_at"] == "2025-03-20T12:00:00"
    assert data["data"]["github_accounts"] == []
    assert data["data"]["link_resources"] == []
    assert len(data["data"]["projects"]) == 2
    assert len(data["data"]["backlinks"]) == 3
    assert len(data["data"]["expenses"]) == 4


@pytest.mark.asyncio
async def test_health_endpoints(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

    response = await client.get("/api/v1/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"
