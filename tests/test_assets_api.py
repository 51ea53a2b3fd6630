import uuid
from decimal import Decimal

from src.services.goal_sync import GoalSyncError


async def create_asset(client, organization, category, **data):
    payload = {
        "name": "Emergency fund",
        "categoryId": str(category.id),
        "currentValue": 1500,
        "organizationId": str(organization.id),
        **data,
    }
    return await client.post("/api/assets", json=payload)


async def test_list_is_empty_for_new_organization(client):
    response = await client.get("/api/assets", params={"organizationId": str(uuid.uuid4())})

    assert response.status_code == 200
    assert response.json() == []


async def test_list_requires_organization(client):
    response = await client.get("/api/assets")

    assert response.status_code == 400
    assert response.json() == {"error": "Organization ID is required"}


async def test_list_rejects_malformed_organization(client):
    response = await client.get("/api/assets", params={"organizationId": "not-a-uuid"})

    assert response.status_code == 400
    assert "valid UUID" in response.json()["error"]


async def test_create_asset(client, organization, asset_category):
    response = await create_asset(client, organization, asset_category, description="Rainy days")

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Emergency fund"
    assert body["currentValue"] == 1500.0
    assert body["organizationId"] == str(organization.id)
    assert body["type"] == "savings"
    assert body["isActive"] is True


async def test_create_without_current_value_creates_nothing(client, organization, asset_category):
    response = await client.post(
        "/api/assets",
        json={"name": "Cash", "categoryId": str(asset_category.id), "organizationId": str(organization.id)},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Name, categoryId, currentValue, and organizationId are required"}

    listing = await client.get("/api/assets", params={"organizationId": str(organization.id)})
    assert listing.json() == []


async def test_create_rejects_non_numeric_value(client, organization, asset_category):
    for value in ("NaN", "Infinity", "lots", True):
        response = await create_asset(client, organization, asset_category, currentValue=value)
        assert response.status_code == 400


async def test_create_rejects_category_of_another_organization(client, repo, organization):
    other = await repo.organization.create_with_admin(name="Other", description=None, created_by=uuid.uuid4())
    foreign_category = await repo.asset_category.create(organization_id=other.id, name="Cash", type="cash")

    response = await create_asset(client, organization, foreign_category)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid category ID"}


async def test_create_syncs_goals(client, repo, organization, asset_category):
    goal = await repo.goal.create(organization_id=organization.id, name="Cushion", target_amount=Decimal(1000))

    response = await create_asset(client, organization, asset_category, currentValue="1,200.50")

    assert response.status_code == 201
    await repo.session.refresh(goal)
    assert goal.current_amount == Decimal("1200.50")
    assert goal.status == "completed"


async def test_sync_failure_does_not_fail_the_request(client, app, organization, asset_category, monkeypatch):
    async def failing_sync(organization_id, event):
        raise GoalSyncError(organization_id, RuntimeError("database went away"))

    monkeypatch.setattr(app.state.goal_sync, "trigger_sync", failing_sync)

    response = await create_asset(client, organization, asset_category)

    assert response.status_code == 201
    listing = await client.get("/api/assets", params={"organizationId": str(organization.id)})
    assert len(listing.json()) == 1


async def test_update_with_mismatched_organization(client, organization, asset_category):
    asset = (await create_asset(client, organization, asset_category)).json()

    response = await client.put(
        "/api/assets",
        json={"id": asset["id"], "organizationId": str(uuid.uuid4()), "currentValue": 1},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Asset not found or access denied"}


async def test_update_value_resyncs_goals(client, repo, organization, asset_category):
    goal = await repo.goal.create(organization_id=organization.id, name="House", target_amount=Decimal(100000))
    asset = (await create_asset(client, organization, asset_category)).json()

    response = await client.put(
        "/api/assets",
        json={"id": asset["id"], "organizationId": str(organization.id), "currentValue": 4000, "name": "Deposit"},
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Deposit"
    await repo.session.refresh(goal)
    assert goal.current_amount == Decimal(4000)


async def test_deactivating_asset_removes_it_from_goals(client, repo, organization, asset_category):
    goal = await repo.goal.create(organization_id=organization.id, name="House", target_amount=Decimal(100000))
    asset = (await create_asset(client, organization, asset_category)).json()

    response = await client.put(
        "/api/assets",
        json={"id": asset["id"], "organizationId": str(organization.id), "isActive": False},
    )

    assert response.status_code == 200
    await repo.session.refresh(goal)
    assert goal.current_amount == Decimal(0)


async def test_delete_asset(client, repo, organization, asset_category):
    goal = await repo.goal.create(organization_id=organization.id, name="House", target_amount=Decimal(100000))
    asset = (await create_asset(client, organization, asset_category)).json()

    mismatched = await client.delete("/api/assets", params={"id": asset["id"], "organizationId": str(uuid.uuid4())})
    assert mismatched.status_code == 404

    response = await client.delete("/api/assets", params={"id": asset["id"], "organizationId": str(organization.id)})

    assert response.status_code == 200
    assert response.json() == {"message": "Asset deleted successfully"}
    await repo.session.refresh(goal)
    assert goal.current_amount == Decimal(0)


async def test_create_rejects_non_string_name(client, organization, asset_category):
    response = await create_asset(client, organization, asset_category, name={"x": 1})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid name. Must be a string."}

    listing = await client.get("/api/assets", params={"organizationId": str(organization.id)})
    assert listing.json() == []


async def test_update_rejects_non_boolean_is_active(client, repo, organization, asset_category):
    asset = (await create_asset(client, organization, asset_category)).json()

    response = await client.put(
        "/api/assets", json={"id": asset["id"], "organizationId": str(organization.id), "isActive": "false"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid isActive. Must be a boolean."}

    stored = await repo.asset.get_by_id(uuid.UUID(asset["id"]))
    await repo.session.refresh(stored)
    assert stored.is_active is True
