import logging

from fastapi import APIRouter, Depends, Query, Request

from src.db.models import Asset
from src.db.repo_holder import RepoHolder
from src.services.goal_sync import (
    AssetChangeType,
    GoalSyncError,
    GoalSyncManager,
    create_asset_change_event,
)
from src.web.dependencies import get_goal_sync, get_repo
from src.web.schemas import AssetOut
from src.web.validation import (
    bad_request,
    not_found,
    parse_amount,
    parse_bool,
    parse_optional_amount,
    parse_optional_text,
    parse_optional_uuid,
    parse_text,
    parse_uuid,
    read_json,
    require_fields,
    require_organization_id,
)

router = APIRouter(prefix="/assets", tags=["assets"])


async def sync_after_change(goal_sync: GoalSyncManager, asset: Asset, change_type: AssetChangeType, previous_value=None):
    """Runs the goal sync for an asset mutation that is already committed."""
    event = create_asset_change_event(
        change_type,
        asset.id,
        asset.current_value if change_type != AssetChangeType.DELETE else 0,
        asset.type,
        previous_value,
    )

    try:
        await goal_sync.trigger_sync(asset.organization_id, event)
    except GoalSyncError as e:
        # The asset change stands even when the goals could not be refreshed.
        logging.error(f"Goal sync after asset {change_type.value.lower()} failed ({asset.name}): {e}")


async def get_category_for_organization(repo: RepoHolder, category_id, organization_id):
    category = await repo.asset_category.get_for_organization(category_id, organization_id)

    if category is None:
        raise bad_request("Invalid category ID")

    return category


@router.get("", response_model=list[AssetOut])
async def list_assets(
    organization_id: str | None = Query(None, alias="organizationId"),
    repo: RepoHolder = Depends(get_repo),
):
    assets = await repo.asset.list_for_organization(require_organization_id(organization_id))

    return [AssetOut.model_validate(asset) for asset in assets]


@router.post("", response_model=AssetOut, status_code=201)
async def create_asset(
    request: Request,
    repo: RepoHolder = Depends(get_repo),
    goal_sync: GoalSyncManager = Depends(get_goal_sync),
):
    data = await read_json(request)
    require_fields(
        data,
        ("name", "categoryId", "currentValue", "organizationId"),
        "Name, categoryId, currentValue, and organizationId are required",
    )

    organization_id = parse_uuid(data["organizationId"], "organization ID")
    category_id = parse_uuid(data["categoryId"], "category ID")
    current_value = parse_amount(data["currentValue"], "current value")
    target_value = parse_optional_amount(data.get("targetValue"), "target value")

    await get_category_for_organization(repo, category_id, organization_id)

    asset = await repo.asset.create(
        organization_id=organization_id,
        category_id=category_id,
        name=parse_text(data["name"], "name"),
        description=parse_optional_text(data.get("description"), "description"),
        type=parse_text(data.get("type") or "savings", "type"),
        current_value=current_value,
        target_value=target_value,
    )
    logging.info(f"Asset created: {asset.name} ({asset.id})")

    await sync_after_change(goal_sync, asset, AssetChangeType.CREATE)

    return AssetOut.model_validate(asset)


@router.put("", response_model=AssetOut)
async def update_asset(
    request: Request,
    repo: RepoHolder = Depends(get_repo),
    goal_sync: GoalSyncManager = Depends(get_goal_sync),
):
    data = await read_json(request)
    require_fields(data, ("id", "organizationId"), "Asset ID and organizationId are required")

    asset_id = parse_uuid(data["id"], "asset ID")
    organization_id = parse_uuid(data["organizationId"], "organization ID")
    category_id = parse_optional_uuid(data.get("categoryId"), "category ID")

    asset = await repo.asset.get_for_organization(asset_id, organization_id)

    if asset is None:
        raise not_found("Asset")

    changes = {}

    if data.get("name"):
        changes["name"] = parse_text(data["name"], "name")
    if "description" in data:
        changes["description"] = parse_optional_text(data["description"], "description")
    if category_id:
        await get_category_for_organization(repo, category_id, organization_id)
        changes["category_id"] = category_id
    if "currentValue" in data:
        changes["current_value"] = parse_amount(data["currentValue"], "current value")
    if "targetValue" in data:
        changes["target_value"] = parse_optional_amount(data["targetValue"], "target value")
    if "isActive" in data:
        changes["is_active"] = parse_bool(data["isActive"], "isActive")

    previous_value = asset.current_value
    asset = await repo.asset.update(asset, **changes)

    if "current_value" in changes or "is_active" in changes:
        await sync_after_change(goal_sync, asset, AssetChangeType.UPDATE, previous_value)

    return AssetOut.model_validate(asset)


@router.delete("")
async def delete_asset(
    asset_id: str | None = Query(None, alias="id"),
    organization_id: str | None = Query(None, alias="organizationId"),
    repo: RepoHolder = Depends(get_repo),
    goal_sync: GoalSyncManager = Depends(get_goal_sync),
):
    if not asset_id or not organization_id:
        raise bad_request("Asset ID and organizationId are required")

    asset = await repo.asset.get_for_organization(
        parse_uuid(asset_id, "asset ID"),
        parse_uuid(organization_id, "organization ID"),
    )

    if asset is None:
        raise not_found("Asset")

    previous_value = asset.current_value
    await repo.asset.delete(asset)
    logging.info(f"Asset deleted: {asset.name} ({asset.id})")

    await sync_after_change(goal_sync, asset, AssetChangeType.DELETE, previous_value)

    return {"message": "Asset deleted successfully"}
