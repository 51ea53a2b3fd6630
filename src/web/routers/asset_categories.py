from fastapi import APIRouter, Depends, Query, Request

from src.db.repo_holder import RepoHolder
from src.web.dependencies import get_repo
from src.web.schemas import AssetCategoryOut
from src.web.validation import (
    parse_choice,
    parse_optional_text,
    parse_text,
    read_json,
    require_fields,
    require_organization_id,
)

router = APIRouter(prefix="/asset-categories", tags=["asset-categories"])

ASSET_CATEGORY_TYPES = ("real_estate", "financial", "investment", "retirement", "cash", "other")


@router.get("", response_model=list[AssetCategoryOut])
async def list_asset_categories(
    organization_id: str | None = Query(None, alias="organizationId"),
    repo: RepoHolder = Depends(get_repo),
):
    categories = await repo.asset_category.list_for_organization(require_organization_id(organization_id))

    return [AssetCategoryOut.model_validate(category) for category in categories]


@router.post("", response_model=AssetCategoryOut, status_code=201)
async def create_asset_category(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(data, ("name", "type", "organizationId"), "Name, type, and organizationId are required")

    category = await repo.asset_category.create(
        organization_id=require_organization_id(data["organizationId"]),
        name=parse_text(data["name"], "name"),
        type=parse_choice(data["type"], ASSET_CATEGORY_TYPES, "type"),
        icon=parse_optional_text(data.get("icon"), "icon"),
        color=parse_optional_text(data.get("color"), "color"),
    )

    return AssetCategoryOut.model_validate(category)
