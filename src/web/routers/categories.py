from fastapi import APIRouter, Depends, Query, Request

from src.db.repo_holder import RepoHolder
from src.web.dependencies import get_repo
from src.web.schemas import CategoryOut
from src.web.validation import (
    bad_request,
    parse_choice,
    parse_optional_text,
    parse_optional_uuid,
    parse_text,
    read_json,
    require_fields,
    require_organization_id,
)

router = APIRouter(prefix="/transaction-categories", tags=["transaction-categories"])

TRANSACTION_TYPES = ("income", "expense", "transfer")
MAX_CATEGORY_LEVEL = 3


@router.get("", response_model=list[CategoryOut])
async def list_categories(
    organization_id: str | None = Query(None, alias="organizationId"),
    transaction_type: str | None = Query(None, alias="type"),
    repo: RepoHolder = Depends(get_repo),
):
    categories = await repo.category.list_for_organization(require_organization_id(organization_id), transaction_type)

    return [CategoryOut.model_validate(category) for category in categories]


@router.post("", response_model=CategoryOut, status_code=201)
async def create_category(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(data, ("name", "type", "organizationId"), "Name, type, and organizationId are required")

    organization_id = require_organization_id(data["organizationId"])
    transaction_type = parse_choice(data["type"], TRANSACTION_TYPES, "type")
    parent_id = parse_optional_uuid(data.get("parentId"), "parent category ID")

    level = 1
    if parent_id:
        parent = await repo.category.get_for_organization(parent_id, organization_id)

        if parent is None:
            raise bad_request("Invalid parent category ID")
        if parent.level >= MAX_CATEGORY_LEVEL:
            raise bad_request(f"Categories can be nested at most {MAX_CATEGORY_LEVEL} levels deep")

        level = parent.level + 1

    category = await repo.category.create(
        organization_id=organization_id,
        name=parse_text(data["name"], "name"),
        transaction_type=transaction_type,
        level=level,
        parent_id=parent_id,
        icon=parse_optional_text(data.get("icon"), "icon"),
        color=parse_optional_text(data.get("color"), "color"),
    )

    return CategoryOut.model_validate(category)
