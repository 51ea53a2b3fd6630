from fastapi import APIRouter, Depends, Query, Request

from src.db.repo_holder import RepoHolder
from src.services.initial_data import check_and_create_initial_data
from src.web.dependencies import get_repo
from src.web.schemas import OrganizationOut, OrganizationSummaryOut
from src.web.validation import (
    bad_request,
    not_found,
    parse_optional_text,
    parse_text,
    parse_uuid,
    read_json,
    require_fields,
)

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get("", response_model=list[OrganizationSummaryOut])
async def list_organizations(user_id: str | None = Query(None, alias="userId"), repo: RepoHolder = Depends(get_repo)):
    """Organizations the user is a member of, with their role and entity counts."""
    if not user_id:
        raise bad_request("User ID is required")

    memberships = await repo.organization.get_for_user(parse_uuid(user_id, "user ID"))
    summaries = []

    for organization, role in memberships:
        summaries.append(
            OrganizationSummaryOut(
                id=organization.id,
                name=organization.name,
                description=organization.description,
                created_at=organization.created_at,
                role=role,
                member_count=await repo.member.count_for_organization(organization.id),
                transaction_count=await repo.transaction.count_for_organization(organization.id),
                asset_count=await repo.asset.count_for_organization(organization.id),
            )
        )

    return summaries


@router.post("", response_model=OrganizationOut, status_code=201)
async def create_organization(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(data, ("name", "createdBy"), "Name and createdBy are required")

    organization = await repo.organization.create_with_admin(
        name=parse_text(data["name"], "name"),
        description=parse_optional_text(data.get("description"), "description"),
        created_by=parse_uuid(data["createdBy"], "createdBy ID"),
    )
    await check_and_create_initial_data(repo, organization.id)

    return OrganizationOut.model_validate(organization)


@router.get("/{organization_id}/check-membership", response_model=OrganizationOut)
async def check_membership(
    organization_id: str,
    user_id: str | None = Query(None, alias="userId"),
    repo: RepoHolder = Depends(get_repo),
):
    if not user_id or not organization_id:
        raise bad_request("User ID and Organization ID are required")

    membership = await repo.member.get_membership(
        parse_uuid(organization_id, "organization ID"),
        parse_uuid(user_id, "user ID"),
    )

    if membership is None:
        raise not_found("Organization")

    return OrganizationOut.model_validate(membership.organization)


@router.post("/{organization_id}/initial-data")
async def create_organization_initial_data(organization_id: str, repo: RepoHolder = Depends(get_repo)):
    """Fills in default categories and payment methods for an organization that has none."""
    organization = await repo.organization.get_by_id(parse_uuid(organization_id, "organization ID"))

    if organization is None:
        raise not_found("Organization")

    result = await check_and_create_initial_data(repo, organization.id)

    if result is None:
        return {"success": True, "data": None, "message": "Initial data already exists"}

    return {
        "success": True,
        "data": {"categories": result["categories"], "paymentMethods": result["payment_methods"]},
        "message": "Initial data created",
    }
