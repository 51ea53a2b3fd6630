from fastapi import APIRouter, Depends, Query, Request

from src.db.repo_holder import RepoHolder
from src.web.dependencies import get_repo
from src.web.schemas import LiabilityOut
from src.web.validation import (
    parse_amount,
    parse_choice,
    parse_optional_amount,
    parse_optional_date,
    parse_optional_text,
    parse_text,
    parse_uuid,
    read_json,
    require_fields,
    require_organization_id,
)

router = APIRouter(prefix="/liabilities", tags=["liabilities"])

LIABILITY_TYPES = ("mortgage", "personal_loan", "credit_card", "student_loan", "other")


@router.get("", response_model=list[LiabilityOut])
async def list_liabilities(
    organization_id: str | None = Query(None, alias="organizationId"),
    repo: RepoHolder = Depends(get_repo),
):
    liabilities = await repo.liability.list_for_organization(require_organization_id(organization_id))

    return [LiabilityOut.model_validate(liability) for liability in liabilities]


@router.post("", response_model=LiabilityOut, status_code=201)
async def create_liability(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(
        data,
        ("name", "type", "currentAmount", "organizationId", "createdBy"),
        "Name, type, currentAmount, organizationId, and createdBy are required",
    )

    liability = await repo.liability.create(
        organization_id=require_organization_id(data["organizationId"]),
        created_by=parse_uuid(data["createdBy"], "createdBy ID"),
        name=parse_text(data["name"], "name"),
        type=parse_choice(data["type"], LIABILITY_TYPES, "type"),
        description=parse_optional_text(data.get("description"), "description"),
        current_amount=parse_amount(data["currentAmount"], "current amount"),
        original_amount=parse_optional_amount(data.get("originalAmount"), "original amount"),
        interest_rate=parse_optional_amount(data.get("interestRate"), "interest rate"),
        monthly_payment=parse_optional_amount(data.get("monthlyPayment"), "monthly payment"),
        due_date=parse_optional_date(data.get("dueDate"), "due date"),
    )

    return LiabilityOut.model_validate(liability)
