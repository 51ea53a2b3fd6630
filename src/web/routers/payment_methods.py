from fastapi import APIRouter, Depends, Query, Request

from src.db.repo_holder import RepoHolder
from src.web.dependencies import get_repo
from src.web.schemas import PaymentMethodOut
from src.web.validation import (
    bad_request,
    not_found,
    parse_bool,
    parse_choice,
    parse_optional_text,
    parse_text,
    parse_uuid,
    read_json,
    require_fields,
    require_organization_id,
)

router = APIRouter(prefix="/payment-methods", tags=["payment-methods"])

PAYMENT_METHOD_TYPES = ("cash", "card", "account", "other")


def parse_last_four_digits(value) -> str | None:
    if value in (None, ""):
        return None
    if not isinstance(value, str) or len(value) != 4 or not value.isdigit():
        raise bad_request("Invalid lastFourDigits. Must be exactly 4 digits.")
    return value


@router.get("", response_model=list[PaymentMethodOut])
async def list_payment_methods(
    organization_id: str | None = Query(None, alias="organizationId"),
    active_only: bool = Query(False, alias="activeOnly"),
    repo: RepoHolder = Depends(get_repo),
):
    organization_id = require_organization_id(organization_id)

    if active_only:
        methods = await repo.payment_method.get_all_active(organization_id)
    else:
        methods = await repo.payment_method.list_for_organization(organization_id)

    return [PaymentMethodOut.model_validate(method) for method in methods]


@router.post("", response_model=PaymentMethodOut, status_code=201)
async def create_payment_method(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(data, ("name", "type", "organizationId"), "Name, type, and organizationId are required")

    method = await repo.payment_method.create(
        organization_id=require_organization_id(data["organizationId"]),
        name=parse_text(data["name"], "name"),
        type=parse_choice(data["type"], PAYMENT_METHOD_TYPES, "type"),
        bank_name=parse_optional_text(data.get("bankName"), "bankName"),
        card_company=parse_optional_text(data.get("cardCompany"), "cardCompany"),
        last_four_digits=parse_last_four_digits(data.get("lastFourDigits")),
    )

    return PaymentMethodOut.model_validate(method)


@router.put("", response_model=PaymentMethodOut)
async def update_payment_method(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(data, ("id", "organizationId"), "Payment method ID and organizationId are required")

    method = await repo.payment_method.get_for_organization(
        parse_uuid(data["id"], "payment method ID"),
        require_organization_id(data["organizationId"]),
    )

    if method is None:
        raise not_found("Payment method")

    changes = {}

    if data.get("name"):
        changes["name"] = parse_text(data["name"], "name")
    if data.get("type"):
        changes["type"] = parse_choice(data["type"], PAYMENT_METHOD_TYPES, "type")
    if "bankName" in data:
        changes["bank_name"] = parse_optional_text(data["bankName"], "bankName")
    if "cardCompany" in data:
        changes["card_company"] = parse_optional_text(data["cardCompany"], "cardCompany")
    if "lastFourDigits" in data:
        changes["last_four_digits"] = parse_last_four_digits(data["lastFourDigits"])
    if "isActive" in data:
        changes["is_active"] = parse_bool(data["isActive"], "isActive")

    method = await repo.payment_method.update(method, **changes)

    return PaymentMethodOut.model_validate(method)


@router.delete("")
async def delete_payment_method(
    method_id: str | None = Query(None, alias="id"),
    organization_id: str | None = Query(None, alias="organizationId"),
    repo: RepoHolder = Depends(get_repo),
):
    if not method_id or not organization_id:
        raise bad_request("Payment method ID and organizationId are required")

    method = await repo.payment_method.get_for_organization(
        parse_uuid(method_id, "payment method ID"),
        parse_uuid(organization_id, "organization ID"),
    )

    if method is None:
        raise not_found("Payment method")

    await repo.payment_method.delete(method)

    return {"message": "Payment method deleted successfully"}
