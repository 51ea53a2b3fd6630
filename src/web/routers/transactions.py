import datetime as dt

from fastapi import APIRouter, Depends, Query, Request

from src.db.repo_holder import RepoHolder
from src.web.dependencies import get_repo
from src.web.routers.categories import TRANSACTION_TYPES
from src.web.schemas import TransactionOut
from src.web.validation import (
    bad_request,
    not_found,
    parse_amount,
    parse_choice,
    parse_non_negative_int,
    parse_optional_date,
    parse_optional_text,
    parse_optional_uuid,
    parse_uuid,
    read_json,
    require_fields,
    require_organization_id,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])


async def check_references(repo: RepoHolder, organization_id, category_id=None, payment_method_id=None) -> None:
    """Category and payment method must belong to the same organization as the transaction."""
    if category_id and await repo.category.get_for_organization(category_id, organization_id) is None:
        raise bad_request("Invalid category ID")

    if payment_method_id and await repo.payment_method.get_for_organization(payment_method_id, organization_id) is None:
        raise bad_request("Invalid payment method ID")


@router.get("", response_model=list[TransactionOut])
async def list_transactions(
    organization_id: str | None = Query(None, alias="organizationId"),
    category_id: str | None = Query(None, alias="categoryId"),
    transaction_type: str | None = Query(None, alias="type"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    limit: str | None = None,
    offset: str | None = None,
    repo: RepoHolder = Depends(get_repo),
):
    transactions = await repo.transaction.search(
        require_organization_id(organization_id),
        category_id=parse_optional_uuid(category_id, "category ID"),
        transaction_type=transaction_type,
        start_date=parse_optional_date(start_date, "start date"),
        end_date=parse_optional_date(end_date, "end date"),
        limit=parse_non_negative_int(limit, "limit"),
        offset=parse_non_negative_int(offset, "offset"),
    )

    return [TransactionOut.model_validate(transaction) for transaction in transactions]


@router.post("", response_model=TransactionOut, status_code=201)
async def create_transaction(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(
        data,
        ("categoryId", "amount", "transactionType", "organizationId", "userId"),
        "categoryId, amount, transactionType, organizationId, and userId are required",
    )

    organization_id = require_organization_id(data["organizationId"])
    category_id = parse_uuid(data["categoryId"], "category ID")
    payment_method_id = parse_optional_uuid(data.get("paymentMethodId"), "payment method ID")
    await check_references(repo, organization_id, category_id, payment_method_id)

    transaction = await repo.transaction.create(
        organization_id=organization_id,
        user_id=parse_uuid(data["userId"], "user ID"),
        category_id=category_id,
        payment_method_id=payment_method_id,
        amount=parse_amount(data["amount"], "amount"),
        description=parse_optional_text(data.get("description"), "description"),
        transaction_date=parse_optional_date(data.get("transactionDate"), "transaction date") or dt.date.today(),
        transaction_type=parse_choice(data["transactionType"], TRANSACTION_TYPES, "transaction type"),
    )

    return TransactionOut.model_validate(transaction)


@router.put("", response_model=TransactionOut)
async def update_transaction(request: Request, repo: RepoHolder = Depends(get_repo)):
    data = await read_json(request)
    require_fields(data, ("id", "organizationId"), "Transaction ID and organizationId are required")

    organization_id = require_organization_id(data["organizationId"])
    transaction = await repo.transaction.get_for_organization(
        parse_uuid(data["id"], "transaction ID"), organization_id
    )

    if transaction is None:
        raise not_found("Transaction")

    changes = {}

    if data.get("categoryId"):
        changes["category_id"] = parse_uuid(data["categoryId"], "category ID")
    if data.get("paymentMethodId"):
        changes["payment_method_id"] = parse_uuid(data["paymentMethodId"], "payment method ID")
    if "amount" in data:
        changes["amount"] = parse_amount(data["amount"], "amount")
    if "description" in data:
        changes["description"] = parse_optional_text(data["description"], "description")
    if data.get("transactionDate"):
        changes["transaction_date"] = parse_optional_date(data["transactionDate"], "transaction date")
    if data.get("transactionType"):
        changes["transaction_type"] = parse_choice(data["transactionType"], TRANSACTION_TYPES, "transaction type")

    await check_references(repo, organization_id, changes.get("category_id"), changes.get("payment_method_id"))
    transaction = await repo.transaction.update(transaction, **changes)

    return TransactionOut.model_validate(transaction)


@router.delete("")
async def delete_transaction(
    transaction_id: str | None = Query(None, alias="id"),
    organization_id: str | None = Query(None, alias="organizationId"),
    repo: RepoHolder = Depends(get_repo),
):
    if not transaction_id or not organization_id:
        raise bad_request("Transaction ID and organizationId are required")

    transaction = await repo.transaction.get_for_organization(
        parse_uuid(transaction_id, "transaction ID"),
        parse_uuid(organization_id, "organization ID"),
    )

    if transaction is None:
        raise not_found("Transaction")

    await repo.transaction.delete(transaction)

    return {"message": "Transaction deleted successfully"}
