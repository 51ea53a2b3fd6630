import datetime as dt
import uuid
from decimal import Decimal

import pytest

from conftest import as_user
from src.services.dashboard import calculate_percentage_change, month_range, previous_month_range


@pytest.mark.parametrize(
    ("current", "previous", "expected"),
    [
        (Decimal(0), Decimal(0), 0),
        (Decimal(5), Decimal(0), 100),
        (Decimal(150), Decimal(100), 50),
        (Decimal(50), Decimal(200), -75),
        (Decimal("100.5"), Decimal(100), 1),
    ],
)
def test_percentage_change(current, previous, expected):
    assert calculate_percentage_change(current, previous) == expected


def test_month_ranges():
    assert month_range(dt.date(2024, 2, 14)) == month_range(dt.date(2024, 2, 1))
    assert month_range(dt.date(2024, 2, 14)).end == dt.date(2024, 2, 29)
    assert previous_month_range(dt.date(2024, 1, 31)).start == dt.date(2023, 12, 1)
    assert previous_month_range(dt.date(2024, 1, 31)).end == dt.date(2023, 12, 31)


async def add_transaction(repo, organization, user_id, amount, transaction_type, day, category=None):
    return await repo.transaction.create(
        organization_id=organization.id,
        user_id=user_id,
        category_id=category.id if category else None,
        amount=Decimal(amount),
        transaction_date=day,
        transaction_type=transaction_type,
    )


async def test_dashboard(client, repo, organization, asset_category, user_id):
    this_month = month_range(dt.date.today()).start
    last_month = previous_month_range(dt.date.today()).start

    await repo.asset.create(
        organization_id=organization.id, category_id=asset_category.id, name="Savings", current_value=Decimal(5000)
    )
    await repo.asset.create(
        organization_id=organization.id,
        category_id=asset_category.id,
        name="Old account",
        current_value=Decimal(1000),
        is_active=False,
    )
    await repo.liability.create(
        organization_id=organization.id, name="Car loan", type="personal_loan", current_amount=Decimal(1200)
    )

    salary = await repo.category.create(organization_id=organization.id, name="Salary", transaction_type="income")
    food = await repo.category.create(
        organization_id=organization.id, name="Food", transaction_type="expense", icon="utensils", color="#ff8800"
    )
    rent = await repo.category.create(organization_id=organization.id, name="Rent", transaction_type="expense")

    await add_transaction(repo, organization, user_id, 3000, "income", this_month, salary)
    await add_transaction(repo, organization, user_id, 200, "expense", this_month, food)
    await add_transaction(repo, organization, user_id, 800, "expense", this_month, rent)
    await add_transaction(repo, organization, user_id, 50, "expense", this_month)
    await add_transaction(repo, organization, user_id, 2000, "income", last_month, salary)
    await add_transaction(repo, organization, user_id, 800, "expense", last_month, rent)

    response = await client.get(
        "/api/dashboard", params={"organizationId": str(organization.id)}, headers=as_user(user_id)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["financial"] == {
        "totalAssets": 5000.0,
        "totalLiabilities": 1200.0,
        "netWorth": 3800.0,
        "currentMonthIncome": 3000.0,
        "currentMonthExpenses": 1050.0,
        "currentMonthNetIncome": 1950.0,
        "incomeChange": 50,
        "expenseChange": 31,
    }
    assert [(item["categoryName"], item["amount"]) for item in body["expensesByCategory"]] == [
        ("Rent", 800.0),
        ("Food", 200.0),
        ("Uncategorized", 50.0),
    ]
    assert body["expensesByCategory"][1]["icon"] == "utensils"
    assert body["expensesByCategory"][1]["color"] == "#ff8800"
    assert body["expensesByCategory"][2]["categoryId"] is None

    recent = body["recentTransactions"]
    assert len(recent) == 6
    assert [item["date"] for item in recent[-2:]] == [last_month.isoformat()] * 2
    assert "Uncategorized" in {item["categoryName"] for item in recent}
    assert body["meta"]["currentMonth"] == this_month.strftime("%Y-%m")


async def test_dashboard_limits_recent_transactions(client, repo, organization, user_id):
    for day in range(12):
        await add_transaction(repo, organization, user_id, 10, "expense", dt.date(2024, 1, day + 1))

    response = await client.get(
        "/api/dashboard", params={"organizationId": str(organization.id)}, headers=as_user(user_id)
    )

    recent = response.json()["recentTransactions"]
    assert len(recent) == 10
    assert recent[0]["date"] == "2024-01-12"


async def test_empty_dashboard(client, organization, user_id):
    response = await client.get(
        "/api/dashboard", params={"organizationId": str(organization.id)}, headers=as_user(user_id)
    )

    body = response.json()
    assert body["financial"]["netWorth"] == 0
    assert body["financial"]["incomeChange"] == 0
    assert body["recentTransactions"] == []
    assert body["expensesByCategory"] == []


async def test_dashboard_requires_membership(client, organization):
    unauthenticated = await client.get("/api/dashboard", params={"organizationId": str(organization.id)})
    assert unauthenticated.status_code == 401

    outsider = await client.get(
        "/api/dashboard", params={"organizationId": str(organization.id)}, headers=as_user(uuid.uuid4())
    )
    assert outsider.status_code == 403
