"""Financial overview shown on the organization's dashboard."""
import calendar
import datetime as dt
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from src.db.repo_holder import RepoHolder

RECENT_TRANSACTIONS_LIMIT = 10
UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class MonthRange:
    start: dt.date
    end: dt.date


def month_range(day: dt.date) -> MonthRange:
    last_day = calendar.monthrange(day.year, day.month)[1]
    return MonthRange(start=day.replace(day=1), end=day.replace(day=last_day))


def previous_month_range(day: dt.date) -> MonthRange:
    return month_range(day.replace(day=1) - dt.timedelta(days=1))


def calculate_percentage_change(current: Decimal, previous: Decimal) -> int:
    """Month-over-month change in whole percent; growth from zero counts as 100."""
    if previous == 0:
        return 100 if current > 0 else 0

    change = (Decimal(current) - Decimal(previous)) / Decimal(previous) * 100
    return int(change.quantize(Decimal(1), rounding=ROUND_HALF_UP))


async def build_dashboard(repo: RepoHolder, organization_id: uuid.UUID, today: dt.date | None = None) -> dict:
    today = today or dt.date.today()
    current = month_range(today)
    previous = previous_month_range(today)

    total_assets = await repo.asset.get_total_active_value(organization_id)
    total_liabilities = await repo.liability.get_total_amount(organization_id)

    income = await repo.transaction.get_total_amount(organization_id, "income", current.start, current.end)
    expenses = await repo.transaction.get_total_amount(organization_id, "expense", current.start, current.end)
    last_income = await repo.transaction.get_total_amount(organization_id, "income", previous.start, previous.end)
    last_expenses = await repo.transaction.get_total_amount(organization_id, "expense", previous.start, previous.end)

    recent = await repo.transaction.get_recent(organization_id, RECENT_TRANSACTIONS_LIMIT)
    by_category = await repo.transaction.get_expenses_by_category(organization_id, current.start, current.end)

    return {
        "financial": {
            "totalAssets": float(total_assets),
            "totalLiabilities": float(total_liabilities),
            "netWorth": float(total_assets - total_liabilities),
            "currentMonthIncome": float(income),
            "currentMonthExpenses": float(expenses),
            "currentMonthNetIncome": float(income - expenses),
            "incomeChange": calculate_percentage_change(income, last_income),
            "expenseChange": calculate_percentage_change(expenses, last_expenses),
        },
        "recentTransactions": [
            {
                "id": str(transaction.id),
                "amount": float(transaction.amount),
                "description": transaction.description,
                "date": transaction.transaction_date.isoformat(),
                "type": transaction.transaction_type,
                "categoryName": category.name if category else UNCATEGORIZED,
            }
            for transaction, category in recent
        ],
        "expensesByCategory": [
            {
                "categoryId": str(category.id) if category else None,
                "categoryName": category.name if category else UNCATEGORIZED,
                "amount": float(amount),
                "icon": category.icon if category else None,
                "color": category.color if category else None,
            }
            for category, amount in by_category
        ],
        "meta": {
            "currentMonth": current.start.strftime("%Y-%m"),
            "lastUpdated": dt.datetime.now(dt.timezone.utc).isoformat(),
        },
    }
