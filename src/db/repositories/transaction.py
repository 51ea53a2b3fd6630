import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import and_, func, select

from src.db.models import Category, Transaction
from src.db.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    def __init__(self, session):
        super().__init__(Transaction, session)

    async def search(
        self,
        organization_id: uuid.UUID,
        category_id: uuid.UUID | None = None,
        transaction_type: str | None = None,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Transaction]:
        """Returns the organization's transactions matching the filters, newest first."""
        conditions = [self.model.organization_id == organization_id]

        if category_id:
            conditions.append(self.model.category_id == category_id)
        if transaction_type:
            conditions.append(self.model.transaction_type == transaction_type)
        if start_date:
            conditions.append(self.model.transaction_date >= start_date)
        if end_date:
            conditions.append(self.model.transaction_date <= end_date)

        stmt = (
            select(self.model)
            .where(and_(*conditions))
            .order_by(self.model.transaction_date.desc(), self.model.created_at.desc())
        )

        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_total_amount(
        self,
        organization_id: uuid.UUID,
        transaction_type: str,
        start_date: dt.date,
        end_date: dt.date,
    ) -> Decimal:
        stmt = select(func.sum(self.model.amount)).where(
            self.model.organization_id == organization_id,
            self.model.transaction_type == transaction_type,
            self.model.transaction_date >= start_date,
            self.model.transaction_date <= end_date,
        )
        result = await self.session.execute(stmt)
        total = result.scalar_one_or_none()

        return Decimal(str(total)) if total is not None else Decimal(0)

    async def get_recent(self, organization_id: uuid.UUID, limit: int = 10) -> list[tuple[Transaction, Category | None]]:
        """Latest transactions with their category, newest transaction date first."""
        stmt = (
            select(self.model, Category)
            .outerjoin(Category, Category.id == self.model.category_id)
            .where(self.model.organization_id == organization_id)
            .order_by(self.model.transaction_date.desc(), self.model.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)

        return [(transaction, category) for transaction, category in result.all()]

    async def get_expenses_by_category(
        self,
        organization_id: uuid.UUID,
        start_date: dt.date,
        end_date: dt.date,
    ) -> list[tuple[Category | None, Decimal]]:
        """Expense totals per category for the period, largest first."""
        total = func.sum(self.model.amount).label("total")
        stmt = (
            select(self.model.category_id, total)
            .where(
                self.model.organization_id == organization_id,
                self.model.transaction_type == "expense",
                self.model.transaction_date >= start_date,
                self.model.transaction_date <= end_date,
            )
            .group_by(self.model.category_id)
            .order_by(total.desc())
        )
        result = await self.session.execute(stmt)
        rows = result.all()

        category_ids = [category_id for category_id, _ in rows if category_id is not None]
        categories = {}
        if category_ids:
            found = await self.session.execute(select(Category).where(Category.id.in_(category_ids)))
            categories = {category.id: category for category in found.scalars().all()}

        return [(categories.get(category_id), Decimal(str(amount or 0))) for category_id, amount in rows]
