from sqlalchemy import select

from src.db.models import Category

from .base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, session) -> None:
        super().__init__(Category, session)

    async def list_for_organization(self, organization_id, transaction_type: str | None = None) -> list[Category]:
        """Transaction categories of the organization, optionally filtered by type."""
        stmt = select(self.model).where(self.model.organization_id == organization_id)

        if transaction_type:
            stmt = stmt.where(self.model.transaction_type == transaction_type)

        result = await self.session.execute(stmt.order_by(self.model.name))

        return list(result.scalars().all())
