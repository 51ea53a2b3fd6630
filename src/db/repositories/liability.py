import uuid
from decimal import Decimal

from sqlalchemy import func, select

from src.db.models import Liability

from .base import BaseRepository


class LiabilityRepository(BaseRepository[Liability]):
    def __init__(self, session) -> None:
        super().__init__(Liability, session)

    async def get_total_amount(self, organization_id: uuid.UUID) -> Decimal:
        """Sums what is still owed across the organization's liabilities."""
        stmt = select(func.sum(self.model.current_amount)).where(self.model.organization_id == organization_id)
        result = await self.session.execute(stmt)
        total = result.scalar_one_or_none()

        return Decimal(str(total)) if total is not None else Decimal(0)
