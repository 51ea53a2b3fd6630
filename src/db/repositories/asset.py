import uuid
from decimal import Decimal

from sqlalchemy import func, select

from src.db.models import Asset

from .base import BaseRepository


class AssetRepository(BaseRepository[Asset]):
    def __init__(self, session) -> None:
        super().__init__(Asset, session)

    async def get_total_active_value(self, organization_id: uuid.UUID) -> Decimal:
        """Sums current_value over the organization's active assets."""
        stmt = select(func.sum(self.model.current_value)).where(
            self.model.organization_id == organization_id,
            self.model.is_active.is_(True),
        )
        result = await self.session.execute(stmt)
        total = result.scalar_one_or_none()

        return Decimal(str(total)) if total is not None else Decimal(0)
