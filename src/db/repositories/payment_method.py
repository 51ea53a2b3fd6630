from sqlalchemy import select

from src.db.models import PaymentMethod

from .base import BaseRepository


class PaymentMethodRepository(BaseRepository[PaymentMethod]):
    def __init__(self, session) -> None:
        super().__init__(PaymentMethod, session)

    async def get_all_active(self, organization_id) -> list[PaymentMethod]:
        """Returns the organization's active payment methods."""
        stmt = (
            select(self.model)
            .where(
                self.model.organization_id == organization_id,
                self.model.is_active.is_(True),
            )
            .order_by(self.model.name)
        )
        result = await self.session.execute(stmt)

        return list(result.scalars().all())
