import uuid

from sqlalchemy import select

from src.db.models import FinancialGoal

from .base import BaseRepository

SYNCABLE_STATUSES = ("active", "paused")


class FinancialGoalRepository(BaseRepository[FinancialGoal]):
    def __init__(self, session) -> None:
        super().__init__(FinancialGoal, session)

    async def get_syncable(self, organization_id: uuid.UUID) -> list[FinancialGoal]:
        """Returns the goals whose amounts are recomputed on sync (active and paused)."""
        stmt = select(self.model).where(
            self.model.organization_id == organization_id,
            self.model.status.in_(SYNCABLE_STATUSES),
        )
        result = await self.session.execute(stmt)

        return list(result.scalars().all())
