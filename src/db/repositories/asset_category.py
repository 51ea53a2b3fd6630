from sqlalchemy import select

from src.db.models import AssetCategory

from .base import BaseRepository


class AssetCategoryRepository(BaseRepository[AssetCategory]):
    def __init__(self, session) -> None:
        super().__init__(AssetCategory, session)

    async def list_for_organization(self, organization_id) -> list[AssetCategory]:
        """Asset categories of the organization, ordered by name."""
        stmt = (
            select(self.model)
            .where(self.model.organization_id == organization_id)
            .order_by(self.model.name)
        )
        result = await self.session.execute(stmt)

        return list(result.scalars().all())
