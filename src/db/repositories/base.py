import uuid
from typing import Generic, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base class for all repositories: CRUD plus organization-scoped lookups."""

    def __init__(self, model: Type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def get_by_id(self, pk: uuid.UUID) -> ModelType | None:
        return await self.session.get(self.model, pk)

    async def get_for_organization(self, pk: uuid.UUID, organization_id: uuid.UUID) -> ModelType | None:
        """Returns the row only if it belongs to the given organization."""
        stmt = select(self.model).where(
            self.model.id == pk,
            self.model.organization_id == organization_id,
        )
        result = await self.session.execute(stmt)

        return result.scalar_one_or_none()

    async def list_for_organization(self, organization_id: uuid.UUID) -> list[ModelType]:
        stmt = (
            select(self.model)
            .where(self.model.organization_id == organization_id)
            .order_by(self.model.created_at.desc())
        )
        result = await self.session.execute(stmt)

        return list(result.scalars().all())

    async def count_for_organization(self, organization_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(self.model).where(self.model.organization_id == organization_id)
        result = await self.session.execute(stmt)

        return result.scalar_one()

    async def create(self, **data) -> ModelType:
        instance = self.model(**data)
        self.session.add(instance)

        await self.session.commit()
        await self.session.refresh(instance)

        return instance

    async def update(self, instance: ModelType, **data) -> ModelType:
        for key, value in data.items():
            setattr(instance, key, value)

        await self.session.commit()
        await self.session.refresh(instance)

        return instance

    async def delete(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.commit()
