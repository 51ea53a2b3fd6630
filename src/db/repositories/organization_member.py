import uuid

from sqlalchemy import select

from src.db.models import OrganizationMember

from .base import BaseRepository


class OrganizationMemberRepository(BaseRepository[OrganizationMember]):
    def __init__(self, session) -> None:
        super().__init__(OrganizationMember, session)

    async def get_membership(self, organization_id: uuid.UUID, user_id: uuid.UUID) -> OrganizationMember | None:
        """Finds the membership linking the user to the organization, with the organization loaded."""
        stmt = select(self.model).where(
            self.model.organization_id == organization_id,
            self.model.user_id == user_id,
        )
        result = await self.session.execute(stmt)

        return result.unique().scalar_one_or_none()
