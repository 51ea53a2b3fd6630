import uuid

from sqlalchemy import select

from src.db.models import Organization, OrganizationMember

from .base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    def __init__(self, session) -> None:
        super().__init__(Organization, session)

    async def get_for_user(self, user_id: uuid.UUID) -> list[tuple[Organization, str]]:
        """Returns (organization, role) pairs for every membership of the user, newest first."""
        stmt = (
            select(self.model, OrganizationMember.role)
            .join(OrganizationMember, OrganizationMember.organization_id == self.model.id)
            .where(OrganizationMember.user_id == user_id)
            .order_by(self.model.created_at.desc())
        )
        result = await self.session.execute(stmt)

        return [(organization, role) for organization, role in result.all()]

    async def create_with_admin(self, name: str, description: str | None, created_by: uuid.UUID) -> Organization:
        """Creates the organization and the creator's admin membership in one commit."""
        organization = self.model(name=name, description=description, created_by=created_by)
        self.session.add(organization)
        await self.session.flush()

        self.session.add(
            OrganizationMember(organization_id=organization.id, user_id=created_by, role="admin")
        )

        await self.session.commit()
        await self.session.refresh(organization)

        return organization
