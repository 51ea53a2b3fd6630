import datetime as dt
import uuid

from sqlalchemy import select, update

from src.db.models import OrganizationInvitation, OrganizationMember

from .base import BaseRepository


class OrganizationInvitationRepository(BaseRepository[OrganizationInvitation]):
    def __init__(self, session) -> None:
        super().__init__(OrganizationInvitation, session)

    async def get_by_token(self, token: str) -> OrganizationInvitation | None:
        stmt = select(self.model).where(self.model.token == token)
        result = await self.session.execute(stmt)

        return result.unique().scalar_one_or_none()

    async def get_pending(self, organization_id: uuid.UUID, email: str) -> OrganizationInvitation | None:
        stmt = select(self.model).where(
            self.model.organization_id == organization_id,
            self.model.email == email,
            self.model.status == "pending",
        )
        result = await self.session.execute(stmt)

        return result.unique().scalars().first()

    async def list_for_organization(self, organization_id: uuid.UUID) -> list[OrganizationInvitation]:
        stmt = (
            select(self.model)
            .where(self.model.organization_id == organization_id)
            .order_by(self.model.created_at.desc())
        )
        result = await self.session.execute(stmt)

        return list(result.unique().scalars().all())

    async def list_received(self, email: str, user_id: uuid.UUID, now: dt.datetime) -> list[OrganizationInvitation]:
        """Pending, unexpired invitations for the email, minus organizations the user already joined."""
        joined = select(OrganizationMember.organization_id).where(OrganizationMember.user_id == user_id)
        stmt = (
            select(self.model)
            .where(
                self.model.email == email,
                self.model.status == "pending",
                self.model.expires_at > now,
                self.model.organization_id.not_in(joined),
            )
            .order_by(self.model.created_at.desc())
        )
        result = await self.session.execute(stmt)

        return list(result.unique().scalars().all())

    async def expire_stale(self, now: dt.datetime) -> None:
        """Marks every pending invitation past its expiry as expired."""
        stmt = (
            update(self.model)
            .where(self.model.status == "pending", self.model.expires_at < now)
            .values(status="expired")
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def accept(self, invitation: OrganizationInvitation, user_id: uuid.UUID, now: dt.datetime) -> None:
        """Adds the membership and closes the invitation in one commit."""
        self.session.add(
            OrganizationMember(organization_id=invitation.organization_id, user_id=user_id, role=invitation.role)
        )
        invitation.status = "accepted"
        invitation.accepted_at = now
        invitation.accepted_by = user_id

        await self.session.commit()
