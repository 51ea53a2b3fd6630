from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    AssetCategoryRepository,
    AssetRepository,
    CategoryRepository,
    FinancialGoalRepository,
    LiabilityRepository,
    OrganizationInvitationRepository,
    OrganizationMemberRepository,
    OrganizationRepository,
    PaymentMethodRepository,
    TransactionRepository,
)


class RepoHolder:
    """Holds every repository bound to one session, for passing into route handlers."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.organization = OrganizationRepository(session)
        self.member = OrganizationMemberRepository(session)
        self.invitation = OrganizationInvitationRepository(session)
        self.asset_category = AssetCategoryRepository(session)
        self.asset = AssetRepository(session)
        self.liability = LiabilityRepository(session)
        self.category = CategoryRepository(session)
        self.payment_method = PaymentMethodRepository(session)
        self.transaction = TransactionRepository(session)
        self.goal = FinancialGoalRepository(session)
