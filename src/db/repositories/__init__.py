from .asset import AssetRepository
from .asset_category import AssetCategoryRepository
from .base import BaseRepository
from .category import CategoryRepository
from .financial_goal import FinancialGoalRepository
from .liability import LiabilityRepository
from .organization import OrganizationRepository
from .organization_invitation import OrganizationInvitationRepository
from .organization_member import OrganizationMemberRepository
from .payment_method import PaymentMethodRepository
from .transaction import TransactionRepository

__all__ = [
    "BaseRepository",
    "OrganizationRepository",
    "OrganizationMemberRepository",
    "OrganizationInvitationRepository",
    "AssetCategoryRepository",
    "AssetRepository",
    "LiabilityRepository",
    "CategoryRepository",
    "PaymentMethodRepository",
    "TransactionRepository",
    "FinancialGoalRepository",
]
