from .asset import Asset
from .asset_category import AssetCategory
from .base import Base
from .category import Category
from .financial_goal import GOAL_PRIORITIES, GOAL_STATUSES, FinancialGoal
from .liability import Liability
from .organization import Organization
from .organization_invitation import INVITATION_ROLES, OrganizationInvitation
from .organization_member import OrganizationMember
from .payment_method import PaymentMethod
from .transaction import Transaction

__all__ = [
    "Base",
    "Organization",
    "OrganizationMember",
    "OrganizationInvitation",
    "AssetCategory",
    "Asset",
    "Liability",
    "Category",
    "PaymentMethod",
    "Transaction",
    "FinancialGoal",
    "GOAL_STATUSES",
    "GOAL_PRIORITIES",
    "INVITATION_ROLES",
]
